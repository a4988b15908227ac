"""Player inventory and hotbar stored in the ``player`` document."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from hearth_backend.game_logic.slots import PLAYER_COLLECTION
from hearth_backend.shared.value_objects import (
    InputItems,
    InstanceRecord,
    ItemInstance,
    NonStackableItems,
    StackableItems,
)

if TYPE_CHECKING:
    from hearth_backend.game_logic.player import Player

HOTBAR_SIZE = 7
HOTBAR_STACK_LIMIT = 64


class StackableEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["stackable"] = "stackable"
    count: int = Field(default=0, ge=0)
    first_seen: int
    last_seen: int


class NonStackableEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["non_stackable"] = "non_stackable"
    instances: dict[str, ItemInstance] = Field(default_factory=dict)
    first_seen: int
    last_seen: int


InventoryEntry = Annotated[StackableEntry | NonStackableEntry, Field(discriminator="kind")]


class HotbarStack(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["stackable"] = "stackable"
    item_id: str
    count: int = Field(..., ge=0)


class HotbarInstance(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["non_stackable"] = "non_stackable"
    item_id: str
    instance_id: str
    item: ItemInstance = Field(default_factory=ItemInstance)


HotbarItem = Annotated[HotbarStack | HotbarInstance, Field(discriminator="kind")]

_INVENTORY_ADAPTER: TypeAdapter[dict[str, StackableEntry | NonStackableEntry]] = (
    TypeAdapter(dict[str, InventoryEntry])
)
_HOTBAR_ADAPTER: TypeAdapter[list[HotbarStack | HotbarInstance | None]] = TypeAdapter(
    list[HotbarItem | None]
)


class Inventory:
    """Items a player owns, split between the inventory and the hotbar.

    Every operation reads through the player's transaction, so two views of
    the same player inside one request always agree.
    """

    def __init__(self, player: Player) -> None:
        self._player = player

    def get_entries(self) -> dict[str, StackableEntry | NonStackableEntry]:
        raw = self._get("inventory")
        return _INVENTORY_ADAPTER.validate_python(raw or {})

    def get_hotbar(self) -> list[HotbarStack | HotbarInstance | None]:
        raw = self._get("hotbar")
        if raw is None:
            return [None] * HOTBAR_SIZE
        return _HOTBAR_ADAPTER.validate_python(raw)

    def get_entry(self, item_id: str) -> StackableEntry | NonStackableEntry | None:
        return self.get_entries().get(item_id)

    def add_items(self, item_id: str, count: int, *, update_last_seen: bool = False) -> None:
        """Add *count* units; non-stackable items get fresh instances."""
        _require_positive(count)
        stackable = self._player.catalog.is_item_stackable(item_id)
        self._ensure_entry(item_id, stackable=stackable)
        if stackable:
            self._increment(f"inventory.{item_id}.count", count)
        else:
            for _ in range(count):
                self._set(
                    f"inventory.{item_id}.instances.{uuid.uuid4()}",
                    ItemInstance().model_dump(mode="json"),
                )
        if update_last_seen:
            self._set(f"inventory.{item_id}.last_seen", self._player.clock.now_ms())

    def add_existing_instance(
        self, item_id: str, record: InstanceRecord, *, update_last_seen: bool = False
    ) -> bool:
        """Put a known instance back; fails if it is already present."""
        entry = self.get_entry(item_id)
        if isinstance(entry, StackableEntry) or (
            entry is not None and record.instance_id in entry.instances
        ):
            return False
        self._ensure_entry(item_id, stackable=False)
        self._set(
            f"inventory.{item_id}.instances.{record.instance_id}",
            record.item.model_dump(mode="json"),
        )
        if update_last_seen:
            self._set(f"inventory.{item_id}.last_seen", self._player.clock.now_ms())
        return True

    def add_input_items(self, items: InputItems) -> None:
        """Return an escrowed or refunded batch to the inventory."""
        if isinstance(items, StackableItems):
            if items.count > 0:
                self.add_items(items.item_id, items.count)
            return
        for record in items.instances:
            self.add_existing_instance(items.item_id, record)

    def remove_stackable(self, item_id: str, count: int) -> bool:
        _require_positive(count)
        entry = self.get_entry(item_id)
        if not isinstance(entry, StackableEntry) or entry.count < count:
            return False
        self._increment(f"inventory.{item_id}.count", -count)
        return True

    def remove_instance(self, item_id: str, instance_id: str) -> ItemInstance | None:
        entry = self.get_entry(item_id)
        if not isinstance(entry, NonStackableEntry) or instance_id not in entry.instances:
            return None
        self._delete(f"inventory.{item_id}.instances.{instance_id}")
        return entry.instances[instance_id]

    def put_stack_on_hotbar(self, slot_index: int, item_id: str, count: int) -> bool:
        _require_positive(count)
        slot = self.get_hotbar()[slot_index]
        if slot is None and count <= HOTBAR_STACK_LIMIT:
            self._ensure_hotbar()
            self._set(
                f"hotbar.{slot_index}",
                HotbarStack(item_id=item_id, count=count).model_dump(mode="json"),
            )
            return True
        if (
            isinstance(slot, HotbarStack)
            and slot.item_id == item_id
            and slot.count + count <= HOTBAR_STACK_LIMIT
        ):
            self._increment(f"hotbar.{slot_index}.count", count)
            return True
        return False

    def put_instance_on_hotbar(
        self, slot_index: int, item_id: str, record: InstanceRecord
    ) -> bool:
        if self.get_hotbar()[slot_index] is not None:
            return False
        self._ensure_hotbar()
        slot = HotbarInstance(
            item_id=item_id, instance_id=record.instance_id, item=record.item
        )
        self._set(f"hotbar.{slot_index}", slot.model_dump(mode="json"))
        return True

    def take_from_hotbar(
        self, slot_index: int, count: int | None = None
    ) -> HotbarStack | HotbarInstance | None:
        """Remove *count* units (default: all) from a hotbar slot."""
        if count is not None:
            _require_positive(count)
        slot = self.get_hotbar()[slot_index]
        if slot is None:
            return None
        held = slot.count if isinstance(slot, HotbarStack) else 1
        take = held if count is None else count
        if take > held:
            return None
        if take == held:
            self._delete(f"hotbar.{slot_index}")
        else:
            self._increment(f"hotbar.{slot_index}.count", -take)
        if isinstance(slot, HotbarStack):
            return slot.model_copy(update={"count": take})
        return slot

    def collect_items(
        self,
        item_id: str,
        quantity: int,
        instance_ids: list[str] | None,
        max_count: int | None = None,
    ) -> InputItems | None:
        """Take items for a workshop request, hotbar first, then inventory.

        Returns ``None`` when the player does not hold the requested items;
        the caller's transaction must then be discarded.
        """
        if self._player.catalog.is_item_stackable(item_id):
            if instance_ids is not None:
                return None
            target = quantity if max_count is None else min(quantity, max_count)
            collected = 0
            for index, slot in enumerate(self.get_hotbar()):
                if collected >= target:
                    break
                if isinstance(slot, HotbarStack) and slot.item_id == item_id:
                    taken = self.take_from_hotbar(index, min(target - collected, slot.count))
                    collected += taken.count if isinstance(taken, HotbarStack) else 0
            if collected < target and not self.remove_stackable(item_id, target - collected):
                return None
            return StackableItems(item_id=item_id, count=target)

        if instance_ids is None:
            return None
        records: list[InstanceRecord] = []
        for instance_id in instance_ids:
            if max_count is not None and len(records) == max_count:
                break
            instance = self._take_instance_from_hotbar(item_id, instance_id)
            if instance is None:
                instance = self.remove_instance(item_id, instance_id)
            if instance is None:
                return None
            records.append(InstanceRecord(instance_id=instance_id, item=instance))
        return NonStackableItems(item_id=item_id, instances=tuple(records))

    def _take_instance_from_hotbar(self, item_id: str, instance_id: str) -> ItemInstance | None:
        for index, slot in enumerate(self.get_hotbar()):
            if (
                isinstance(slot, HotbarInstance)
                and slot.item_id == item_id
                and slot.instance_id == instance_id
            ):
                self.take_from_hotbar(index)
                return slot.item
        return None

    def _ensure_entry(self, item_id: str, *, stackable: bool) -> None:
        now = self._player.clock.now_ms()
        entry = (
            StackableEntry(first_seen=now, last_seen=now)
            if stackable
            else NonStackableEntry(first_seen=now, last_seen=now)
        )
        self._player.transaction.create_if_not_exists(
            PLAYER_COLLECTION, self._player.user_id, "inventory", {}
        )
        self._player.transaction.create_if_not_exists(
            PLAYER_COLLECTION,
            self._player.user_id,
            f"inventory.{item_id}",
            entry.model_dump(mode="json"),
        )

    def _ensure_hotbar(self) -> None:
        self._player.transaction.create_if_not_exists(
            PLAYER_COLLECTION, self._player.user_id, "hotbar", [None] * HOTBAR_SIZE
        )

    def _get(self, path: str) -> object:
        return self._player.transaction.get(PLAYER_COLLECTION, self._player.user_id, path)

    def _set(self, path: str, value: object) -> None:
        self._player.transaction.set(PLAYER_COLLECTION, self._player.user_id, path, value)

    def _increment(self, path: str, amount: int) -> None:
        self._player.transaction.increment(
            PLAYER_COLLECTION, self._player.user_id, path, amount
        )

    def _delete(self, path: str) -> None:
        self._player.transaction.delete(PLAYER_COLLECTION, self._player.user_id, path)


def _require_positive(count: int) -> None:
    if count <= 0:
        msg = f"Item count must be positive, got {count}."
        raise ValueError(msg)


__all__ = [
    "HOTBAR_SIZE",
    "HOTBAR_STACK_LIMIT",
    "HotbarInstance",
    "HotbarStack",
    "Inventory",
    "NonStackableEntry",
    "StackableEntry",
]
