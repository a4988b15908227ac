"""Inventory and hotbar request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from hearth_backend.api.models import (
    HotbarSlotPayload,
    InstancePayload,
    InventoryResponse,
    NonStackableItemPayload,
    SeenAt,
    StackableItemPayload,
    utc_from_ms,
)
from hearth_backend.game_logic import HotbarStack, StackableEntry
from hearth_backend.shared.value_objects import InstanceRecord

if TYPE_CHECKING:
    from hearth_backend.api.models import HotbarSlotRequest
    from hearth_backend.api.services.player_requests import RequestContext
    from hearth_backend.game_logic import HotbarInstance, Inventory


def hotbar_payload(
    slots: list[HotbarStack | HotbarInstance | None],
) -> list[HotbarSlotPayload | None]:
    payload: list[HotbarSlotPayload | None] = []
    for slot in slots:
        if slot is None:
            payload.append(None)
        elif isinstance(slot, HotbarStack):
            payload.append(HotbarSlotPayload(id=slot.item_id, count=slot.count))
        else:
            payload.append(
                HotbarSlotPayload(
                    id=slot.item_id,
                    count=1,
                    instance_id=slot.instance_id,
                    health=slot.item.health,
                )
            )
    return payload


def inventory_response(context: RequestContext) -> InventoryResponse:
    inventory = context.player.inventory
    stackable: list[StackableItemPayload] = []
    non_stackable: list[NonStackableItemPayload] = []
    for item_id, entry in inventory.get_entries().items():
        unlocked = SeenAt(on=utc_from_ms(entry.first_seen))
        seen = SeenAt(on=utc_from_ms(entry.last_seen))
        if isinstance(entry, StackableEntry):
            stackable.append(
                StackableItemPayload(id=item_id, owned=entry.count, unlocked=unlocked, seen=seen)
            )
        else:
            non_stackable.append(
                NonStackableItemPayload(
                    id=item_id,
                    instances=[
                        InstancePayload(id=instance_id, health=instance.health)
                        for instance_id, instance in entry.instances.items()
                    ],
                    unlocked=unlocked,
                    seen=seen,
                )
            )
    return InventoryResponse(
        hotbar=hotbar_payload(inventory.get_hotbar()),
        stackable_items=stackable,
        non_stackable_items=non_stackable,
    )


@dataclass(frozen=True, slots=True)
class _HotbarAction:
    kind: str
    slot_index: int
    item_id: str = ""
    count: int = 0
    instance_id: str | None = None


def _return_to_inventory(inventory: Inventory, slot_index: int) -> None:
    taken = inventory.take_from_hotbar(slot_index)
    if taken is None:
        return
    if isinstance(taken, HotbarStack):
        inventory.add_items(taken.item_id, taken.count)
    else:
        inventory.add_existing_instance(
            taken.item_id,
            InstanceRecord(instance_id=taken.instance_id, item=taken.item),
        )


def _plan_hotbar(
    current: list[HotbarStack | HotbarInstance | None],
    requested: list[HotbarSlotRequest | None],
) -> list[_HotbarAction]:
    actions: list[_HotbarAction] = []
    for index, (existing, wanted) in enumerate(zip(current, requested, strict=True)):
        if wanted is None:
            if existing is not None:
                actions.append(_HotbarAction("remove", index))
            continue
        if wanted.instance_id is None:
            if isinstance(existing, HotbarStack) and existing.item_id == wanted.id:
                delta = wanted.count - existing.count
                if delta > 0:
                    actions.append(_HotbarAction("put", index, wanted.id, delta))
                elif delta < 0:
                    actions.append(_HotbarAction("take", index, wanted.id, -delta))
                continue
            if existing is not None:
                actions.append(_HotbarAction("remove", index))
            actions.append(_HotbarAction("put", index, wanted.id, wanted.count))
            continue
        if (
            existing is not None
            and not isinstance(existing, HotbarStack)
            and existing.item_id == wanted.id
            and existing.instance_id == wanted.instance_id
        ):
            continue
        if existing is not None:
            actions.append(_HotbarAction("remove", index))
        actions.append(
            _HotbarAction("put", index, wanted.id, 1, instance_id=wanted.instance_id)
        )
    return actions


def update_hotbar(
    context: RequestContext, requested: list[HotbarSlotRequest | None]
) -> list[HotbarSlotPayload | None] | None:
    """Rearrange the hotbar to match *requested* as far as the inventory allows.

    Slots are emptied first and filled afterwards so items can move between
    slots in one request. A move the inventory cannot back is skipped.
    """
    player = context.player
    inventory = player.inventory
    current = inventory.get_hotbar()
    if len(requested) != len(current):
        return None
    for wanted in requested:
        if wanted is None:
            continue
        stackable = player.catalog.is_item_stackable(wanted.id)
        if stackable == (wanted.instance_id is not None):
            return None

    actions = _plan_hotbar(current, requested)
    for action in actions:
        if action.kind == "remove":
            _return_to_inventory(inventory, action.slot_index)
        elif action.kind == "take":
            taken = inventory.take_from_hotbar(action.slot_index, action.count)
            if isinstance(taken, HotbarStack):
                inventory.add_items(taken.item_id, taken.count)
    for action in actions:
        if action.kind != "put":
            continue
        if action.instance_id is not None:
            instance = inventory.remove_instance(action.item_id, action.instance_id)
            if instance is None:
                continue
            record = InstanceRecord(instance_id=action.instance_id, item=instance)
            if not inventory.put_instance_on_hotbar(action.slot_index, action.item_id, record):
                inventory.add_existing_instance(action.item_id, record)
        elif inventory.remove_stackable(action.item_id, action.count) and not (
            inventory.put_stack_on_hotbar(action.slot_index, action.item_id, action.count)
        ):
            inventory.add_items(action.item_id, action.count)
    return hotbar_payload(inventory.get_hotbar())


__all__ = ["hotbar_payload", "inventory_response", "update_hotbar"]
