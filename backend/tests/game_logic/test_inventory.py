"""Tests for inventory, hotbar and ruby balance bookkeeping."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hearth_backend.game_logic import (
    HOTBAR_SIZE,
    HotbarInstance,
    HotbarStack,
    NonStackableEntry,
    SplitRubies,
    StackableEntry,
)
from hearth_backend.shared import (
    DEFAULT_INSTANCE_HEALTH,
    InstanceRecord,
    NonStackableItems,
    StackableItems,
)

if TYPE_CHECKING:
    from hearth_backend.game_logic import Player
    from hearth_backend.shared import ManualClock


def gem_ids(player: Player) -> list[str]:
    entry = player.inventory.get_entry("gem")
    assert isinstance(entry, NonStackableEntry)
    return sorted(entry.instances)


def test_stackable_items_accumulate(player: Player, clock: ManualClock) -> None:
    clock.set(1_000)
    player.inventory.add_items("log", 5)
    clock.set(2_000)
    player.inventory.add_items("log", 3, update_last_seen=True)

    entry = player.inventory.get_entry("log")
    assert entry == StackableEntry(count=8, first_seen=1_000, last_seen=2_000)
    assert player.inventory.remove_stackable("log", 8)
    assert not player.inventory.remove_stackable("log", 1)


def test_non_stackable_items_get_instances(player: Player) -> None:
    player.inventory.add_items("gem", 2)
    instances = gem_ids(player)
    assert len(instances) == 2

    removed = player.inventory.remove_instance("gem", instances[0])
    assert removed is not None
    assert removed.health == DEFAULT_INSTANCE_HEALTH
    assert player.inventory.remove_instance("gem", instances[0]) is None
    assert gem_ids(player) == instances[1:]


def test_add_items_rejects_non_positive_counts(player: Player) -> None:
    with pytest.raises(ValueError, match="positive"):
        player.inventory.add_items("log", 0)


def test_existing_instance_is_not_duplicated(player: Player) -> None:
    record = InstanceRecord(instance_id="gem-1")
    assert player.inventory.add_existing_instance("gem", record)
    assert not player.inventory.add_existing_instance("gem", record)
    assert gem_ids(player) == ["gem-1"]


def test_add_input_items_restores_batches(player: Player) -> None:
    player.inventory.add_input_items(StackableItems(item_id="log", count=2))
    player.inventory.add_input_items(
        NonStackableItems(item_id="gem", instances=(InstanceRecord(instance_id="gem-1"),))
    )
    entry = player.inventory.get_entry("log")
    assert isinstance(entry, StackableEntry)
    assert entry.count == 2
    assert gem_ids(player) == ["gem-1"]


def test_hotbar_starts_empty(player: Player) -> None:
    assert player.inventory.get_hotbar() == [None] * HOTBAR_SIZE


def test_hotbar_stacks_respect_limit(player: Player) -> None:
    inventory = player.inventory
    assert inventory.put_stack_on_hotbar(0, "log", 60)
    assert inventory.put_stack_on_hotbar(0, "log", 4)
    assert not inventory.put_stack_on_hotbar(0, "log", 1)
    assert not inventory.put_stack_on_hotbar(0, "planks", 1)
    assert not inventory.put_stack_on_hotbar(1, "log", 65)
    assert inventory.get_hotbar()[0] == HotbarStack(item_id="log", count=64)


def test_take_from_hotbar(player: Player) -> None:
    inventory = player.inventory
    inventory.put_stack_on_hotbar(2, "log", 10)
    assert inventory.take_from_hotbar(2, 4) == HotbarStack(item_id="log", count=4)
    assert inventory.take_from_hotbar(2, 7) is None
    assert inventory.take_from_hotbar(2) == HotbarStack(item_id="log", count=6)
    assert inventory.get_hotbar()[2] is None
    assert inventory.take_from_hotbar(2) is None


def test_hotbar_holds_one_instance_per_slot(player: Player) -> None:
    inventory = player.inventory
    record = InstanceRecord(instance_id="gem-1")
    assert inventory.put_instance_on_hotbar(3, "gem", record)
    assert not inventory.put_instance_on_hotbar(3, "gem", InstanceRecord(instance_id="gem-2"))
    slot = inventory.get_hotbar()[3]
    assert isinstance(slot, HotbarInstance)
    assert slot.instance_id == "gem-1"


def test_collect_items_prefers_hotbar(player: Player) -> None:
    inventory = player.inventory
    inventory.add_items("log", 10)
    inventory.put_stack_on_hotbar(0, "log", 3)

    collected = inventory.collect_items("log", 5, None)
    assert collected == StackableItems(item_id="log", count=5)
    assert inventory.get_hotbar()[0] is None
    entry = inventory.get_entry("log")
    assert isinstance(entry, StackableEntry)
    assert entry.count == 8


def test_collect_items_caps_at_max_count(player: Player) -> None:
    player.inventory.add_items("coal", 10)
    collected = player.inventory.collect_items("coal", 10, None, max_count=2)
    assert collected == StackableItems(item_id="coal", count=2)


def test_collect_items_fails_when_short(player: Player) -> None:
    player.inventory.add_items("log", 2)
    assert player.inventory.collect_items("log", 3, None) is None
    assert player.inventory.collect_items("log", 1, ["instance"]) is None


def test_collect_instances_from_hotbar_and_inventory(player: Player) -> None:
    inventory = player.inventory
    inventory.add_existing_instance("gem", InstanceRecord(instance_id="gem-1"))
    inventory.put_instance_on_hotbar(1, "gem", InstanceRecord(instance_id="gem-2"))

    collected = inventory.collect_items("gem", 2, ["gem-2", "gem-1"])
    assert isinstance(collected, NonStackableItems)
    assert [record.instance_id for record in collected.instances] == ["gem-2", "gem-1"]
    assert inventory.get_hotbar()[1] is None
    assert gem_ids(player) == []

    assert inventory.collect_items("gem", 1, None) is None
    assert inventory.collect_items("gem", 1, ["missing"]) is None


def test_rubies_spend_purchased_first(player: Player) -> None:
    rubies = player.rubies
    assert rubies.get() == SplitRubies()
    rubies.add_purchased(3)
    rubies.add_earned(10)

    assert rubies.spend(5)
    assert rubies.get() == SplitRubies(purchased=0, earned=8)
    assert not rubies.spend(9)
    assert rubies.get().total == 8


def test_rubies_reject_non_positive_amounts(player: Player) -> None:
    with pytest.raises(ValueError, match="positive"):
        player.rubies.spend(0)
