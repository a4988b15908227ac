"""Tests for smelting furnaces and heat carry-over."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hearth_backend.game_logic import (
    ActiveBurn,
    BankedHeat,
    FurnaceFuel,
    IdleSmeltingSlot,
)
from hearth_backend.game_logic.slots import PLAYER_COLLECTION
from hearth_backend.shared import ItemCount, NonStackableItems, StackableItems

if TYPE_CHECKING:
    from hearth_backend.game_logic import Player
    from hearth_backend.shared import ManualClock


def ore(count: int) -> StackableItems:
    return StackableItems(item_id="iron_ore", count=count)


def stack(item_id: str, count: int) -> StackableItems:
    return StackableItems(item_id=item_id, count=count)


def bank_kindling(player: Player, remaining_heat: int) -> BankedHeat:
    banked = BankedHeat(
        fuel=FurnaceFuel(item=stack("kindling", 1), burn_duration=15, heat_per_second=1),
        remaining_heat=remaining_heat,
    )
    player.transaction.set(
        PLAYER_COLLECTION,
        player.user_id,
        player.workshop.smelting_slots[0].state_path,
        IdleSmeltingSlot(heat_carried_over=banked).model_dump(mode="json"),
    )
    return banked


def test_start_requires_enough_heat(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    assert not slot.start("smelt-1", "iron_ingot", 2, ore(2), stack("kindling", 1))
    assert slot.get_session_state() is None


def test_carried_heat_counts_towards_start(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    banked = bank_kindling(player, 5)

    assert slot.start("smelt-1", "iron_ingot", 2, ore(2), stack("kindling", 1))
    session = slot.get_session_state()
    assert session is not None
    assert session.heat_carried_over == banked
    assert slot.get_banked_heat() is None


def test_start_without_fuel_uses_banked_heat(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    bank_kindling(player, 10)
    assert slot.start("smelt-1", "iron_ingot", 1, ore(1), None)


@pytest.mark.parametrize(
    ("recipe_id", "rounds", "input_items", "fuel_items"),
    [
        ("unknown", 1, ore(1), stack("coal", 1)),
        ("iron_ingot", 0, ore(0), stack("coal", 1)),
        ("iron_ingot", 2, ore(1), stack("coal", 1)),
        ("iron_ingot", 1, stack("log", 1), stack("coal", 1)),
        ("iron_ingot", 1, ore(1), stack("log", 1)),
        ("iron_ingot", 1, ore(1), NonStackableItems(item_id="lava_bucket")),
    ],
)
def test_start_rejects_invalid_requests(
    player: Player,
    recipe_id: str,
    rounds: int,
    input_items: StackableItems,
    fuel_items: StackableItems | NonStackableItems,
) -> None:
    slot = player.workshop.smelting_slots[0]
    assert not slot.start("smelt-1", recipe_id, rounds, input_items, fuel_items)


def test_fuel_with_return_items_is_rejected(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    buckets = NonStackableItems.model_validate(
        {"item_id": "lava_bucket", "instances": [{"instance_id": "bucket-1"}]}
    )
    assert not slot.start("smelt-1", "iron_ingot", 1, ore(1), buckets)


def test_rounds_follow_heat_release(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 3, ore(3), stack("coal", 2))
    session = slot.get_session_state()
    assert session is not None

    instant = slot.get_instant_state(session, now=5_000)
    assert instant.completed_rounds == 0
    assert instant.next_completion_time == 5_000
    assert slot.get_instant_state(session, now=5_001).completed_rounds == 1

    instant = slot.get_instant_state(session, now=12_000)
    assert instant.completed_rounds == 2
    assert instant.available_rounds == 2
    assert instant.input == ore(1)
    assert instant.output == ItemCount(item_id="iron_ingot", count=2)
    assert instant.next_completion_time == 15_000
    assert instant.total_completion_time == 15_000
    assert instant.fuel is None
    assert isinstance(instant.heat, ActiveBurn)
    assert instant.heat.remaining_heat == 16
    assert instant.heat.burn_start_time == 10_000
    assert instant.heat.burn_end_time == 15_000
    assert instant.heat_consumed == 24


def test_round_is_pending_at_its_own_completion_time(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 1, ore(1), stack("coal", 1))
    session = slot.get_session_state()
    assert session is not None

    at_boundary = slot.get_instant_state(session, now=5_000)
    assert at_boundary.completed_rounds == 0
    assert not at_boundary.complete
    assert at_boundary.total_completion_time == 5_000

    just_after = slot.get_instant_state(session, now=5_001)
    assert just_after.complete
    assert just_after.available_rounds == 1


def test_partly_burned_unit_reports_rounded_up_heat(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 1, ore(1), stack("charcoal", 1))
    session = slot.get_session_state()
    assert session is not None

    instant = slot.get_instant_state(session, now=500)
    assert isinstance(instant.heat, ActiveBurn)
    assert instant.heat.remaining_heat == 10
    assert instant.next_completion_time == 3_334
    assert slot.get_instant_state(session, now=3_334).completed_rounds == 0
    assert slot.get_instant_state(session, now=3_335).completed_rounds == 1


def test_carried_heat_burns_first(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    bank_kindling(player, 5)
    assert slot.start("smelt-1", "iron_ingot", 1, ore(1), stack("coal", 1))
    session = slot.get_session_state()
    assert session is not None

    instant = slot.get_instant_state(session, now=3_000)
    assert isinstance(instant.heat, ActiveBurn)
    assert instant.heat.fuel.item.item_id == "kindling"
    assert instant.heat.remaining_heat == 2
    assert instant.fuel is not None
    assert instant.fuel.quantity == 1

    instant = slot.get_instant_state(session, now=6_000)
    assert isinstance(instant.heat, ActiveBurn)
    assert instant.heat.fuel.item.item_id == "coal"
    assert instant.heat.remaining_heat == 18
    assert instant.fuel is None

    clock.set(7_501)
    result = slot.collect()
    assert result is not None
    assert result.output == ItemCount(item_id="iron_ingot", count=1)
    assert result.unused_fuel is None
    banked = slot.get_banked_heat()
    assert banked is not None
    assert banked.fuel.item.item_id == "coal"
    assert banked.remaining_heat == 15


def test_collect_banks_heat_and_refunds_queue(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 1, ore(1), stack("coal", 3))

    clock.set(6_000)
    result = slot.collect()
    assert result is not None
    assert result.output == ItemCount(item_id="iron_ingot", count=1)
    assert result.unused_fuel == stack("coal", 2)
    assert slot.get_session_state() is None
    banked = slot.get_banked_heat()
    assert banked is not None
    assert banked.remaining_heat == 10


def test_partial_collect_keeps_session(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 3, ore(3), stack("coal", 2))

    clock.set(12_000)
    result = slot.collect()
    assert result is not None
    assert result.output.count == 2
    assert result.unused_fuel is None
    session = slot.get_session_state()
    assert session is not None
    assert session.collected_rounds == 2

    clock.set(20_000)
    result = slot.collect()
    assert result is not None
    assert result.output.count == 1
    banked = slot.get_banked_heat()
    assert banked is not None
    assert banked.remaining_heat == 10


def test_cancel_banks_heat_and_returns_everything(
    player: Player, clock: ManualClock
) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 2, ore(2), stack("coal", 3))

    clock.set(3_000)
    result = slot.cancel()
    assert result is not None
    assert result.output is None
    assert result.input == ore(2)
    assert result.unused_fuel == stack("coal", 2)
    banked = slot.get_banked_heat()
    assert banked is not None
    assert banked.remaining_heat == 14
    # banked heat plus refunded fuel plus burned heat equals what went in
    assert banked.remaining_heat + 2 * 20 + 6 == 3 * 20


def test_cancel_after_some_rounds(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 3, ore(3), stack("coal", 2))

    clock.set(12_000)
    result = slot.cancel()
    assert result is not None
    assert result.output == ItemCount(item_id="iron_ingot", count=2)
    assert result.input == ore(1)
    assert result.unused_fuel is None


def test_finish_now_burns_exact_heat(player: Player, clock: ManualClock) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 3, ore(3), stack("coal", 2))

    clock.set(2_000)
    assert slot.finish_now()
    assert not slot.finish_now()
    session = slot.get_session_state()
    assert session is not None
    instant = slot.get_instant_state(session)
    assert instant.complete
    assert instant.next_completion_time is None
    assert instant.total_completion_time == 2_000
    assert isinstance(instant.heat, BankedHeat)
    assert instant.heat.remaining_heat == 10
    assert instant.heat_consumed == 30

    result = slot.collect()
    assert result is not None
    assert result.output.count == 3
    banked = slot.get_banked_heat()
    assert banked is not None
    assert banked.remaining_heat == 10
    assert not slot.finish_now()


def test_instant_state_is_idempotent(player: Player) -> None:
    slot = player.workshop.smelting_slots[0]
    assert slot.start("smelt-1", "iron_ingot", 3, ore(3), stack("coal", 2))
    session = slot.get_session_state()
    assert session is not None

    previous = -1
    for now in range(0, 20_000, 750):
        instant = slot.get_instant_state(session, now=now)
        assert instant == slot.get_instant_state(session, now=now)
        assert instant.completed_rounds >= previous
        assert instant.heat_consumed <= 3 * 10
        previous = instant.completed_rounds
