"""Workshop request handlers: inventory debits, slot actions, responses.

Every handler runs inside :class:`PlayerRequestService` and returns ``None``
to reject the request, which discards everything it already changed.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from hearth_backend.api.models import (
    BurningPayload,
    BurnRatePayload,
    CollectResponse,
    CraftingSlotResponse,
    EscrowEntry,
    FinishPriceResponse,
    FuelPayload,
    ItemQuantity,
    RewardItem,
    Rewards,
    SmeltingSlotResponse,
    SplitRubiesResponse,
    UnlockPrice,
    UtilityBlocksResponse,
    utc_from_ms,
)
from hearth_backend.game_logic import (
    ActiveBurn,
    CraftingSlot,
    FurnaceFuel,
    SmeltingSessionState,
    SmeltingSlot,
    get_price_to_finish,
)
from hearth_backend.shared.durations import format_duration, parse_duration
from hearth_backend.shared.enums import SequenceField, SlotKind, SlotStatus
from hearth_backend.shared.value_objects import (
    InputItems,
    ItemCount,
    NonStackableItems,
    StackableItems,
)

if TYPE_CHECKING:
    from hearth_backend.api.models import (
        CraftingStartRequest,
        PurchaseRequest,
        RequestItem,
        SmeltingStartRequest,
    )
    from hearth_backend.api.services.player_requests import RequestContext
    from hearth_backend.game_logic import (
        BankedHeat,
        Player,
        WorkshopConfiguration,
        WorkshopSlot,
    )

logger = logging.getLogger(__name__)

_SEQUENCE_FOR_KIND = {
    SlotKind.CRAFTING: SequenceField.CRAFTING,
    SlotKind.SMELTING: SequenceField.SMELTING,
}


def crafting_slot_at(player: Player, number: int) -> CraftingSlot | None:
    """Return the crafting slot with 1-based *number*."""
    slots = player.workshop.crafting_slots
    return slots[number - 1] if 1 <= number <= len(slots) else None


def smelting_slot_at(player: Player, number: int) -> SmeltingSlot | None:
    """Return the furnace with 1-based *number*."""
    slots = player.workshop.smelting_slots
    return slots[number - 1] if 1 <= number <= len(slots) else None


def _escrow_entry(items: InputItems) -> EscrowEntry:
    if isinstance(items, StackableItems):
        return EscrowEntry(item_id=items.item_id, quantity=items.count)
    return EscrowEntry(
        item_id=items.item_id,
        quantity=items.quantity,
        item_instance_ids=[record.instance_id for record in items.instances],
    )


def _fuel_payload(fuel: FurnaceFuel) -> FuelPayload:
    instance_ids = (
        [record.instance_id for record in fuel.item.instances]
        if isinstance(fuel.item, NonStackableItems)
        else None
    )
    return FuelPayload(
        burn_rate=BurnRatePayload(
            burn_time=fuel.burn_duration, heat_per_second=fuel.heat_per_second
        ),
        item_id=fuel.item.item_id,
        quantity=fuel.quantity,
        item_instance_ids=instance_ids,
    )


def _paused_burning(heat: BankedHeat) -> BurningPayload:
    fuel = heat.fuel
    return BurningPayload(
        remaining_burn_time=format_duration(round(heat.remaining_heat / fuel.heat_per_second)),
        heat_depleted=fuel.unit_heat - heat.remaining_heat,
        fuel=_fuel_payload(fuel),
    )


def crafting_slot_response(context: RequestContext, slot: CraftingSlot) -> CraftingSlotResponse:
    response = CraftingSlotResponse(
        stream_version=context.session.get_sequence_number(SequenceField.CRAFTING)
    )
    lock = slot.get_lock_state()
    if lock.locked:
        return response.model_copy(
            update={
                "state": SlotStatus.LOCKED,
                "unlock_price": UnlockPrice(cost=lock.unlock_price or 0),
            }
        )
    session = slot.get_session_state()
    if session is None:
        return response
    instant = slot.get_instant_state(session)
    return response.model_copy(
        update={
            "session_id": session.session_id,
            "recipe_id": session.recipe_id,
            "output": (
                ItemQuantity(item_id=instant.output.item_id, quantity=instant.output.count)
                if instant.output.count > 0
                else None
            ),
            # All of the committed input, including what finished rounds used up.
            "escrow": [_escrow_entry(items) for items in session.input],
            "completed": instant.completed_rounds,
            "available": instant.available_rounds,
            "total": session.total_rounds,
            "next_completion_utc": (
                utc_from_ms(instant.next_completion_time)
                if instant.next_completion_time is not None
                else None
            ),
            "total_completion_utc": utc_from_ms(instant.total_completion_time),
            "state": SlotStatus.COMPLETED if instant.complete else SlotStatus.ACTIVE,
        }
    )


def smelting_slot_response(context: RequestContext, slot: SmeltingSlot) -> SmeltingSlotResponse:
    response = SmeltingSlotResponse(
        stream_version=context.session.get_sequence_number(SequenceField.SMELTING)
    )
    lock = slot.get_lock_state()
    if lock.locked:
        return response.model_copy(
            update={
                "state": SlotStatus.LOCKED,
                "unlock_price": UnlockPrice(cost=lock.unlock_price or 0),
            }
        )
    record = slot.get_record()
    if not isinstance(record, SmeltingSessionState):
        if record.heat_carried_over is None:
            return response
        return response.model_copy(
            update={"burning": _paused_burning(record.heat_carried_over)}
        )

    instant = slot.get_instant_state(record)
    heat = instant.heat
    if isinstance(heat, ActiveBurn):
        burning = BurningPayload(
            burn_start_time=utc_from_ms(heat.burn_start_time),
            burns_until=utc_from_ms(heat.burn_end_time),
            fuel=_fuel_payload(heat.fuel),
        )
    else:
        burning = _paused_burning(heat)
    return response.model_copy(
        update={
            "fuel": _fuel_payload(instant.fuel) if instant.fuel is not None else None,
            "burning": burning,
            "session_id": record.session_id,
            "recipe_id": record.recipe_id,
            "output": ItemQuantity(item_id=record.output_item_id, quantity=1),
            "escrow": [_escrow_entry(instant.input)] if instant.input is not None else [],
            "completed": instant.completed_rounds,
            "available": instant.available_rounds,
            "total": record.total_rounds,
            "next_completion_utc": (
                utc_from_ms(instant.next_completion_time)
                if instant.next_completion_time is not None
                else None
            ),
            "total_completion_utc": utc_from_ms(instant.total_completion_time),
            "state": SlotStatus.COMPLETED if instant.complete else SlotStatus.ACTIVE,
        }
    )


def utility_blocks(context: RequestContext) -> UtilityBlocksResponse:
    workshop = context.player.workshop
    return UtilityBlocksResponse(
        crafting={
            str(index + 1): crafting_slot_response(context, slot)
            for index, slot in enumerate(workshop.crafting_slots)
        },
        smelting={
            str(index + 1): smelting_slot_response(context, slot)
            for index, slot in enumerate(workshop.smelting_slots)
        },
    )


def _collect_request_item(
    player: Player, item: RequestItem, max_count: int | None = None
) -> InputItems | None:
    return player.inventory.collect_items(
        item.item_id, item.quantity, item.item_instance_ids, max_count
    )


def _rewards(output: ItemCount) -> CollectResponse:
    return CollectResponse(
        rewards=Rewards(inventory=[RewardItem(id=output.item_id, amount=output.count)])
    )


def _credit_output(player: Player, output: ItemCount | None) -> None:
    if output is not None and output.count > 0:
        player.inventory.add_items(output.item_id, output.count, update_last_seen=True)


def start_crafting(
    context: RequestContext, number: int, request: CraftingStartRequest
) -> dict[str, object] | None:
    player = context.player
    slot = crafting_slot_at(player, number)
    if slot is None or slot.get_lock_state().locked:
        return None
    ingredients: list[InputItems] = []
    for ingredient in request.ingredients:
        collected = _collect_request_item(player, ingredient)
        if collected is None:
            logger.debug("Player %s lacks ingredient %s", player.user_id, ingredient.item_id)
            return None
        ingredients.append(collected)
    if not slot.start(
        request.session_id, request.recipe_id, request.multiplier, tuple(ingredients)
    ):
        return None
    context.session.invalidate(SequenceField.CRAFTING, SequenceField.INVENTORY)
    return {}


def collect_crafting(context: RequestContext, number: int) -> CollectResponse | None:
    slot = crafting_slot_at(context.player, number)
    if slot is None:
        return None
    output = slot.collect()
    if output is None:
        return None
    context.session.invalidate(
        SequenceField.CRAFTING, SequenceField.INVENTORY, SequenceField.JOURNAL
    )
    _credit_output(context.player, output)
    return _rewards(output)


def stop_crafting(context: RequestContext, number: int) -> CraftingSlotResponse | None:
    player = context.player
    slot = crafting_slot_at(player, number)
    if slot is None:
        return None
    result = slot.cancel()
    if result is not None:
        context.session.invalidate(
            SequenceField.CRAFTING, SequenceField.INVENTORY, SequenceField.JOURNAL
        )
        _credit_output(player, result.output)
        for items in result.input:
            player.inventory.add_input_items(items)
    return crafting_slot_response(context, slot)


def start_smelting(
    context: RequestContext, number: int, request: SmeltingStartRequest
) -> dict[str, object] | None:
    player = context.player
    slot = smelting_slot_at(player, number)
    if slot is None or slot.get_lock_state().locked:
        return None
    recipe = player.catalog.get_smelting_recipe(request.recipe_id)
    if recipe is None:
        return None
    input_items = _collect_request_item(player, request.input)
    if input_items is None:
        return None

    fuel_items: InputItems | None = None
    if request.fuel is not None and request.fuel.quantity > 0:
        definition = player.catalog.get_item(request.fuel.item_id)
        if definition is None or definition.burn_rate is None:
            return None
        record = slot.get_record()
        if isinstance(record, SmeltingSessionState):
            return None
        banked = record.heat_carried_over.remaining_heat if record.heat_carried_over else 0
        required = max(
            math.ceil(
                (recipe.heat_required * request.multiplier - banked)
                / definition.burn_rate.total_heat
            ),
            0,
        )
        if request.fuel.quantity < required:
            return None
        if required > 0:
            fuel_items = _collect_request_item(player, request.fuel, required)
            if fuel_items is None:
                return None

    if not slot.start(
        request.session_id, request.recipe_id, request.multiplier, input_items, fuel_items
    ):
        return None
    context.session.invalidate(SequenceField.SMELTING, SequenceField.INVENTORY)
    return {}


def collect_smelting(context: RequestContext, number: int) -> CollectResponse | None:
    player = context.player
    slot = smelting_slot_at(player, number)
    if slot is None:
        return None
    result = slot.collect()
    if result is None:
        return None
    context.session.invalidate(
        SequenceField.SMELTING, SequenceField.INVENTORY, SequenceField.JOURNAL
    )
    _credit_output(player, result.output)
    if result.unused_fuel is not None:
        player.inventory.add_input_items(result.unused_fuel)
    return _rewards(result.output)


def stop_smelting(context: RequestContext, number: int) -> SmeltingSlotResponse | None:
    player = context.player
    slot = smelting_slot_at(player, number)
    if slot is None:
        return None
    result = slot.cancel()
    if result is not None:
        context.session.invalidate(
            SequenceField.SMELTING, SequenceField.INVENTORY, SequenceField.JOURNAL
        )
        _credit_output(player, result.output)
        for items in (result.input, result.unused_fuel):
            if items is not None:
                player.inventory.add_input_items(items)
    return smelting_slot_response(context, slot)


def finish_slot(
    context: RequestContext, slot: CraftingSlot | SmeltingSlot | None, request: PurchaseRequest
) -> SplitRubiesResponse | None:
    """Spend rubies to complete every remaining round of *slot* now."""
    if slot is None:
        return None
    session = slot.get_session_state()
    if session is None:
        return None
    now = slot.now()
    instant = slot.get_instant_state(session, now)
    remaining = math.ceil((instant.total_completion_time - now) / 1000)
    if remaining < 0:
        return None
    price = slot.get_price_to_finish(remaining)
    if request.expected_purchase_price < price.price:
        logger.debug("Finish price moved to %d", price.price)
        return None
    rubies = context.player.rubies
    if price.price > 0 and not rubies.spend(price.price):
        return None
    if not slot.finish_now():
        return None
    context.session.invalidate(_SEQUENCE_FOR_KIND[slot.kind])
    balance = rubies.get()
    return SplitRubiesResponse(purchased=balance.purchased, earned=balance.earned)


def unlock_slot(
    context: RequestContext, slot: WorkshopSlot | None, request: PurchaseRequest
) -> dict[str, object] | None:
    """Buy a locked slot at exactly the price the client was shown."""
    if slot is None:
        return None
    lock = slot.get_lock_state()
    if not lock.locked or request.expected_purchase_price != lock.unlock_price:
        return None
    if not context.player.rubies.spend(lock.unlock_price):
        return None
    if not slot.unlock():
        return None
    context.session.invalidate(_SEQUENCE_FOR_KIND[slot.kind])
    return {}


def finish_price(
    remaining_time: str, configuration: WorkshopConfiguration
) -> FinishPriceResponse | None:
    """Quote the finish-now price for a client-supplied remaining time."""
    try:
        seconds = parse_duration(remaining_time)
    except ValueError:
        return None
    price = get_price_to_finish(
        seconds,
        bracket_seconds=configuration.finish_bracket_seconds,
        price_per_bracket=configuration.finish_price_per_bracket,
    )
    return FinishPriceResponse(
        cost=price.price, valid_time=format_duration(seconds - price.changes_at)
    )


__all__ = [
    "collect_crafting",
    "collect_smelting",
    "crafting_slot_at",
    "crafting_slot_response",
    "finish_price",
    "finish_slot",
    "smelting_slot_at",
    "smelting_slot_response",
    "start_crafting",
    "start_smelting",
    "stop_crafting",
    "stop_smelting",
    "unlock_slot",
    "utility_blocks",
]
