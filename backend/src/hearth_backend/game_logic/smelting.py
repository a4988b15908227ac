"""Heat-gated smelting slots.

A smelting round completes once the furnace has released ``heat_required``
heat since the previous round. Fuel not consumed by a session stays queued
and is refunded; a partly burned unit is banked in the slot and burns first
in the next session.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from hearth_backend.catalog import SmeltingRecipe  # noqa: TC001
from hearth_backend.game_logic.errors import WorkshopInvariantError
from hearth_backend.game_logic.heat import (
    ActiveBurn,
    BankedHeat,
    FurnaceFuel,
    HeatState,
    at_offset,
    available_heat,
    completion_offsets,
    locate_burn,
)
from hearth_backend.game_logic.slots import WorkshopSlot
from hearth_backend.shared.enums import SlotKind
from hearth_backend.shared.value_objects import InputItems, ItemCount

logger = logging.getLogger(__name__)


class IdleSmeltingSlot(BaseModel):
    """Stored state of a furnace with no session; it may still hold heat."""

    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"
    heat_carried_over: BankedHeat | None = None


class SmeltingSessionState(BaseModel):
    """Persisted record of a running smelting session.

    ``fuel`` is the queued batch the session was started with and
    ``heat_carried_over`` the banked heat it inherited; both stay untouched
    while the session runs. ``finished_time`` is set by finish-now.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["active"] = "active"
    session_id: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    start_time: int
    input: InputItems
    output_item_id: str
    total_rounds: int = Field(..., ge=1)
    fuel: FurnaceFuel | None = None
    heat_carried_over: BankedHeat | None = None
    collected_rounds: int = Field(default=0, ge=0)
    finished_early: bool = False
    finished_time: int | None = None


SmeltingSlotRecord = Annotated[
    IdleSmeltingSlot | SmeltingSessionState, Field(discriminator="status")
]
_RECORD_ADAPTER: TypeAdapter[IdleSmeltingSlot | SmeltingSessionState] = TypeAdapter(
    SmeltingSlotRecord
)


class SmeltingInstantState(BaseModel):
    """Derived view of a smelting session at a point in time."""

    model_config = ConfigDict(frozen=True)

    completed_rounds: int = Field(..., ge=0)
    available_rounds: int = Field(..., ge=0)
    total_rounds: int = Field(..., ge=1)
    input: InputItems | None
    output: ItemCount
    next_completion_time: int | None
    total_completion_time: int
    fuel: FurnaceFuel | None
    heat: HeatState
    heat_consumed: int = Field(..., ge=0)

    @property
    def complete(self) -> bool:
        return self.completed_rounds == self.total_rounds


class SmeltingCollectResult(BaseModel):
    """Output handed over by a collect and fuel refunded on full collection."""

    model_config = ConfigDict(frozen=True)

    output: ItemCount
    unused_fuel: InputItems | None = None


class SmeltingCancelResult(BaseModel):
    """Everything handed back when a smelting session is cancelled."""

    model_config = ConfigDict(frozen=True)

    output: ItemCount | None
    input: InputItems | None
    unused_fuel: InputItems | None


def compute_smelting_instant_state(
    session: SmeltingSessionState, recipe: SmeltingRecipe, now: int
) -> SmeltingInstantState:
    """Project *session* onto the time *now* (UNIX milliseconds).

    A round counts as completed only once its completion time is strictly
    before *now*. A poll at exactly ``next_completion_time`` still reports
    the round as pending, whereas crafting counts a round at its boundary.
    """
    start = session.start_time
    total = session.total_rounds
    offsets = completion_offsets(
        recipe.heat_required, total, session.heat_carried_over, session.fuel
    )
    if session.finished_early:
        completed = total
    else:
        completed = 0
        while completed < total and at_offset(start, offsets[completed]) < now:
            completed += 1
    available = completed - session.collected_rounds
    if available < 0:
        msg = (
            f"Smelting session {session.session_id} collected "
            f"{session.collected_rounds} of {completed} completed rounds."
        )
        raise WorkshopInvariantError(msg)

    target = offsets[-1] if completed == total else min(max(now - start, 0), offsets[-1])
    position = locate_burn(target, session.heat_carried_over, session.fuel)
    segment = position.segment
    heat: BankedHeat | ActiveBurn
    if completed == total:
        heat = BankedHeat(fuel=segment.fuel, remaining_heat=position.remaining_heat)
    else:
        heat = ActiveBurn(
            fuel=segment.fuel,
            remaining_heat=position.remaining_heat,
            burn_start_time=at_offset(start, position.start_ms),
            burn_end_time=at_offset(start, min(position.end_ms, offsets[-1])),
        )

    if session.finished_early and session.finished_time is not None:
        total_completion = session.finished_time
    else:
        total_completion = at_offset(start, offsets[-1])

    return SmeltingInstantState(
        completed_rounds=completed,
        available_rounds=available,
        total_rounds=total,
        input=session.input.split(completed)[1],
        output=ItemCount(item_id=session.output_item_id, count=available),
        next_completion_time=(
            None if completed == total else at_offset(start, offsets[completed])
        ),
        total_completion_time=total_completion,
        fuel=segment.queue_after,
        heat=heat,
        heat_consumed=position.heat_consumed,
    )


def _bank(heat: BankedHeat | ActiveBurn) -> BankedHeat | None:
    if heat.remaining_heat <= 0:
        return None
    return BankedHeat(fuel=heat.fuel, remaining_heat=heat.remaining_heat)


class SmeltingSlot(WorkshopSlot):
    """A furnace backed by ``workshop.smelting.<index>``."""

    kind = SlotKind.SMELTING

    def get_record(self) -> IdleSmeltingSlot | SmeltingSessionState:
        raw = self._read(self.state_path)
        if raw is None:
            return IdleSmeltingSlot()
        return _RECORD_ADAPTER.validate_python(raw)

    def get_session_state(self) -> SmeltingSessionState | None:
        """Return the running session, or ``None`` when the furnace is idle."""
        record = self.get_record()
        return record if isinstance(record, SmeltingSessionState) else None

    def get_banked_heat(self) -> BankedHeat | None:
        """Return heat held by an idle furnace."""
        record = self.get_record()
        return record.heat_carried_over if isinstance(record, IdleSmeltingSlot) else None

    def get_instant_state(
        self, session: SmeltingSessionState, now: int | None = None
    ) -> SmeltingInstantState:
        recipe = self._recipe_for(session)
        return compute_smelting_instant_state(
            session, recipe, self.now() if now is None else now
        )

    def start(
        self,
        session_id: str,
        recipe_id: str,
        rounds: int,
        input_items: InputItems,
        fuel_items: InputItems | None,
    ) -> bool:
        """Begin smelting *rounds* units; returns ``False`` if rejected."""
        record = self.get_record()
        if isinstance(record, SmeltingSessionState):
            logger.debug("Smelting slot %d is busy", self.slot_index)
            return False
        recipe = self._player.catalog.get_smelting_recipe(recipe_id)
        if recipe is None:
            logger.debug("Unknown smelting recipe %s", recipe_id)
            return False
        if rounds < 1 or input_items.item_id != recipe.input or input_items.quantity != rounds:
            logger.debug("Input does not match %d rounds of recipe %s", rounds, recipe_id)
            return False

        fuel: FurnaceFuel | None = None
        if fuel_items is not None and fuel_items.quantity > 0:
            definition = self._player.catalog.get_item(fuel_items.item_id)
            if definition is None or definition.burn_rate is None:
                logger.debug("Item %s is not a fuel", fuel_items.item_id)
                return False
            if definition.fuel_return_items:
                logger.debug("Fuel %s returns items; not supported", fuel_items.item_id)
                return False
            fuel = FurnaceFuel.from_burn_rate(fuel_items, definition.burn_rate)

        carried = record.heat_carried_over
        if available_heat(carried, fuel) < recipe.heat_required * rounds:
            logger.debug(
                "Not enough heat for %d rounds of recipe %s", rounds, recipe_id
            )
            return False

        session = SmeltingSessionState(
            session_id=session_id,
            recipe_id=recipe_id,
            start_time=self.now(),
            input=input_items,
            output_item_id=recipe.output,
            total_rounds=rounds,
            fuel=fuel,
            heat_carried_over=carried,
        )
        self._store(session)
        logger.info(
            "Started smelting %s x%d in slot %d for %s",
            recipe_id,
            rounds,
            self.slot_index,
            self._player.user_id,
        )
        return True

    def collect(self) -> SmeltingCollectResult | None:
        """Hand over completed rounds; refund fuel once everything is collected."""
        session = self.get_session_state()
        if session is None:
            return None
        instant = self.get_instant_state(session)
        collected = session.collected_rounds + instant.available_rounds
        if collected < session.total_rounds:
            self._store(session.model_copy(update={"collected_rounds": collected}))
            return SmeltingCollectResult(output=instant.output)
        self._store(IdleSmeltingSlot(heat_carried_over=_bank(instant.heat)))
        return SmeltingCollectResult(
            output=instant.output,
            unused_fuel=instant.fuel.item if instant.fuel is not None else None,
        )

    def cancel(self) -> SmeltingCancelResult | None:
        """Stop the session, banking the burning unit's heat."""
        session = self.get_session_state()
        if session is None:
            return None
        instant = self.get_instant_state(session)
        self._store(IdleSmeltingSlot(heat_carried_over=_bank(instant.heat)))
        logger.info("Cancelled smelting session %s", session.session_id)
        return SmeltingCancelResult(
            output=instant.output if instant.output.count > 0 else None,
            input=instant.input,
            unused_fuel=instant.fuel.item if instant.fuel is not None else None,
        )

    def finish_now(self) -> bool:
        """Complete every remaining round, burning exactly the heat they need."""
        session = self.get_session_state()
        if session is None or self.get_instant_state(session).complete:
            return False
        self._store(
            session.model_copy(
                update={"finished_early": True, "finished_time": self.now()}
            )
        )
        return True

    def _recipe_for(self, session: SmeltingSessionState) -> SmeltingRecipe:
        recipe = self._player.catalog.get_smelting_recipe(session.recipe_id)
        if recipe is None:
            msg = f"Smelting session {session.session_id} uses unknown recipe {session.recipe_id}."
            raise WorkshopInvariantError(msg)
        return recipe

    def _store(self, record: IdleSmeltingSlot | SmeltingSessionState) -> None:
        self._write(self.state_path, record.model_dump(mode="json"))


__all__ = [
    "IdleSmeltingSlot",
    "SmeltingCancelResult",
    "SmeltingCollectResult",
    "SmeltingInstantState",
    "SmeltingSessionState",
    "SmeltingSlot",
    "compute_smelting_instant_state",
]
