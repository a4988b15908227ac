"""Fixed-duration crafting slots.

A crafting session escrows its ingredients when it starts and completes one
round every ``recipe.duration`` seconds. Nothing is stored per tick: the
instant state is always derived from the persisted session and the current
time.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from hearth_backend.catalog import CraftingRecipe  # noqa: TC001
from hearth_backend.game_logic.errors import WorkshopInvariantError
from hearth_backend.game_logic.escrow import matches_recipe, remaining_escrow
from hearth_backend.game_logic.slots import WorkshopSlot
from hearth_backend.shared.enums import SlotKind
from hearth_backend.shared.value_objects import InputItems, ItemCount

logger = logging.getLogger(__name__)


class IdleCraftingSlot(BaseModel):
    """Stored marker for a crafting slot with no session."""

    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class CraftingSessionState(BaseModel):
    """Persisted record of a running crafting session."""

    model_config = ConfigDict(frozen=True)

    status: Literal["active"] = "active"
    session_id: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    start_time: int = Field(..., description="UNIX milliseconds.")
    input: tuple[InputItems, ...]
    total_rounds: int = Field(..., ge=1)
    collected_rounds: int = Field(default=0, ge=0)
    finished_early: bool = False


CraftingSlotRecord = Annotated[
    IdleCraftingSlot | CraftingSessionState, Field(discriminator="status")
]
_RECORD_ADAPTER: TypeAdapter[IdleCraftingSlot | CraftingSessionState] = TypeAdapter(
    CraftingSlotRecord
)


class CraftingInstantState(BaseModel):
    """Derived view of a crafting session at a point in time."""

    model_config = ConfigDict(frozen=True)

    completed_rounds: int = Field(..., ge=0)
    available_rounds: int = Field(..., ge=0)
    total_rounds: int = Field(..., ge=1)
    input: tuple[InputItems, ...]
    output: ItemCount
    next_completion_time: int | None
    total_completion_time: int

    @property
    def complete(self) -> bool:
        return self.completed_rounds == self.total_rounds


class CraftingCancelResult(BaseModel):
    """Everything handed back when a crafting session is cancelled."""

    model_config = ConfigDict(frozen=True)

    output: ItemCount | None
    input: tuple[InputItems, ...]


def compute_crafting_instant_state(
    session: CraftingSessionState, recipe: CraftingRecipe, now: int
) -> CraftingInstantState:
    """Project *session* onto the time *now* (UNIX milliseconds)."""
    round_ms = recipe.duration * 1000
    total = session.total_rounds
    if session.finished_early:
        completed = total
    else:
        completed = min(max(now - session.start_time, 0) // round_ms, total)
    available = completed - session.collected_rounds
    if available < 0:
        msg = (
            f"Crafting session {session.session_id} collected "
            f"{session.collected_rounds} of {completed} completed rounds."
        )
        raise WorkshopInvariantError(msg)
    return CraftingInstantState(
        completed_rounds=completed,
        available_rounds=available,
        total_rounds=total,
        input=remaining_escrow(recipe, session.input, completed),
        output=ItemCount(
            item_id=recipe.output.item_id, count=recipe.output.count * available
        ),
        next_completion_time=(
            None if completed == total else session.start_time + round_ms * (completed + 1)
        ),
        total_completion_time=session.start_time + round_ms * total,
    )


class CraftingSlot(WorkshopSlot):
    """A crafting bay backed by ``workshop.crafting.<index>``."""

    kind = SlotKind.CRAFTING

    def get_record(self) -> IdleCraftingSlot | CraftingSessionState:
        raw = self._read(self.state_path)
        if raw is None:
            return IdleCraftingSlot()
        return _RECORD_ADAPTER.validate_python(raw)

    def get_session_state(self) -> CraftingSessionState | None:
        """Return the running session, or ``None`` when the slot is idle."""
        record = self.get_record()
        return record if isinstance(record, CraftingSessionState) else None

    def get_instant_state(
        self, session: CraftingSessionState, now: int | None = None
    ) -> CraftingInstantState:
        recipe = self._recipe_for(session)
        return compute_crafting_instant_state(
            session, recipe, self.now() if now is None else now
        )

    def start(
        self,
        session_id: str,
        recipe_id: str,
        rounds: int,
        ingredients: tuple[InputItems, ...],
    ) -> bool:
        """Begin a session escrowing *ingredients*; returns ``False`` if rejected."""
        if self.get_session_state() is not None:
            logger.debug("Crafting slot %d is busy", self.slot_index)
            return False
        recipe = self._player.catalog.get_crafting_recipe(recipe_id)
        if recipe is None:
            logger.debug("Unknown crafting recipe %s", recipe_id)
            return False
        if recipe.return_items:
            logger.debug("Crafting recipe %s returns items; not supported", recipe_id)
            return False
        if rounds < 1 or not matches_recipe(recipe, ingredients, rounds):
            logger.debug(
                "Ingredients do not cover %d rounds of recipe %s", rounds, recipe_id
            )
            return False
        session = CraftingSessionState(
            session_id=session_id,
            recipe_id=recipe_id,
            start_time=self.now(),
            input=ingredients,
            total_rounds=rounds,
        )
        self._store(session)
        logger.info(
            "Started crafting %s x%d in slot %d for %s",
            recipe_id,
            rounds,
            self.slot_index,
            self._player.user_id,
        )
        return True

    def collect(self) -> ItemCount | None:
        """Hand over every completed, uncollected round (possibly zero)."""
        session = self.get_session_state()
        if session is None:
            return None
        instant = self.get_instant_state(session)
        collected = session.collected_rounds + instant.available_rounds
        if collected == session.total_rounds:
            self._clear(self.state_path)
        else:
            self._store(session.model_copy(update={"collected_rounds": collected}))
        return instant.output

    def cancel(self) -> CraftingCancelResult | None:
        """Stop the session, returning uncollected output and unconsumed input."""
        session = self.get_session_state()
        if session is None:
            return None
        instant = self.get_instant_state(session)
        self._clear(self.state_path)
        logger.info("Cancelled crafting session %s", session.session_id)
        return CraftingCancelResult(
            output=instant.output if instant.output.count > 0 else None,
            input=instant.input,
        )

    def finish_now(self) -> bool:
        """Mark every remaining round as complete."""
        session = self.get_session_state()
        if session is None or self.get_instant_state(session).complete:
            return False
        self._store(session.model_copy(update={"finished_early": True}))
        return True

    def _recipe_for(self, session: CraftingSessionState) -> CraftingRecipe:
        recipe = self._player.catalog.get_crafting_recipe(session.recipe_id)
        if recipe is None:
            msg = f"Crafting session {session.session_id} uses unknown recipe {session.recipe_id}."
            raise WorkshopInvariantError(msg)
        return recipe

    def _store(self, session: CraftingSessionState) -> None:
        self._write(self.state_path, session.model_dump(mode="json"))


__all__ = [
    "CraftingCancelResult",
    "CraftingInstantState",
    "CraftingSessionState",
    "CraftingSlot",
    "IdleCraftingSlot",
    "compute_crafting_instant_state",
]
