"""Behavior shared by crafting and smelting workshop slots."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

if TYPE_CHECKING:
    from hearth_backend.game_logic.player import Player
    from hearth_backend.shared.enums import SlotKind

PLAYER_COLLECTION = "player"


class LockState(BaseModel):
    """Whether a slot is locked and what unlocking it costs."""

    model_config = ConfigDict(frozen=True)

    locked: bool
    unlock_price: int | None = Field(default=None, ge=0)


class FinishPrice(BaseModel):
    """Ruby price of finishing a session now.

    ``changes_at`` is the remaining time, in seconds, at which the price will
    next drop.
    """

    model_config = ConfigDict(frozen=True)

    price: int = Field(..., ge=0)
    changes_at: int = Field(..., ge=0)


def get_price_to_finish(
    remaining_seconds: int,
    *,
    bracket_seconds: int = 10,
    price_per_bracket: int = 5,
) -> FinishPrice:
    """Return the finish-now price for *remaining_seconds* of work left."""
    if remaining_seconds < 0:
        msg = "Remaining time cannot be negative."
        raise ValueError(msg)
    brackets = math.ceil(remaining_seconds / bracket_seconds)
    return FinishPrice(
        price=brackets * price_per_bracket,
        changes_at=max((brackets - 1) * bracket_seconds, 0),
    )


class WorkshopSlot:
    """One bay of a player's workshop, addressed by kind and 0-based index."""

    kind: ClassVar[SlotKind]

    def __init__(self, player: Player, slot_index: int) -> None:
        self._player = player
        self.slot_index = slot_index

    @property
    def state_path(self) -> str:
        return f"workshop.{self.kind.value}.{self.slot_index}"

    @property
    def lock_path(self) -> str:
        return f"workshop.lock.{self.kind.value}.{self.slot_index}"

    def now(self) -> int:
        return self._player.clock.now_ms()

    def get_lock_state(self) -> LockState:
        """Return the persisted lock flag, defaulting to the configured one."""
        price = self._player.configuration.unlock_price(self.kind, self.slot_index)
        stored = self._read(self.lock_path)
        locked = price is not None if stored is None else bool(stored)
        if not locked:
            return LockState(locked=False)
        return LockState(locked=True, unlock_price=price if price is not None else 0)

    def unlock(self) -> bool:
        """Clear the lock flag; returns ``False`` when already unlocked."""
        if not self.get_lock_state().locked:
            return False
        self._write(self.lock_path, False)  # noqa: FBT003
        return True

    def get_price_to_finish(self, remaining_seconds: int) -> FinishPrice:
        configuration = self._player.configuration
        return get_price_to_finish(
            remaining_seconds,
            bracket_seconds=configuration.finish_bracket_seconds,
            price_per_bracket=configuration.finish_price_per_bracket,
        )

    def _read(self, path: str) -> object:
        player = self._player
        return player.transaction.get(PLAYER_COLLECTION, player.user_id, path)

    def _write(self, path: str, value: object) -> None:
        player = self._player
        player.transaction.set(PLAYER_COLLECTION, player.user_id, path, value)

    def _clear(self, path: str) -> None:
        player = self._player
        player.transaction.delete(PLAYER_COLLECTION, player.user_id, path)


__all__ = [
    "PLAYER_COLLECTION",
    "FinishPrice",
    "LockState",
    "WorkshopSlot",
    "get_price_to_finish",
]
