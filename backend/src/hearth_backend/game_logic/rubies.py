"""Premium currency balance of a player."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hearth_backend.game_logic.slots import PLAYER_COLLECTION

if TYPE_CHECKING:
    from hearth_backend.game_logic.player import Player


class SplitRubies(BaseModel):
    """Ruby balance split by how the rubies were obtained."""

    model_config = ConfigDict(frozen=True)

    purchased: int = Field(default=0, ge=0)
    earned: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.purchased + self.earned


class Rubies:
    def __init__(self, player: Player) -> None:
        self._player = player

    def get(self) -> SplitRubies:
        raw = self._player.transaction.get(PLAYER_COLLECTION, self._player.user_id, "rubies")
        return SplitRubies.model_validate(raw or {})

    def add_purchased(self, count: int) -> None:
        self._add("purchased", count)

    def add_earned(self, count: int) -> None:
        self._add("earned", count)

    def spend(self, count: int) -> bool:
        """Debit *count* rubies, purchased ones first; ``False`` if too few."""
        _require_positive(count)
        balance = self.get()
        if count > balance.total:
            return False
        from_purchased = min(count, balance.purchased)
        from_earned = count - from_purchased
        self._ensure()
        transaction = self._player.transaction
        user_id = self._player.user_id
        if from_purchased:
            transaction.increment(PLAYER_COLLECTION, user_id, "rubies.purchased", -from_purchased)
        if from_earned:
            transaction.increment(PLAYER_COLLECTION, user_id, "rubies.earned", -from_earned)
        return True

    def _add(self, field: str, count: int) -> None:
        _require_positive(count)
        self._ensure()
        self._player.transaction.increment(
            PLAYER_COLLECTION, self._player.user_id, f"rubies.{field}", count
        )

    def _ensure(self) -> None:
        self._player.transaction.create_if_not_exists(
            PLAYER_COLLECTION,
            self._player.user_id,
            "rubies",
            SplitRubies().model_dump(mode="json"),
        )


def _require_positive(count: int) -> None:
    if count <= 0:
        msg = f"Ruby amount must be positive, got {count}."
        raise ValueError(msg)


__all__ = ["Rubies", "SplitRubies"]
