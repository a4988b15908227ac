"""Workshop reference parameters: slot unlock prices and finish-now pricing."""

from __future__ import annotations

from functools import cache

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from hearth_backend.shared.enums import SlotKind


class WorkshopDefaults(BaseSettings):
    """Load default workshop parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HEARTH_WORKSHOP_",
        extra="ignore",
    )

    slots_per_kind: int = Field(default=3, ge=1)
    crafting_unlock_prices: dict[int, int] = Field(default_factory=lambda: {1: 5, 2: 10})
    smelting_unlock_prices: dict[int, int] = Field(default_factory=lambda: {1: 5, 2: 10})
    finish_bracket_seconds: int = Field(default=10, ge=1)
    finish_price_per_bracket: int = Field(default=5, ge=0)

    def to_config(self) -> WorkshopConfiguration:
        """Convert defaults into an immutable configuration object."""
        return WorkshopConfiguration(
            slots_per_kind=self.slots_per_kind,
            unlock_prices={
                SlotKind.CRAFTING: dict(self.crafting_unlock_prices),
                SlotKind.SMELTING: dict(self.smelting_unlock_prices),
            },
            finish_bracket_seconds=self.finish_bracket_seconds,
            finish_price_per_bracket=self.finish_price_per_bracket,
        )


class WorkshopConfiguration(BaseModel):
    """Immutable workshop parameters shared by every player.

    ``unlock_prices`` maps a slot kind to ``{slot_index: price}``; slots that
    are not listed start out unlocked.
    """

    model_config = ConfigDict(frozen=True)

    slots_per_kind: int = Field(default=3, ge=1)
    unlock_prices: dict[SlotKind, dict[int, int]] = Field(default_factory=dict)
    finish_bracket_seconds: int = Field(default=10, ge=1)
    finish_price_per_bracket: int = Field(default=5, ge=0)

    def unlock_price(self, kind: SlotKind, slot_index: int) -> int | None:
        """Return the unlock price of a slot, or ``None`` for free slots."""
        return self.unlock_prices.get(kind, {}).get(slot_index)


@cache
def get_default_workshop_configuration() -> WorkshopConfiguration:
    """Return the cached default workshop configuration."""
    return WorkshopDefaults().to_config()


__all__ = [
    "WorkshopConfiguration",
    "WorkshopDefaults",
    "get_default_workshop_configuration",
]
