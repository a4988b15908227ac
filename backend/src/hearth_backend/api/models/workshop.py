"""Pydantic models for crafting and smelting endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import Field, field_validator

from hearth_backend.api.models.common import ApiModel, RequestItem
from hearth_backend.shared.enums import SlotStatus


def _require_items(item: RequestItem) -> RequestItem:
    if item.quantity <= 0:
        msg = "quantity must be positive"
        raise ValueError(msg)
    return item


class CraftingStartRequest(ApiModel):
    session_id: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    multiplier: int = Field(..., gt=0)
    ingredients: list[RequestItem]

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients(cls, value: list[RequestItem]) -> list[RequestItem]:
        return [_require_items(item) for item in value]


class SmeltingStartRequest(ApiModel):
    session_id: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    multiplier: int = Field(..., gt=0)
    input: RequestItem
    fuel: RequestItem | None = None

    @field_validator("input")
    @classmethod
    def validate_input(cls, value: RequestItem) -> RequestItem:
        return _require_items(value)


class ItemQuantity(ApiModel):
    item_id: str
    quantity: int


class EscrowEntry(ApiModel):
    item_id: str
    quantity: int
    item_instance_ids: list[str] | None = None


class UnlockPrice(ApiModel):
    cost: int
    discount: int = 0


class BurnRatePayload(ApiModel):
    burn_time: int
    heat_per_second: int


class FuelPayload(ApiModel):
    burn_rate: BurnRatePayload
    item_id: str
    quantity: int
    item_instance_ids: list[str] | None = None


class BurningPayload(ApiModel):
    """Furnace heat: a time window while burning, depletion while paused."""

    burn_start_time: datetime | None = None
    burns_until: datetime | None = None
    remaining_burn_time: str | None = None
    heat_depleted: int | None = None
    fuel: FuelPayload | None = None


class CraftingSlotResponse(ApiModel):
    session_id: str | None = None
    recipe_id: str | None = None
    output: ItemQuantity | None = None
    escrow: list[EscrowEntry] = Field(default_factory=list)
    completed: int = 0
    available: int = 0
    total: int = 0
    next_completion_utc: datetime | None = None
    total_completion_utc: datetime | None = None
    state: SlotStatus = SlotStatus.EMPTY
    boost_state: None = None
    unlock_price: UnlockPrice | None = None
    stream_version: int


class SmeltingSlotResponse(CraftingSlotResponse):
    fuel: FuelPayload | None = None
    burning: BurningPayload | None = None


class UtilityBlocksResponse(ApiModel):
    crafting: dict[str, CraftingSlotResponse]
    smelting: dict[str, SmeltingSlotResponse]


class RewardItem(ApiModel):
    id: str
    amount: int


class Rewards(ApiModel):
    inventory: list[RewardItem] = Field(default_factory=list)
    buildplates: list[object] = Field(default_factory=list)
    challenges: list[object] = Field(default_factory=list)
    persona_items: list[object] = Field(default_factory=list)
    utility_blocks: list[object] = Field(default_factory=list)


class CollectResponse(ApiModel):
    rewards: Rewards


class FinishPriceResponse(ApiModel):
    cost: int
    discount: int = 0
    valid_time: str


class SplitRubiesResponse(ApiModel):
    purchased: int
    earned: int


__all__ = [
    "BurnRatePayload",
    "BurningPayload",
    "CollectResponse",
    "CraftingSlotResponse",
    "CraftingStartRequest",
    "EscrowEntry",
    "FinishPriceResponse",
    "FuelPayload",
    "ItemQuantity",
    "RewardItem",
    "Rewards",
    "SmeltingSlotResponse",
    "SmeltingStartRequest",
    "SplitRubiesResponse",
    "UnlockPrice",
    "UtilityBlocksResponse",
]
