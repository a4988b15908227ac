"""Pydantic models for inventory endpoints."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import Field, model_validator

from hearth_backend.api.models.common import ApiModel
from hearth_backend.game_logic import HOTBAR_STACK_LIMIT


class HotbarSlotRequest(ApiModel):
    """Desired content of one hotbar slot."""

    id: str = Field(..., min_length=1)
    count: int = Field(..., gt=0, le=HOTBAR_STACK_LIMIT)
    instance_id: str | None = None

    @model_validator(mode="after")
    def _validate_instance_count(self) -> HotbarSlotRequest:
        if self.instance_id is not None and self.count != 1:
            msg = "an item instance always has count 1"
            raise ValueError(msg)
        return self


class HotbarSlotPayload(ApiModel):
    id: str
    count: int
    instance_id: str | None = None
    health: float | None = None


class SeenAt(ApiModel):
    on: datetime


class InstancePayload(ApiModel):
    id: str
    health: float


class StackableItemPayload(ApiModel):
    id: str
    owned: int
    fragments: int = 1
    unlocked: SeenAt
    seen: SeenAt


class NonStackableItemPayload(ApiModel):
    id: str
    instances: list[InstancePayload]
    fragments: int = 1
    unlocked: SeenAt
    seen: SeenAt


class InventoryResponse(ApiModel):
    hotbar: list[HotbarSlotPayload | None]
    stackable_items: list[StackableItemPayload]
    non_stackable_items: list[NonStackableItemPayload]


__all__ = [
    "HotbarSlotPayload",
    "HotbarSlotRequest",
    "InstancePayload",
    "InventoryResponse",
    "NonStackableItemPayload",
    "SeenAt",
    "StackableItemPayload",
]
