"""Envelope and shared request payloads."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for payloads exchanged with the game client in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiEnvelope(ApiModel):
    """Wrapper around every game API result."""

    result: Any
    updates: dict[str, int] | None = None
    expiration: None = None
    continuation_token: None = None


class RequestItem(ApiModel):
    """Items a client offers from its inventory."""

    item_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    item_instance_ids: list[str] | None = None

    @model_validator(mode="after")
    def _validate_instances(self) -> RequestItem:
        if self.item_instance_ids is not None and len(self.item_instance_ids) != self.quantity:
            msg = "itemInstanceIds must list exactly `quantity` instances"
            raise ValueError(msg)
        return self


class PurchaseRequest(ApiModel):
    expected_purchase_price: int = Field(..., gt=0)


def utc_from_ms(timestamp_ms: int) -> datetime:
    """Convert UNIX milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


__all__ = ["ApiEnvelope", "ApiModel", "PurchaseRequest", "RequestItem", "utc_from_ms"]
