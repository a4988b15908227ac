"""Immutable item value objects shared across the domain layer."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

DEFAULT_INSTANCE_HEALTH = 100.0


class ItemCount(BaseModel):
    """A quantity of a single item type, as produced or rewarded."""

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)


class ItemInstance(BaseModel):
    """Mutable per-instance attributes of a non-stackable item."""

    model_config = ConfigDict(frozen=True)

    health: float = Field(default=DEFAULT_INSTANCE_HEALTH, ge=0)


class InstanceRecord(BaseModel):
    """A non-stackable item instance together with its identifier."""

    model_config = ConfigDict(frozen=True)

    instance_id: str = Field(..., min_length=1)
    item: ItemInstance = Field(default_factory=ItemInstance)


class StackableItems(BaseModel):
    """A counted batch of a stackable item."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["stackable"] = "stackable"
    item_id: str = Field(..., min_length=1)
    count: int = Field(..., ge=0)

    @property
    def quantity(self) -> int:
        """Return the number of units in the batch."""
        return self.count

    def split(self, units: int) -> tuple[StackableItems | None, StackableItems | None]:
        """Return ``(taken, remaining)`` after removing *units* from the front."""
        _check_split(units, self.count)
        taken = self.model_copy(update={"count": units}) if units else None
        left = self.count - units
        remaining = self.model_copy(update={"count": left}) if left else None
        return taken, remaining


class NonStackableItems(BaseModel):
    """An ordered batch of individually addressable item instances."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["non_stackable"] = "non_stackable"
    item_id: str = Field(..., min_length=1)
    instances: tuple[InstanceRecord, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_unique(self) -> NonStackableItems:
        """Ensure each instance appears at most once."""
        identifiers = [record.instance_id for record in self.instances]
        if len(identifiers) != len(set(identifiers)):
            msg = f"Duplicate instance identifiers for item {self.item_id}."
            raise ValueError(msg)
        return self

    @property
    def quantity(self) -> int:
        """Return the number of instances in the batch."""
        return len(self.instances)

    def split(
        self, units: int
    ) -> tuple[NonStackableItems | None, NonStackableItems | None]:
        """Return ``(taken, remaining)`` consuming instances in stored order."""
        _check_split(units, len(self.instances))
        head, tail = self.instances[:units], self.instances[units:]
        taken = self.model_copy(update={"instances": head}) if head else None
        remaining = self.model_copy(update={"instances": tail}) if tail else None
        return taken, remaining


InputItems = Annotated[StackableItems | NonStackableItems, Field(discriminator="kind")]


def _check_split(units: int, available: int) -> None:
    if units < 0 or units > available:
        msg = f"Cannot take {units} units from a batch of {available}."
        raise ValueError(msg)


__all__ = [
    "DEFAULT_INSTANCE_HEALTH",
    "InputItems",
    "InstanceRecord",
    "ItemCount",
    "ItemInstance",
    "NonStackableItems",
    "StackableItems",
]
