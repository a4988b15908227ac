"""Fuel and heat accounting for smelting furnaces.

Heat comes from a single ordered source: any heat carried over from the
previous session burns first, then the queued fuel batch one unit at a time.
Each unit releases ``heat_per_second`` for ``burn_duration`` seconds. All
offsets below are milliseconds since the session started, kept as floats so
that rounding happens exactly once, when a time is reported.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hearth_backend.game_logic.errors import WorkshopInvariantError
from hearth_backend.shared.value_objects import InputItems

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hearth_backend.catalog import BurnRate


class FurnaceFuel(BaseModel):
    """A batch of fuel together with its burn characteristics."""

    model_config = ConfigDict(frozen=True)

    item: InputItems
    burn_duration: int = Field(..., gt=0, description="Seconds one unit burns.")
    heat_per_second: int = Field(..., gt=0)

    @classmethod
    def from_burn_rate(cls, item: InputItems, burn_rate: BurnRate) -> FurnaceFuel:
        return cls(
            item=item,
            burn_duration=burn_rate.burn_time,
            heat_per_second=burn_rate.heat_per_second,
        )

    @property
    def quantity(self) -> int:
        return self.item.quantity

    @property
    def unit_heat(self) -> int:
        """Heat released by one unit burned to the end."""
        return self.burn_duration * self.heat_per_second

    @property
    def total_heat(self) -> int:
        return self.unit_heat * self.quantity

    def take_unit(self) -> tuple[FurnaceFuel, FurnaceFuel | None]:
        """Split off the first unit; returns ``(unit, rest)``."""
        unit, rest = self.item.split(1)
        if unit is None:
            msg = "Cannot take a unit from an empty fuel batch."
            raise WorkshopInvariantError(msg)
        return (
            self.model_copy(update={"item": unit}),
            self.model_copy(update={"item": rest}) if rest is not None else None,
        )


class BankedHeat(BaseModel):
    """Partially burned fuel unit held by an idle furnace."""

    model_config = ConfigDict(frozen=True)

    status: Literal["paused"] = "paused"
    fuel: FurnaceFuel
    remaining_heat: int = Field(..., ge=0)


class ActiveBurn(BaseModel):
    """Fuel unit currently burning in a running session."""

    model_config = ConfigDict(frozen=True)

    status: Literal["burning"] = "burning"
    fuel: FurnaceFuel
    remaining_heat: int = Field(..., ge=0)
    burn_start_time: int
    burn_end_time: int


HeatState = Annotated[BankedHeat | ActiveBurn, Field(discriminator="status")]


@dataclass(frozen=True, slots=True)
class BurnSegment:
    """One unit of fuel in burn order with the heat it still holds."""

    fuel: FurnaceFuel
    heat: int
    carried_over: bool
    queue_after: FurnaceFuel | None

    @property
    def duration_ms(self) -> float:
        return self.heat * 1000 / self.fuel.heat_per_second


@dataclass(frozen=True, slots=True)
class BurnPosition:
    """Where the burn stands at some offset into the session."""

    segment: BurnSegment
    start_ms: float
    heat_before: int
    heat_used: int

    @property
    def end_ms(self) -> float:
        return self.start_ms + self.segment.duration_ms

    @property
    def remaining_heat(self) -> int:
        return self.segment.heat - self.heat_used

    @property
    def heat_consumed(self) -> int:
        return self.heat_before + self.heat_used


def iter_burn_segments(
    carried: BankedHeat | None, queue: FurnaceFuel | None
) -> Iterator[BurnSegment]:
    """Yield fuel units in the order a furnace burns them."""
    if carried is not None and carried.remaining_heat > 0:
        yield BurnSegment(
            fuel=carried.fuel,
            heat=carried.remaining_heat,
            carried_over=True,
            queue_after=queue,
        )
    while queue is not None:
        unit, queue = queue.take_unit()
        yield BurnSegment(
            fuel=unit, heat=unit.unit_heat, carried_over=False, queue_after=queue
        )


def available_heat(carried: BankedHeat | None, queue: FurnaceFuel | None) -> int:
    """Return all heat that *carried* and *queue* can ever release."""
    banked = carried.remaining_heat if carried is not None else 0
    return banked + (queue.total_heat if queue is not None else 0)


def completion_offsets(
    heat_per_round: int,
    rounds: int,
    carried: BankedHeat | None,
    queue: FurnaceFuel | None,
) -> list[float]:
    """Return the offset at which each round has accumulated its heat.

    Raises :class:`WorkshopInvariantError` when the fuel cannot cover every
    round.
    """
    offsets: list[float] = []
    targets = iter(range(1, rounds + 1))
    target = next(targets, None)
    start_ms = 0.0
    heat_before = 0
    for segment in iter_burn_segments(carried, queue):
        if target is None:
            break
        segment_end = heat_before + segment.heat
        while target is not None and target * heat_per_round <= segment_end:
            needed = target * heat_per_round - heat_before
            offsets.append(start_ms + needed * 1000 / segment.fuel.heat_per_second)
            target = next(targets, None)
        start_ms += segment.duration_ms
        heat_before = segment_end
    if target is not None:
        msg = f"Fuel covers {len(offsets)} of {rounds} rounds."
        raise WorkshopInvariantError(msg)
    return offsets


def locate_burn(
    offset_ms: float, carried: BankedHeat | None, queue: FurnaceFuel | None
) -> BurnPosition:
    """Return the burning unit and its partial consumption at *offset_ms*.

    Heat of a partly burned unit is rounded up, so a unit that has started
    burning has always given at least one unit of heat.
    """
    start_ms = 0.0
    heat_before = 0
    for segment in iter_burn_segments(carried, queue):
        end_ms = start_ms + segment.duration_ms
        if end_ms < offset_ms:
            start_ms = end_ms
            heat_before += segment.heat
            continue
        elapsed = max(offset_ms - start_ms, 0.0)
        used = math.ceil(round(elapsed * segment.fuel.heat_per_second / 1000, 6))
        return BurnPosition(
            segment=segment,
            start_ms=start_ms,
            heat_before=heat_before,
            heat_used=min(used, segment.heat),
        )
    msg = f"Furnace ran out of fuel before offset {offset_ms:.3f} ms."
    raise WorkshopInvariantError(msg)


def at_offset(start_time: int, offset_ms: float) -> int:
    """Convert a session offset into UNIX milliseconds, rounding up."""
    return start_time + math.ceil(round(offset_ms, 6))


__all__ = [
    "ActiveBurn",
    "BankedHeat",
    "BurnPosition",
    "BurnSegment",
    "FurnaceFuel",
    "HeatState",
    "at_offset",
    "available_heat",
    "completion_offsets",
    "iter_burn_segments",
    "locate_burn",
]
