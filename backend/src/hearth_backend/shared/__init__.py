"""Shared utilities, shared models and cross-cutting helpers for the backend."""

from hearth_backend.shared.clock import Clock, ManualClock, SystemClock
from hearth_backend.shared.durations import format_duration, parse_duration
from hearth_backend.shared.enums import SequenceField, SlotKind, SlotStatus
from hearth_backend.shared.value_objects import (
    DEFAULT_INSTANCE_HEALTH,
    InputItems,
    InstanceRecord,
    ItemCount,
    ItemInstance,
    NonStackableItems,
    StackableItems,
)

__all__ = [
    "DEFAULT_INSTANCE_HEALTH",
    "Clock",
    "InputItems",
    "InstanceRecord",
    "ItemCount",
    "ItemInstance",
    "ManualClock",
    "NonStackableItems",
    "SequenceField",
    "SlotKind",
    "SlotStatus",
    "StackableItems",
    "SystemClock",
    "format_duration",
    "parse_duration",
]
