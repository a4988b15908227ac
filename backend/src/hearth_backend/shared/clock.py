"""Injectable wall-clock sources."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current time as UNIX milliseconds."""

    def now_ms(self) -> int:
        """Return the current time in milliseconds."""


class SystemClock:
    """Clock backed by the host's system time."""

    def now_ms(self) -> int:
        """Return the system time in milliseconds."""
        return time.time_ns() // 1_000_000


class ManualClock:
    """Clock that only moves when told to, for deterministic tests."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        """Return the currently configured time."""
        return self._now

    def set(self, now_ms: int) -> None:
        """Jump to *now_ms*."""
        self._now = now_ms

    def advance(self, *, seconds: float = 0, milliseconds: int = 0) -> int:
        """Move forward and return the new time."""
        self._now += int(seconds * 1000) + milliseconds
        return self._now


__all__ = ["Clock", "ManualClock", "SystemClock"]
