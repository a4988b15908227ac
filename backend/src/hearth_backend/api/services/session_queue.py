"""Per-session FIFO serialization of player requests."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass
class _SessionQueue:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class SessionQueueRegistry:
    """Owns one lock per live session id.

    Requests of the same session run one at a time in arrival order
    (``asyncio.Lock`` wakes waiters first-in first-out). A queue exists only
    while some request holds or waits for it.
    """

    def __init__(self) -> None:
        self._queues: dict[str, _SessionQueue] = {}

    def __len__(self) -> int:
        return len(self._queues)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._queues

    @asynccontextmanager
    async def hold(self, session_id: str) -> AsyncIterator[None]:
        """Wait for the session's turn and keep it for the ``with`` body."""
        queue = self._queues.get(session_id)
        if queue is None:
            queue = self._queues[session_id] = _SessionQueue()
        queue.holders += 1
        try:
            async with queue.lock:
                yield
        finally:
            queue.holders -= 1
            if queue.holders == 0:
                del self._queues[session_id]


__all__ = ["SessionQueueRegistry"]
