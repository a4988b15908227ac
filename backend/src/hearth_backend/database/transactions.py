"""Optimistic read-modify-write loop around :class:`DocumentTransaction`."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from hearth_backend.database.documents import (
    ConflictError,
    DocumentBackend,
    DocumentTransaction,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class TransactionRetryExhaustedError(RuntimeError):
    """Raised when a transaction keeps conflicting past the retry budget."""


class TransactionRunner:
    """Run callbacks in fresh transactions, retrying on conflicts.

    A callback returning ``None`` means "nothing to do": its transaction is
    discarded. Any other result commits the transaction and is passed back.
    """

    def __init__(
        self,
        backend: DocumentBackend,
        *,
        max_attempts: int = 8,
        backoff_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be at least 1."
            raise ValueError(msg)
        self._backend = backend
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    def run(
        self,
        callback: Callable[[DocumentTransaction], _T | None],
        *,
        retry: bool = True,
    ) -> _T | None:
        """Execute *callback* until it commits, is discarded or gives up."""
        for attempt in range(1, self._max_attempts + 1):
            transaction = DocumentTransaction(self._backend)
            try:
                result = callback(transaction)
                if result is None:
                    transaction.discard()
                    return None
                transaction.commit()
                return result
            except ConflictError as exc:
                if not retry:
                    logger.info("Abandoning transaction after conflict: %s", exc)
                    return None
                logger.info(
                    "Transaction conflict (attempt %d/%d): %s",
                    attempt,
                    self._max_attempts,
                    exc,
                )
                if attempt < self._max_attempts and self._backoff_seconds > 0:
                    self._sleep(self._backoff_seconds * attempt)
        logger.warning(
            "Transaction still conflicting after %d attempts", self._max_attempts
        )
        msg = f"Transaction conflicted {self._max_attempts} times in a row."
        raise TransactionRetryExhaustedError(msg)


__all__ = ["TransactionRetryExhaustedError", "TransactionRunner"]
