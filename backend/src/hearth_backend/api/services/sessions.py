"""Client sessions and their per-category sequence numbers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from hearth_backend.shared.enums import SequenceField

if TYPE_CHECKING:
    from hearth_backend.database import DocumentTransaction, TransactionRunner

logger = logging.getLogger(__name__)

SESSION_COLLECTION = "session"
_USER_ID_PATTERN = re.compile(r"^[0-9A-F]{16}$")


def _initial_sequences() -> dict[SequenceField, int]:
    return dict.fromkeys(SequenceField, 1)


class SessionRecord(BaseModel):
    """Stored session document."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    session_id: str
    sequence_numbers: dict[SequenceField, int] = Field(default_factory=_initial_sequences)


def parse_session_ticket(ticket: str) -> str | None:
    """Return the user id encoded in a ``"<16 hex digits>-..."`` ticket."""
    parts = ticket.split("-")
    if len(parts) < 2 or not _USER_ID_PATTERN.match(parts[0]):
        return None
    return parts[0]


class SessionService:
    """Creates and loads session documents."""

    def __init__(self, runner: TransactionRunner) -> None:
        self._runner = runner

    def sign_in(self, session_id: str, session_ticket: str) -> SessionRecord | None:
        """Open a new session; ``None`` for a bad ticket or a reused session id."""
        user_id = parse_session_ticket(session_ticket)
        if user_id is None:
            logger.info("Rejected sign-in with malformed ticket")
            return None
        record = SessionRecord(user_id=user_id, session_id=session_id)

        def create(transaction: DocumentTransaction) -> SessionRecord | None:
            if transaction.get(SESSION_COLLECTION, session_id) is not None:
                return None
            transaction.set(
                SESSION_COLLECTION, session_id, None, record.model_dump(mode="json")
            )
            return record

        created = self._runner.run(create)
        if created is None:
            logger.info("Rejected sign-in for existing session %s", session_id)
            return None
        logger.info("New session for %s with ID %s", user_id, session_id)
        return created

    def get(self, session_id: str) -> SessionRecord | None:
        def load(transaction: DocumentTransaction) -> SessionRecord | None:
            raw = transaction.get(SESSION_COLLECTION, session_id)
            return SessionRecord.model_validate(raw) if raw is not None else None

        return self._runner.run(load)


class ModifiableSession:
    """Session view used while handling a single request.

    Invalidated sequence fields are incremented in the request's own
    transaction by :meth:`commit_sequences`.
    """

    def __init__(self, record: SessionRecord, transaction: DocumentTransaction) -> None:
        self._record = record
        self._transaction = transaction
        stored = transaction.get(
            SESSION_COLLECTION, record.session_id, "sequence_numbers"
        )
        self._values: dict[SequenceField, int] = (
            {SequenceField(key): value for key, value in stored.items()}
            if stored is not None
            else dict(record.sequence_numbers)
        )
        self._invalidated: set[SequenceField] = set()

    @property
    def user_id(self) -> str:
        return self._record.user_id

    @property
    def session_id(self) -> str:
        return self._record.session_id

    def get_sequence_number(self, field: SequenceField) -> int:
        value = self._values.get(field, 1)
        return value + 1 if field in self._invalidated else value

    def invalidate(self, *fields: SequenceField) -> None:
        self._invalidated.update(fields)

    def commit_sequences(self) -> dict[str, int]:
        """Increment invalidated fields and return the client ``updates`` map."""
        updates: dict[str, int] = {}
        for field in SequenceField:
            if field not in self._invalidated:
                continue
            self._transaction.increment(
                SESSION_COLLECTION, self.session_id, f"sequence_numbers.{field.value}", 1
            )
            updates[field.update_key] = self.get_sequence_number(field)
        return updates


__all__ = [
    "SESSION_COLLECTION",
    "ModifiableSession",
    "SessionRecord",
    "SessionService",
    "parse_session_ticket",
]
