"""Tests for the SQLAlchemy document backend against SQLite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from hearth_backend.database import (
    ConflictError,
    DatabaseService,
    DocumentTransaction,
    SqlDocumentBackend,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def sql_backend(tmp_path: Path) -> SqlDocumentBackend:
    database = DatabaseService(f"sqlite:///{tmp_path / 'documents.db'}")
    database.create_schema()
    return SqlDocumentBackend(database)


def test_documents_round_trip(sql_backend: SqlDocumentBackend) -> None:
    transaction = DocumentTransaction(sql_backend)
    transaction.set("player", "user", "inventory.log", {"count": 3})
    transaction.commit()

    stored = sql_backend.load("player", "user")
    assert stored is not None
    assert stored.value == {"inventory": {"log": {"count": 3}}}
    assert stored.version == 1

    transaction = DocumentTransaction(sql_backend)
    transaction.increment("player", "user", "inventory.log.count", 2)
    transaction.commit()

    stored = sql_backend.load("player", "user")
    assert stored is not None
    assert stored.value["inventory"]["log"]["count"] == 5
    assert stored.version == 2


def test_concurrent_inserts_conflict(sql_backend: SqlDocumentBackend) -> None:
    first = DocumentTransaction(sql_backend)
    second = DocumentTransaction(sql_backend)
    first.set("session", "abc", "user_id", "one")
    second.set("session", "abc", "user_id", "two")
    first.commit()
    with pytest.raises(ConflictError):
        second.commit()

    stored = sql_backend.load("session", "abc")
    assert stored is not None
    assert stored.value == {"user_id": "one"}


def test_stale_update_conflicts(sql_backend: SqlDocumentBackend) -> None:
    seed = DocumentTransaction(sql_backend)
    seed.set("player", "user", "rubies.earned", 1)
    seed.commit()

    first = DocumentTransaction(sql_backend)
    second = DocumentTransaction(sql_backend)
    first.increment("player", "user", "rubies.earned", 1)
    second.increment("player", "user", "rubies.earned", 1)
    first.commit()
    with pytest.raises(ConflictError):
        second.commit()


def test_delete_removes_row(sql_backend: SqlDocumentBackend) -> None:
    seed = DocumentTransaction(sql_backend)
    seed.set("session", "abc", "user_id", "one")
    seed.commit()

    transaction = DocumentTransaction(sql_backend)
    transaction.delete("session", "abc")
    transaction.commit()
    assert sql_backend.load("session", "abc") is None
