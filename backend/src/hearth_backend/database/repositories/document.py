"""SQL-backed storage for versioned documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from hearth_backend.database.documents import (
    ConflictError,
    DocumentChange,
    StoredDocument,
)
from hearth_backend.database.schemas import DocumentSchema

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from hearth_backend.database.service import DatabaseService


class DocumentRepository:
    """Encapsulates persistence operations for :class:`DocumentSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, collection: str, key: str) -> DocumentSchema | None:
        """Return the row for *collection*/*key*."""
        return self._session.get(DocumentSchema, (collection, key))

    def current_version(self, collection: str, key: str) -> int | None:
        """Return the stored version, locking the row until commit."""
        stmt = (
            select(DocumentSchema.version)
            .where(DocumentSchema.collection == collection, DocumentSchema.key == key)
            .with_for_update()
        )
        return self._session.scalar(stmt)

    def insert(self, change: DocumentChange) -> None:
        """Create a new document, failing if somebody else created it first."""
        self._session.add(
            DocumentSchema(
                collection=change.collection, key=change.key, value=change.value, version=1
            )
        )
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(change.collection, change.key) from exc

    def replace(self, change: DocumentChange) -> None:
        """Overwrite a document if it still has the expected version."""
        stmt = (
            update(DocumentSchema)
            .where(
                DocumentSchema.collection == change.collection,
                DocumentSchema.key == change.key,
                DocumentSchema.version == change.expected_version,
            )
            .values(value=change.value, version=DocumentSchema.version + 1)
        )
        if self._session.execute(stmt).rowcount != 1:
            raise ConflictError(change.collection, change.key)

    def remove(self, change: DocumentChange) -> None:
        """Delete a document if it still has the expected version."""
        stmt = delete(DocumentSchema).where(
            DocumentSchema.collection == change.collection,
            DocumentSchema.key == change.key,
            DocumentSchema.version == change.expected_version,
        )
        if self._session.execute(stmt).rowcount != 1:
            raise ConflictError(change.collection, change.key)


class SqlDocumentBackend:
    """:class:`DocumentBackend` storing documents through SQLAlchemy."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def load(self, collection: str, key: str) -> StoredDocument | None:
        """Return the stored document or ``None``."""
        with self._database.session() as session:
            row = DocumentRepository(session).get(collection, key)
            if row is None:
                return None
            return StoredDocument(value=row.value, version=row.version)

    def commit(self, changes: list[DocumentChange]) -> None:
        """Validate and apply *changes* inside one database transaction."""
        with self._database.session() as session:
            repository = DocumentRepository(session)
            for change in changes:
                if change.dirty:
                    continue
                if repository.current_version(change.collection, change.key) != (
                    change.expected_version
                ):
                    raise ConflictError(change.collection, change.key)
            for change in changes:
                if not change.dirty:
                    continue
                if change.expected_version is None:
                    if not change.deleted:
                        repository.insert(change)
                elif change.deleted:
                    repository.remove(change)
                else:
                    repository.replace(change)


__all__ = ["DocumentRepository", "SqlDocumentBackend"]
