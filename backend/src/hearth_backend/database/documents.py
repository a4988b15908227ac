"""Transactional access to per-key JSON documents.

Game state lives in document trees (one ``player`` document per user, one
``session`` document per signed-in client). A :class:`DocumentTransaction`
buffers reads and writes against those trees and hands them to a
:class:`DocumentBackend` on commit. Backends enforce optimistic concurrency:
every document carries a version, and a commit whose observed versions no
longer match the stored ones fails with :class:`ConflictError`.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from typing import Any, Protocol

DocumentKey = tuple[str, str]


class ConflictError(RuntimeError):
    """Raised when a document changed between being read and committed."""

    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"Transaction conflict on {collection}/{key}.")
        self.collection = collection
        self.key = key


class TransactionClosedError(RuntimeError):
    """Raised when a committed or discarded transaction is used again."""


@dataclass(slots=True)
class StoredDocument:
    """A document value together with its optimistic version."""

    value: Any
    version: int


@dataclass(slots=True)
class DocumentChange:
    """A document observed by a transaction and what to do with it on commit."""

    collection: str
    key: str
    expected_version: int | None
    value: Any
    dirty: bool

    @property
    def deleted(self) -> bool:
        return self.value is None


class DocumentBackend(Protocol):
    """Storage used by :class:`DocumentTransaction`."""

    def load(self, collection: str, key: str) -> StoredDocument | None:
        """Return the stored document or ``None`` when it does not exist."""

    def commit(self, changes: list[DocumentChange]) -> None:
        """Atomically validate versions and apply dirty changes."""


class InMemoryDocumentBackend:
    """Thread-safe in-process implementation of :class:`DocumentBackend`."""

    def __init__(self) -> None:
        self._documents: dict[DocumentKey, StoredDocument] = {}
        self._lock = threading.Lock()

    def load(self, collection: str, key: str) -> StoredDocument | None:
        """Return a private copy of the stored document."""
        with self._lock:
            stored = self._documents.get((collection, key))
            if stored is None:
                return None
            return StoredDocument(copy.deepcopy(stored.value), stored.version)

    def commit(self, changes: list[DocumentChange]) -> None:
        """Validate every observed version, then apply the dirty changes."""
        with self._lock:
            for change in changes:
                stored = self._documents.get((change.collection, change.key))
                current = stored.version if stored is not None else None
                if current != change.expected_version:
                    raise ConflictError(change.collection, change.key)
            for change in changes:
                if not change.dirty:
                    continue
                document_key = (change.collection, change.key)
                if change.deleted:
                    self._documents.pop(document_key, None)
                    continue
                version = (change.expected_version or 0) + 1
                self._documents[document_key] = StoredDocument(
                    copy.deepcopy(change.value), version
                )


@dataclass(slots=True)
class _Entry:
    value: Any
    version: int | None
    dirty: bool = False


class DocumentTransaction:
    """Unit of work over one or more documents.

    Paths are dotted (``"workshop.crafting.0"``); numeric components index
    into lists. Values handed in and out are deep copies, so callers can never
    mutate buffered state by accident.
    """

    def __init__(self, backend: DocumentBackend) -> None:
        self._backend = backend
        self._entries: dict[DocumentKey, _Entry] = {}
        self._finished = False

    def get(self, collection: str, key: str, path: str | None = None) -> Any:
        """Return the value at *path* or ``None`` if any component is missing."""
        value = self._entry(collection, key).value
        for part in _split(path):
            value = _child(value, part)
            if value is None:
                return None
        return copy.deepcopy(value)

    def set(self, collection: str, key: str, path: str | None, data: Any) -> None:
        """Store *data* at *path*, creating intermediate objects as needed."""
        entry = self._entry(collection, key)
        parts = _split(path)
        if not parts:
            entry.value = copy.deepcopy(data)
        else:
            if not isinstance(entry.value, (dict, list)):
                entry.value = {}
            parent = _ensure_parent(entry.value, parts[:-1])
            _assign(parent, parts[-1], copy.deepcopy(data))
        entry.dirty = True

    def delete(self, collection: str, key: str, path: str | None = None) -> None:
        """Remove the value at *path*, or the whole document without a path."""
        entry = self._entry(collection, key)
        parts = _split(path)
        if not parts:
            if entry.value is not None:
                entry.value = None
                entry.dirty = True
            return
        parent = entry.value
        for part in parts[:-1]:
            parent = _child(parent, part)
            if parent is None:
                return
        if isinstance(parent, dict) and parts[-1] in parent:
            del parent[parts[-1]]
            entry.dirty = True
        elif isinstance(parent, list):
            index = int(parts[-1])
            if 0 <= index < len(parent):
                parent[index] = None
                entry.dirty = True

    def increment(
        self, collection: str, key: str, path: str | None, amount: float
    ) -> None:
        """Add *amount* to the number at *path*; a missing value counts as zero."""
        current = self.get(collection, key, path)
        if current is None:
            current = 0
        if not isinstance(current, (int, float)) or isinstance(current, bool):
            msg = f"Cannot increment non-numeric value at {collection}/{key}:{path}."
            raise TypeError(msg)
        self.set(collection, key, path, current + amount)

    def create_if_not_exists(
        self, collection: str, key: str, path: str | None, data: Any
    ) -> None:
        """Store *data* at *path* only when nothing is there yet."""
        if self.get(collection, key, path) is None:
            self.set(collection, key, path, data)

    def commit(self) -> None:
        """Hand every observed document to the backend."""
        self._close()
        changes = [
            DocumentChange(
                collection=collection,
                key=key,
                expected_version=entry.version,
                value=entry.value,
                dirty=entry.dirty,
            )
            for (collection, key), entry in self._entries.items()
        ]
        self._backend.commit(changes)

    def discard(self) -> None:
        """Drop all buffered changes."""
        self._close()
        self._entries.clear()

    def _close(self) -> None:
        if self._finished:
            msg = "Transaction has already been committed or discarded."
            raise TransactionClosedError(msg)
        self._finished = True

    def _entry(self, collection: str, key: str) -> _Entry:
        if self._finished:
            msg = "Transaction has already been committed or discarded."
            raise TransactionClosedError(msg)
        document_key = (collection, key)
        entry = self._entries.get(document_key)
        if entry is None:
            stored = self._backend.load(collection, key)
            entry = (
                _Entry(value=stored.value, version=stored.version)
                if stored is not None
                else _Entry(value=None, version=None)
            )
            self._entries[document_key] = entry
        return entry


def _split(path: str | None) -> list[str]:
    return path.split(".") if path else []


def _child(container: Any, part: str) -> Any:
    if isinstance(container, dict):
        return container.get(part)
    if isinstance(container, list) and part.isdigit():
        index = int(part)
        return container[index] if index < len(container) else None
    return None


def _ensure_parent(root: Any, parts: list[str]) -> Any:
    node = root
    for part in parts:
        child = _child(node, part)
        if not isinstance(child, (dict, list)):
            child = {}
            _assign(node, part, child)
        node = child
    return node


def _assign(container: Any, part: str, value: Any) -> None:
    if isinstance(container, list):
        index = int(part)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[part] = value


__all__ = [
    "ConflictError",
    "DocumentBackend",
    "DocumentChange",
    "DocumentTransaction",
    "InMemoryDocumentBackend",
    "StoredDocument",
    "TransactionClosedError",
]
