"""Database connectivity helpers and the transactional document store."""

from hearth_backend.database.base import BaseSchema
from hearth_backend.database.dependencies import (
    get_document_backend,
    get_transaction_runner,
)
from hearth_backend.database.documents import (
    ConflictError,
    DocumentBackend,
    DocumentChange,
    DocumentTransaction,
    InMemoryDocumentBackend,
    StoredDocument,
    TransactionClosedError,
)
from hearth_backend.database.repositories import DocumentRepository, SqlDocumentBackend
from hearth_backend.database.schemas import DocumentSchema
from hearth_backend.database.service import DatabaseService
from hearth_backend.database.transactions import (
    TransactionRetryExhaustedError,
    TransactionRunner,
)
from hearth_backend.settings import BackendSettings, get_settings

__all__ = [
    "BackendSettings",
    "BaseSchema",
    "ConflictError",
    "DatabaseService",
    "DocumentBackend",
    "DocumentChange",
    "DocumentRepository",
    "DocumentSchema",
    "DocumentTransaction",
    "InMemoryDocumentBackend",
    "SqlDocumentBackend",
    "StoredDocument",
    "TransactionClosedError",
    "TransactionRetryExhaustedError",
    "TransactionRunner",
    "get_document_backend",
    "get_settings",
    "get_transaction_runner",
]
