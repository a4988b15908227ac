"""FastAPI dependencies for database access."""

from functools import cache
from typing import Annotated

from fastapi import Depends

from hearth_backend.database.documents import DocumentBackend, InMemoryDocumentBackend
from hearth_backend.database.repositories import SqlDocumentBackend
from hearth_backend.database.service import DatabaseService
from hearth_backend.database.transactions import TransactionRunner
from hearth_backend.settings import BackendSettings, get_settings

SettingsDep = Annotated[BackendSettings, Depends(get_settings)]


@cache
def _build_database_service(database_url: str) -> DatabaseService:
    """Create a cached :class:`DatabaseService` for the given connection string."""
    return DatabaseService(database_url)


@cache
def _build_document_backend(store: str, database_url: str) -> DocumentBackend:
    """Create the process-wide document backend."""
    if store == "memory":
        return InMemoryDocumentBackend()
    return SqlDocumentBackend(_build_database_service(database_url))


def get_document_backend(settings: SettingsDep) -> DocumentBackend:
    """Return the document backend selected by the settings."""
    return _build_document_backend(settings.document_store, settings.database_url)


def get_transaction_runner(
    settings: SettingsDep,
    backend: Annotated[DocumentBackend, Depends(get_document_backend)],
) -> TransactionRunner:
    """Return a runner applying the configured retry policy to *backend*."""
    return TransactionRunner(
        backend,
        max_attempts=settings.transaction_max_attempts,
        backoff_seconds=settings.transaction_retry_backoff_seconds,
    )
