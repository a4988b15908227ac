"""Repositories wrapping SQLAlchemy sessions."""

from hearth_backend.database.repositories.document import (
    DocumentRepository,
    SqlDocumentBackend,
)

__all__ = ["DocumentRepository", "SqlDocumentBackend"]
