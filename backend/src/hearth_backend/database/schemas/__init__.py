"""SQLAlchemy schemas."""

from hearth_backend.database.schemas.document import DocumentSchema

__all__ = ["DocumentSchema"]
