"""Versioned JSON document schema."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from hearth_backend.database.base import BaseSchema

DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


class DocumentSchema(BaseSchema):
    """SQLAlchemy model holding one JSON document per (collection, key)."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(32), primary_key=True)
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[Any] = mapped_column(DocumentJSON, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
