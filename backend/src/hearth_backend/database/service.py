"""Database session management utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from hearth_backend.database.base import BaseSchema
from hearth_backend.settings import BackendSettings, get_settings


class DatabaseService:
    """Wraps SQLAlchemy engine and session factory."""

    def __init__(
        self,
        url: str | None = None,
        *,
        settings: BackendSettings | None = None,
    ) -> None:
        database_url = url or (settings or get_settings()).database_url
        self._engine = create_engine(database_url, future=True)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
        )

    def create_schema(self) -> None:
        """Create missing tables directly, bypassing Alembic (dev and tests)."""

        BaseSchema.metadata.create_all(self._engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional session scope."""

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
