"""Factory for constructing the FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from hearth_backend.api.routers import (
    catalog_router,
    inventory_router,
    player_router,
    signin_router,
    workshop_router,
)
from hearth_backend.api.services import SessionQueueRegistry
from hearth_backend.catalog import CatalogService
from hearth_backend.database import TransactionRetryExhaustedError
from hearth_backend.settings import get_settings
from hearth_backend.shared.clock import Clock, SystemClock
from hearth_backend.shared.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings.log_level)
    catalog: CatalogService = app.state.catalog
    if not catalog.loaded:
        catalog.load(settings.catalog_path)
    logger.info("Hearth API ready")
    yield


async def _retry_exhausted_handler(
    _request: Request, exc: Exception
) -> JSONResponse:
    logger.warning("Giving up on request: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is busy, retry later"},
    )


def create_api(
    *,
    catalog: CatalogService | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    Without a *catalog* one is loaded from ``catalog_path`` on start-up.
    """
    app = FastAPI(title="Hearth API", lifespan=_lifespan)
    app.state.catalog = catalog or CatalogService()
    app.state.clock = clock or SystemClock()
    app.state.session_queues = SessionQueueRegistry()
    app.add_exception_handler(TransactionRetryExhaustedError, _retry_exhausted_handler)
    app.include_router(signin_router)
    app.include_router(workshop_router)
    app.include_router(inventory_router)
    app.include_router(player_router)
    app.include_router(catalog_router)
    return app


app = create_api()
