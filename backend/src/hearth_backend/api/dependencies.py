"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hearth_backend.api.services import (
    AuthService,
    InvalidTokenError,
    PlayerRequestService,
    SessionQueueRegistry,
    SessionRecord,
    SessionService,
)
from hearth_backend.catalog import CatalogService
from hearth_backend.database import TransactionRunner, get_transaction_runner
from hearth_backend.game_logic import (
    WorkshopConfiguration,
    get_default_workshop_configuration,
)
from hearth_backend.settings import BackendSettings, get_settings
from hearth_backend.shared.clock import Clock

_security = HTTPBearer(auto_error=False)


def get_catalog(request: Request) -> CatalogService:
    """Return the catalog loaded at application start-up."""
    return request.app.state.catalog


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_session_queues(request: Request) -> SessionQueueRegistry:
    return request.app.state.session_queues


def get_workshop_configuration() -> WorkshopConfiguration:
    return get_default_workshop_configuration()


def get_auth_service(
    settings: Annotated[BackendSettings, Depends(get_settings)],
) -> AuthService:
    return AuthService(settings=settings)


def get_session_service(
    runner: Annotated[TransactionRunner, Depends(get_transaction_runner)],
) -> SessionService:
    return SessionService(runner)


def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
) -> SessionRecord:
    """Resolve the signed-in session from a bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing credentials"
        )
    try:
        payload = auth_service.decode_access_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        ) from exc
    session = sessions.get(payload.sub)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Session not found"
        )
    return session


def get_player_requests(
    runner: Annotated[TransactionRunner, Depends(get_transaction_runner)],
    catalog: Annotated[CatalogService, Depends(get_catalog)],
    clock: Annotated[Clock, Depends(get_clock)],
    queues: Annotated[SessionQueueRegistry, Depends(get_session_queues)],
    configuration: Annotated[WorkshopConfiguration, Depends(get_workshop_configuration)],
) -> PlayerRequestService:
    return PlayerRequestService(
        runner=runner,
        catalog=catalog,
        clock=clock,
        queues=queues,
        configuration=configuration,
    )


CurrentSession = Annotated[SessionRecord, Depends(get_current_session)]
PlayerRequests = Annotated[PlayerRequestService, Depends(get_player_requests)]

__all__ = [
    "CurrentSession",
    "PlayerRequests",
    "get_auth_service",
    "get_catalog",
    "get_clock",
    "get_current_session",
    "get_player_requests",
    "get_session_queues",
    "get_session_service",
    "get_workshop_configuration",
]
