"""Service layer for API-specific business logic."""

from hearth_backend.api.services.auth import AuthService, InvalidTokenError, TokenPayload
from hearth_backend.api.services.player_requests import (
    PlayerRequestService,
    RequestContext,
    RequestOutcome,
)
from hearth_backend.api.services.session_queue import SessionQueueRegistry
from hearth_backend.api.services.sessions import (
    ModifiableSession,
    SessionRecord,
    SessionService,
    parse_session_ticket,
)

__all__ = [
    "AuthService",
    "InvalidTokenError",
    "ModifiableSession",
    "PlayerRequestService",
    "RequestContext",
    "RequestOutcome",
    "SessionQueueRegistry",
    "SessionRecord",
    "SessionService",
    "TokenPayload",
    "parse_session_ticket",
]
