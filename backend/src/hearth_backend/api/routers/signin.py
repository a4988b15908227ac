"""Session sign-in endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status

from hearth_backend.api.dependencies import get_auth_service, get_session_service
from hearth_backend.api.models import ApiEnvelope, SignInRequest, SignInResponse
from hearth_backend.api.services import AuthService, SessionService

router = APIRouter(prefix="/api/v1.1", tags=["auth"])


@router.post("/signin", response_model=ApiEnvelope)
def sign_in(
    payload: SignInRequest,
    session_id: Annotated[str, Header(alias="Session-Id", min_length=1)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ApiEnvelope:
    """Open a session for the user named in the ticket and issue its token."""
    session = sessions.sign_in(session_id, payload.session_ticket)
    if session is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Sign-in refused")
    token = auth_service.create_access_token(session.session_id)
    return ApiEnvelope(result=SignInResponse(authentication_token=token), updates={})


__all__ = ["router"]
