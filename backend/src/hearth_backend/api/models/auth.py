"""Pydantic models for the sign-in endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from hearth_backend.api.models.common import ApiModel


class SignInRequest(ApiModel):
    """Payload for opening a session."""

    session_ticket: str = Field(..., min_length=1)


class SignInResponse(ApiModel):
    """Session bootstrap data returned to the client."""

    base_path: str = "/"
    authentication_token: str
    client_properties: dict[str, Any] = Field(default_factory=dict)
    mixed_reality: None = None
    mr_token: None = None
    streams: None = None
    tokens: dict[str, Any] = Field(default_factory=dict)
    updates: dict[str, int] = Field(default_factory=dict)


__all__ = ["SignInRequest", "SignInResponse"]
