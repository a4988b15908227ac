"""Bearer token issuing and verification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from hearth_backend.settings import BackendSettings, get_settings


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


@dataclass(slots=True)
class TokenPayload:
    """Represents encoded token metadata."""

    sub: str
    exp: datetime


class AuthService:
    """Signs and verifies the tokens handed out at sign-in.

    The token subject is the session id, so a token is only as valid as the
    session document it points at.
    """

    def __init__(
        self,
        *,
        secret_key: str | None = None,
        algorithm: str = "HS256",
        access_token_ttl_minutes: int | None = None,
        settings: BackendSettings | None = None,
    ) -> None:
        config = settings or get_settings()
        self._secret_key = secret_key or config.auth_secret_key
        self._algorithm = algorithm
        self._access_token_ttl = timedelta(
            minutes=access_token_ttl_minutes or config.access_token_ttl_minutes
        )

    def create_access_token(self, subject: str) -> str:
        expires_at = datetime.now(tz=UTC) + self._access_token_ttl
        payload = {"sub": subject, "exp": expires_at}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> TokenPayload:
        try:
            data = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc
        return TokenPayload(sub=data["sub"], exp=datetime.fromtimestamp(data["exp"], tz=UTC))


__all__ = ["AuthService", "InvalidTokenError", "TokenPayload"]
