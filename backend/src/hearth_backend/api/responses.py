"""Translating handler outcomes into HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from hearth_backend.api.models import ApiEnvelope
from hearth_backend.api.services import RequestOutcome


def reject() -> HTTPException:
    """Return the error raised for requests the game rules refuse."""
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bad request")


def envelope(outcome: RequestOutcome | None) -> ApiEnvelope:
    """Wrap a handler outcome, rejecting the request when there is none."""
    if outcome is None:
        raise reject()
    return ApiEnvelope(result=outcome.result, updates=outcome.updates)


def unwrapped(outcome: RequestOutcome | None) -> Any:
    """Return a handler result without the envelope."""
    if outcome is None:
        raise reject()
    return outcome.result


__all__ = ["envelope", "reject", "unwrapped"]
