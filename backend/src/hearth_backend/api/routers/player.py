"""Player balance endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from hearth_backend.api.dependencies import CurrentSession, PlayerRequests
from hearth_backend.api.models import ApiEnvelope, SplitRubiesResponse
from hearth_backend.api.responses import envelope
from hearth_backend.api.services import RequestContext

router = APIRouter(prefix="/api/v1.1/player", tags=["player"])


def _total_rubies(context: RequestContext) -> int:
    return context.player.rubies.get().total


def _split_rubies(context: RequestContext) -> SplitRubiesResponse:
    balance = context.player.rubies.get()
    return SplitRubiesResponse(purchased=balance.purchased, earned=balance.earned)


@router.get("/rubies", response_model=ApiEnvelope)
async def get_rubies(session: CurrentSession, requests: PlayerRequests) -> ApiEnvelope:
    return envelope(await requests.run(session, _total_rubies, send_updates=False))


@router.get("/splitRubies", response_model=ApiEnvelope)
async def get_split_rubies(session: CurrentSession, requests: PlayerRequests) -> ApiEnvelope:
    return envelope(await requests.run(session, _split_rubies, send_updates=False))


__all__ = ["router"]
