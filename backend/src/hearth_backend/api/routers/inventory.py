"""Inventory and hotbar endpoints."""

from __future__ import annotations

from functools import partial
from typing import Any

from fastapi import APIRouter

from hearth_backend.api.dependencies import CurrentSession, PlayerRequests
from hearth_backend.api.models import ApiEnvelope, HotbarSlotRequest
from hearth_backend.api.responses import envelope, unwrapped
from hearth_backend.api.services.inventory import inventory_response, update_hotbar

router = APIRouter(prefix="/api/v1.1/inventory", tags=["inventory"])


@router.get("/survival", response_model=ApiEnvelope)
async def get_inventory(session: CurrentSession, requests: PlayerRequests) -> ApiEnvelope:
    return envelope(await requests.run(session, inventory_response, send_updates=False))


@router.put("/survival/hotbar")
async def put_hotbar(
    payload: list[HotbarSlotRequest | None],
    session: CurrentSession,
    requests: PlayerRequests,
) -> Any:
    """Rearrange the hotbar; answers with the bare hotbar, not an envelope."""
    outcome = await requests.run(
        session, partial(update_hotbar, requested=payload), send_updates=False
    )
    return unwrapped(outcome)


__all__ = ["router"]
