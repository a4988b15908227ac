"""Crafting table and furnace endpoints."""

from __future__ import annotations

from functools import partial
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from hearth_backend.api.dependencies import (
    CurrentSession,
    PlayerRequests,
    get_workshop_configuration,
)
from hearth_backend.api.models import (
    ApiEnvelope,
    CraftingStartRequest,
    PurchaseRequest,
    SmeltingStartRequest,
)
from hearth_backend.api.responses import envelope, reject
from hearth_backend.api.services import RequestContext
from hearth_backend.api.services.workshop import (
    collect_crafting,
    collect_smelting,
    crafting_slot_at,
    crafting_slot_response,
    finish_price,
    finish_slot,
    smelting_slot_at,
    smelting_slot_response,
    start_crafting,
    start_smelting,
    stop_crafting,
    stop_smelting,
    unlock_slot,
    utility_blocks,
)
from hearth_backend.game_logic import WorkshopConfiguration

router = APIRouter(prefix="/api/v1.1", tags=["workshop"])

Configuration = Annotated[WorkshopConfiguration, Depends(get_workshop_configuration)]


@router.get("/player/utilityBlocks", response_model=ApiEnvelope)
async def get_utility_blocks(session: CurrentSession, requests: PlayerRequests) -> ApiEnvelope:
    return envelope(await requests.run(session, utility_blocks, send_updates=False))


@router.get("/crafting/finish/price", response_model=ApiEnvelope)
def get_crafting_finish_price(
    _session: CurrentSession,
    configuration: Configuration,
    remaining_time: Annotated[str, Query(alias="remainingTime")],
) -> ApiEnvelope:
    price = finish_price(remaining_time, configuration)
    if price is None:
        raise reject()
    return ApiEnvelope(result=price)


@router.get("/crafting/{slot}", response_model=ApiEnvelope)
async def get_crafting_slot(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        target = crafting_slot_at(context.player, slot)
        return crafting_slot_response(context, target) if target is not None else None

    return envelope(await requests.run(session, handler))


@router.post("/crafting/{slot}/start", response_model=ApiEnvelope)
async def post_crafting_start(
    slot: int,
    payload: CraftingStartRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    return envelope(
        await requests.run(session, partial(start_crafting, number=slot, request=payload))
    )


@router.post("/crafting/{slot}/collectItems", response_model=ApiEnvelope)
async def post_crafting_collect(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    return envelope(await requests.run(session, partial(collect_crafting, number=slot)))


@router.post("/crafting/{slot}/stop", response_model=ApiEnvelope)
async def post_crafting_stop(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    return envelope(await requests.run(session, partial(stop_crafting, number=slot)))


@router.post("/crafting/{slot}/finish", response_model=ApiEnvelope)
async def post_crafting_finish(
    slot: int,
    payload: PurchaseRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        return finish_slot(context, crafting_slot_at(context.player, slot), payload)

    return envelope(await requests.run(session, handler))


@router.post("/crafting/{slot}/unlock", response_model=ApiEnvelope)
async def post_crafting_unlock(
    slot: int,
    payload: PurchaseRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        return unlock_slot(context, crafting_slot_at(context.player, slot), payload)

    return envelope(await requests.run(session, handler))


@router.get("/smelting/finish/price", response_model=ApiEnvelope)
def get_smelting_finish_price(
    _session: CurrentSession,
    configuration: Configuration,
    remaining_time: Annotated[str, Query(alias="remainingTime")],
) -> ApiEnvelope:
    price = finish_price(remaining_time, configuration)
    if price is None:
        raise reject()
    return ApiEnvelope(result=price)


@router.get("/smelting/{slot}", response_model=ApiEnvelope)
async def get_smelting_slot(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        target = smelting_slot_at(context.player, slot)
        return smelting_slot_response(context, target) if target is not None else None

    return envelope(await requests.run(session, handler))


@router.post("/smelting/{slot}/start", response_model=ApiEnvelope)
async def post_smelting_start(
    slot: int,
    payload: SmeltingStartRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    return envelope(
        await requests.run(session, partial(start_smelting, number=slot, request=payload))
    )


@router.post("/smelting/{slot}/collectItems", response_model=ApiEnvelope)
async def post_smelting_collect(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    return envelope(await requests.run(session, partial(collect_smelting, number=slot)))


@router.post("/smelting/{slot}/stop", response_model=ApiEnvelope)
async def post_smelting_stop(
    slot: int, session: CurrentSession, requests: PlayerRequests
) -> ApiEnvelope:
    return envelope(await requests.run(session, partial(stop_smelting, number=slot)))


@router.post("/smelting/{slot}/finish", response_model=ApiEnvelope)
async def post_smelting_finish(
    slot: int,
    payload: PurchaseRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        return finish_slot(context, smelting_slot_at(context.player, slot), payload)

    return envelope(await requests.run(session, handler))


@router.post("/smelting/{slot}/unlock", response_model=ApiEnvelope)
async def post_smelting_unlock(
    slot: int,
    payload: PurchaseRequest,
    session: CurrentSession,
    requests: PlayerRequests,
) -> ApiEnvelope:
    def handler(context: RequestContext) -> object:
        return unlock_slot(context, smelting_slot_at(context.player, slot), payload)

    return envelope(await requests.run(session, handler))


__all__ = ["router"]
