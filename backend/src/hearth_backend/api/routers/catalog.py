"""Static reference data downloads."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from hearth_backend.api.dependencies import CurrentSession, get_catalog
from hearth_backend.api.models import ApiEnvelope
from hearth_backend.catalog import CatalogService

router = APIRouter(prefix="/api/v1.1", tags=["catalog"])

Catalog = Annotated[CatalogService, Depends(get_catalog)]


@router.get("/inventory/catalogv3", response_model=ApiEnvelope)
def get_item_catalog(_session: CurrentSession, catalog: Catalog) -> ApiEnvelope:
    return ApiEnvelope(result=catalog.items_payload())


@router.get("/recipes", response_model=ApiEnvelope)
def get_recipe_catalog(_session: CurrentSession, catalog: Catalog) -> ApiEnvelope:
    return ApiEnvelope(result=catalog.recipes_payload())


@router.get("/journal/catalog", response_model=ApiEnvelope)
def get_journal_catalog(_session: CurrentSession, catalog: Catalog) -> ApiEnvelope:
    return ApiEnvelope(result=catalog.journal_payload())


@router.get("/products/catalog", response_model=ApiEnvelope)
def get_product_catalog(_session: CurrentSession, catalog: Catalog) -> ApiEnvelope:
    return ApiEnvelope(result=catalog.products_payload())


__all__ = ["router"]
