"""Static reference data: items, recipes, journal entries and products."""

from hearth_backend.catalog.models import (
    BurnRate,
    CatalogItemCount,
    CraftingRecipe,
    ItemDefinition,
    RecipeIngredient,
    SmeltingRecipe,
)
from hearth_backend.catalog.service import CatalogNotLoadedError, CatalogService

__all__ = [
    "BurnRate",
    "CatalogItemCount",
    "CatalogNotLoadedError",
    "CatalogService",
    "CraftingRecipe",
    "ItemDefinition",
    "RecipeIngredient",
    "SmeltingRecipe",
]
