"""Loading and lookup of the static item, recipe, journal and product catalogs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hearth_backend.catalog.models import CraftingRecipe, ItemDefinition, SmeltingRecipe

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class CatalogNotLoadedError(RuntimeError):
    """Raised when the catalog is used before (or loaded after) initialization."""


class CatalogService:
    """Read-only view over the reference catalogs, loaded once at start-up."""

    def __init__(self) -> None:
        self._loaded = False
        self._items: dict[str, ItemDefinition] = {}
        self._crafting: dict[str, CraftingRecipe] = {}
        self._smelting: dict[str, SmeltingRecipe] = {}
        self._raw_items: list[dict[str, Any]] = []
        self._efficiency_categories: dict[str, dict[str, Any]] = {}
        self._journal: dict[str, Any] = {}
        self._products: list[dict[str, Any]] = []

    @classmethod
    def from_directory(cls, root: str | Path) -> CatalogService:
        """Return a catalog populated from the JSON tree under *root*."""
        catalog = cls()
        catalog.load(root)
        return catalog

    @classmethod
    def from_records(
        cls,
        *,
        items: Iterable[dict[str, Any]] = (),
        crafting: Iterable[dict[str, Any]] = (),
        smelting: Iterable[dict[str, Any]] = (),
        journal: Iterable[dict[str, Any]] = (),
        products: Iterable[dict[str, Any]] = (),
    ) -> CatalogService:
        """Return a catalog built from in-memory records."""
        catalog = cls()
        catalog._ingest(items, crafting, smelting, {}, journal, products)
        return catalog

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, root: str | Path) -> None:
        """Read every catalog file below *root*."""
        if self._loaded:
            msg = "Catalog data already loaded."
            raise CatalogNotLoadedError(msg)
        base = Path(root)
        categories = {
            record["name"]: {"efficiencyMap": record.get("efficiencyMap", {})}
            for record in _read_json_files(base / "items" / "efficiency_categories")
        }
        self._ingest(
            _read_json_files(base / "items"),
            _read_json_files(base / "recipes" / "crafting"),
            _read_json_files(base / "recipes" / "smelting"),
            categories,
            _read_json_files(base / "journal"),
            _read_json_files(base / "nfc"),
        )
        logger.info(
            "Loaded catalogs from %s: %d items, %d crafting recipes, %d smelting recipes, "
            "%d journal entries, %d products",
            base,
            len(self._items),
            len(self._crafting),
            len(self._smelting),
            len(self._journal),
            len(self._products),
        )

    def get_item(self, item_id: str) -> ItemDefinition | None:
        self._require_loaded()
        return self._items.get(item_id)

    def is_item_stackable(self, item_id: str) -> bool:
        item = self.get_item(item_id)
        return item.stacks if item is not None else False

    def get_crafting_recipe(self, recipe_id: str) -> CraftingRecipe | None:
        self._require_loaded()
        return self._crafting.get(recipe_id)

    def get_smelting_recipe(self, recipe_id: str) -> SmeltingRecipe | None:
        self._require_loaded()
        return self._smelting.get(recipe_id)

    def items_payload(self) -> dict[str, Any]:
        """Return the item catalog in the shape the client downloads."""
        self._require_loaded()
        return {"efficiencyCategories": self._efficiency_categories, "items": self._raw_items}

    def recipes_payload(self) -> dict[str, Any]:
        """Return the recipe catalog in the shape the client downloads."""
        self._require_loaded()
        return {
            "crafting": [recipe.to_client() for recipe in self._crafting.values()],
            "smelting": [recipe.to_client() for recipe in self._smelting.values()],
        }

    def journal_payload(self) -> dict[str, Any]:
        """Return the journal catalog keyed by entry name."""
        self._require_loaded()
        return {"items": self._journal}

    def products_payload(self) -> list[dict[str, Any]]:
        self._require_loaded()
        return self._products

    def _ingest(
        self,
        items: Iterable[dict[str, Any]],
        crafting: Iterable[dict[str, Any]],
        smelting: Iterable[dict[str, Any]],
        categories: dict[str, dict[str, Any]],
        journal: Iterable[dict[str, Any]],
        products: Iterable[dict[str, Any]],
    ) -> None:
        for record in items:
            item = ItemDefinition.model_validate(record)
            self._items[item.id_] = item
            self._raw_items.append(record)
        for record in crafting:
            recipe = CraftingRecipe.model_validate(record)
            self._crafting[recipe.id_] = recipe
        for record in smelting:
            recipe = SmeltingRecipe.model_validate(record)
            self._smelting[recipe.id_] = recipe
        self._efficiency_categories = categories
        self._journal = {record["name"]: record["item"] for record in journal}
        self._products = list(products)
        self._loaded = True

    def _require_loaded(self) -> None:
        if not self._loaded:
            msg = "Catalog data has not been loaded."
            raise CatalogNotLoadedError(msg)


def _read_json_files(directory: Path) -> list[dict[str, Any]]:
    """Return the parsed content of every ``*.json`` file directly in *directory*."""
    if not directory.is_dir():
        return []
    return [
        json.loads(path.read_text(encoding="utf-8"))
        for path in sorted(directory.glob("*.json"))
    ]


__all__ = ["CatalogNotLoadedError", "CatalogService"]
