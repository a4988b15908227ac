"""Reference data models read from the static catalog files."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hearth_backend.shared.durations import format_duration


class CatalogModel(BaseModel):
    """Base for catalog records stored with camelCase keys."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class BurnRate(CatalogModel):
    """How long one unit of a fuel burns and how hot."""

    burn_time: int = Field(..., alias="burnTime", gt=0)
    heat_per_second: int = Field(..., alias="heatPerSecond", gt=0)

    @property
    def total_heat(self) -> int:
        """Heat released by a single unit burned to the end."""
        return self.burn_time * self.heat_per_second


class CatalogItemCount(CatalogModel):
    """Item quantity as written in catalog files."""

    item_id: str = Field(..., alias="itemId")
    count: int = Field(..., ge=1)


class ItemDefinition(CatalogModel):
    """An item as described by the item catalog."""

    id_: str = Field(..., alias="id")
    stacks: bool = False
    burn_rate: BurnRate | None = Field(default=None, alias="burnRate")
    fuel_return_items: tuple[CatalogItemCount, ...] = Field(
        default_factory=tuple, alias="fuelReturnItems"
    )


class RecipeIngredient(CatalogModel):
    """One input group of a crafting recipe; any listed item satisfies it."""

    item_ids: tuple[str, ...] = Field(..., alias="itemIds", min_length=1)
    count: int = Field(..., ge=1)

    def accepts(self, item_id: str) -> bool:
        return item_id in self.item_ids


class CraftingRecipe(CatalogModel):
    """Fixed-duration recipe producing ``output`` once per round."""

    id_: str = Field(..., alias="id")
    deprecated: bool = False
    display_category: Literal["Construction", "Equipment", "Items", "Nature"] = Field(
        default="Items", alias="displayCategory"
    )
    input: tuple[RecipeIngredient, ...] = Field(..., min_length=1)
    output: CatalogItemCount
    return_items: tuple[CatalogItemCount, ...] = Field(
        default_factory=tuple, alias="returnItems"
    )
    duration: int = Field(..., gt=0, description="Seconds per round.")

    def group_index(self, item_id: str) -> int | None:
        """Return the first input group that accepts *item_id*."""
        for index, ingredient in enumerate(self.input):
            if ingredient.accepts(item_id):
                return index
        return None

    def to_client(self) -> dict[str, object]:
        return {
            "id": self.id_,
            "deprecated": self.deprecated,
            "category": self.display_category,
            "ingredients": [
                {"items": list(ingredient.item_ids), "quantity": ingredient.count}
                for ingredient in self.input
            ],
            "output": {"itemId": self.output.item_id, "quantity": self.output.count},
            "returnItems": [
                {"id": item.item_id, "amount": item.count} for item in self.return_items
            ],
            "duration": format_duration(self.duration),
        }


class SmeltingRecipe(CatalogModel):
    """Heat-gated recipe turning one ``input`` unit into one ``output`` unit."""

    id_: str = Field(..., alias="id")
    deprecated: bool = False
    input: str
    output: str
    heat_required: int = Field(..., alias="heatRequired", gt=0)

    def to_client(self) -> dict[str, object]:
        return {
            "id": self.id_,
            "deprecated": self.deprecated,
            "inputItemId": self.input,
            "output": {"itemId": self.output, "quantity": 1},
            "returnItems": [],
            "heatRequired": self.heat_required,
        }


__all__ = [
    "BurnRate",
    "CatalogItemCount",
    "CraftingRecipe",
    "ItemDefinition",
    "RecipeIngredient",
    "SmeltingRecipe",
]
