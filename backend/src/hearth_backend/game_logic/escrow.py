"""Helpers reconciling escrowed crafting ingredients against recipe rounds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hearth_backend.game_logic.errors import WorkshopInvariantError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hearth_backend.catalog import CraftingRecipe
    from hearth_backend.shared.value_objects import InputItems


def provided_group_counts(
    recipe: CraftingRecipe, ingredients: Sequence[InputItems]
) -> list[int] | None:
    """Return the quantity supplied for each input group.

    Every batch counts towards the first group accepting its item id. ``None``
    means some batch fits no group at all.
    """
    totals = [0] * len(recipe.input)
    for batch in ingredients:
        index = recipe.group_index(batch.item_id)
        if index is None:
            return None
        totals[index] += batch.quantity
    return totals


def matches_recipe(
    recipe: CraftingRecipe, ingredients: Sequence[InputItems], rounds: int
) -> bool:
    """Return whether *ingredients* cover exactly *rounds* rounds of *recipe*."""
    totals = provided_group_counts(recipe, ingredients)
    if totals is None:
        return False
    return all(
        provided == ingredient.count * rounds
        for provided, ingredient in zip(totals, recipe.input, strict=True)
    )


def remaining_escrow(
    recipe: CraftingRecipe, escrow: Sequence[InputItems], rounds: int
) -> tuple[InputItems, ...]:
    """Return what is left of *escrow* once *rounds* rounds have consumed input.

    Batches are drained in the order they were escrowed; non-stackable batches
    give up their instances front to back.
    """
    remaining = list(escrow)
    for index, ingredient in enumerate(recipe.input):
        target = ingredient.count * rounds
        consumed = 0
        kept: list[InputItems] = []
        for batch in remaining:
            if consumed < target and recipe.group_index(batch.item_id) == index:
                take = min(batch.quantity, target - consumed)
                _, rest = batch.split(take)
                consumed += take
                if rest is not None:
                    kept.append(rest)
            else:
                kept.append(batch)
        if consumed != target:
            msg = (
                f"Escrow for recipe {recipe.id_} is short for input group {index}: "
                f"needed {target}, found {consumed}."
            )
            raise WorkshopInvariantError(msg)
        remaining = kept
    return tuple(remaining)


__all__ = ["matches_recipe", "provided_group_counts", "remaining_escrow"]
