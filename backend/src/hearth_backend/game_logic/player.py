"""Aggregate of everything a player owns, bound to one transaction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hearth_backend.game_logic.configuration import (
    WorkshopConfiguration,
    get_default_workshop_configuration,
)
from hearth_backend.game_logic.crafting import CraftingSlot
from hearth_backend.game_logic.inventory import Inventory
from hearth_backend.game_logic.rubies import Rubies
from hearth_backend.game_logic.smelting import SmeltingSlot

if TYPE_CHECKING:
    from hearth_backend.catalog import CatalogService
    from hearth_backend.database import DocumentTransaction
    from hearth_backend.shared.clock import Clock


class Workshop:
    """The crafting tables and furnaces of one player."""

    def __init__(self, player: Player) -> None:
        count = player.configuration.slots_per_kind
        self.crafting_slots = tuple(CraftingSlot(player, index) for index in range(count))
        self.smelting_slots = tuple(SmeltingSlot(player, index) for index in range(count))


class Player:
    """Facade over a player's document for the duration of one transaction."""

    def __init__(
        self,
        user_id: str,
        transaction: DocumentTransaction,
        *,
        catalog: CatalogService,
        clock: Clock,
        configuration: WorkshopConfiguration | None = None,
    ) -> None:
        self.user_id = user_id
        self.transaction = transaction
        self.catalog = catalog
        self.clock = clock
        self.configuration = configuration or get_default_workshop_configuration()

        self.inventory = Inventory(self)
        self.rubies = Rubies(self)
        self.workshop = Workshop(self)


__all__ = ["Player", "Workshop"]
