"""Workshop rules: crafting and smelting slots, inventory and rubies."""

from hearth_backend.game_logic.configuration import (
    WorkshopConfiguration,
    WorkshopDefaults,
    get_default_workshop_configuration,
)
from hearth_backend.game_logic.crafting import (
    CraftingCancelResult,
    CraftingInstantState,
    CraftingSessionState,
    CraftingSlot,
    IdleCraftingSlot,
    compute_crafting_instant_state,
)
from hearth_backend.game_logic.errors import WorkshopInvariantError
from hearth_backend.game_logic.heat import (
    ActiveBurn,
    BankedHeat,
    FurnaceFuel,
    HeatState,
)
from hearth_backend.game_logic.inventory import (
    HOTBAR_SIZE,
    HOTBAR_STACK_LIMIT,
    HotbarInstance,
    HotbarStack,
    Inventory,
    NonStackableEntry,
    StackableEntry,
)
from hearth_backend.game_logic.player import Player, Workshop
from hearth_backend.game_logic.rubies import Rubies, SplitRubies
from hearth_backend.game_logic.slots import (
    FinishPrice,
    LockState,
    WorkshopSlot,
    get_price_to_finish,
)
from hearth_backend.game_logic.smelting import (
    IdleSmeltingSlot,
    SmeltingCancelResult,
    SmeltingCollectResult,
    SmeltingInstantState,
    SmeltingSessionState,
    SmeltingSlot,
    compute_smelting_instant_state,
)

__all__ = [
    "HOTBAR_SIZE",
    "HOTBAR_STACK_LIMIT",
    "ActiveBurn",
    "BankedHeat",
    "CraftingCancelResult",
    "CraftingInstantState",
    "CraftingSessionState",
    "CraftingSlot",
    "FinishPrice",
    "FurnaceFuel",
    "HeatState",
    "HotbarInstance",
    "HotbarStack",
    "IdleCraftingSlot",
    "IdleSmeltingSlot",
    "Inventory",
    "LockState",
    "NonStackableEntry",
    "Player",
    "Rubies",
    "SmeltingCancelResult",
    "SmeltingCollectResult",
    "SmeltingInstantState",
    "SmeltingSessionState",
    "SmeltingSlot",
    "SplitRubies",
    "StackableEntry",
    "Workshop",
    "WorkshopConfiguration",
    "WorkshopDefaults",
    "WorkshopInvariantError",
    "WorkshopSlot",
    "compute_crafting_instant_state",
    "compute_smelting_instant_state",
    "get_default_workshop_configuration",
]
