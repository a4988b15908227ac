"""Route definitions for the game client API."""

from hearth_backend.api.routers.catalog import router as catalog_router
from hearth_backend.api.routers.inventory import router as inventory_router
from hearth_backend.api.routers.player import router as player_router
from hearth_backend.api.routers.signin import router as signin_router
from hearth_backend.api.routers.workshop import router as workshop_router

__all__ = [
    "catalog_router",
    "inventory_router",
    "player_router",
    "signin_router",
    "workshop_router",
]
