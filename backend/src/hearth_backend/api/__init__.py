"""HTTP API consumed by the game client."""

from hearth_backend.api.app import create_api

__all__ = ["create_api"]
