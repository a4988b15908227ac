"""Exceptions raised by the game logic layer."""


class WorkshopInvariantError(AssertionError):
    """A persisted workshop state contradicts itself; indicates a data model bug."""


__all__ = ["WorkshopInvariantError"]
