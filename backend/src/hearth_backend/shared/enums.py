"""Shared enumerations used across the backend."""

from enum import StrEnum


class SlotKind(StrEnum):
    """Workshop bay families; also the storage key under ``workshop``."""

    CRAFTING = "crafting"
    SMELTING = "smelting"


class SlotStatus(StrEnum):
    """Client-facing status of a workshop slot."""

    EMPTY = "Empty"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    LOCKED = "Locked"


class SequenceField(StrEnum):
    """Per-category counters clients use to detect stale cached state."""

    PROFILE = "profile"
    INVENTORY = "inventory"
    CRAFTING = "crafting"
    SMELTING = "smelting"
    BOOSTS = "boosts"
    BUILDPLATES = "buildplates"
    JOURNAL = "journal"
    CHALLENGES = "challenges"
    TOKENS = "tokens"

    @property
    def update_key(self) -> str:
        """Return the name the client expects in the ``updates`` map."""
        return _UPDATE_KEYS.get(self, self.value)


_UPDATE_KEYS = {
    SequenceField.PROFILE: "characterProfile",
    SequenceField.JOURNAL: "playerJournal",
}
