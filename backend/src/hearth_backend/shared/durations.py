"""Duration strings in the format the game client parses."""

from __future__ import annotations


def format_duration(seconds: int) -> str:
    """Render *seconds* the way the client expects it.

    The client reads ``HH:MM:SS`` but every duration it is sent carries the
    whole amount in the seconds field, e.g. ``"00:00:125"``.
    """
    if seconds < 0:
        msg = f"Duration must be non-negative, got {seconds}."
        raise ValueError(msg)
    return f"00:00:{seconds}"


def parse_duration(value: str) -> int:
    """Parse a colon separated duration into seconds.

    Each field is folded in base 60 so ``"90"``, ``"01:30"`` and
    ``"00:01:30"`` all mean ninety seconds.
    """
    total = 0
    for part in value.split(":"):
        stripped = part.strip()
        if not stripped.isdigit():
            msg = f"Invalid duration component {part!r} in {value!r}."
            raise ValueError(msg)
        total = total * 60 + int(stripped)
    return total


__all__ = ["format_duration", "parse_duration"]
