"""Key decoding and selection movement for the dashboard."""

from __future__ import annotations

from enum import Enum


class Key(Enum):
    """Keys the dashboard reacts to."""

    QUIT = "q"
    ESCAPE = "escape"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    CANCEL_JOB = "D"
    CHECK_OUT = "o"
    CHECK_IN = "p"
    CONFIRM = "y"
    DENY = "n"

    @classmethod
    def from_raw(cls, raw: str | None) -> Key | None:
        """Convert a raw terminal key into a Key, or None if unbound."""
        if not raw:
            return None
        return _RAW_KEYS.get(raw)


_RAW_KEYS = {
    "q": Key.QUIT,
    "\x1b": Key.ESCAPE,
    "k": Key.UP,
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "j": Key.DOWN,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "D": Key.CANCEL_JOB,
    "o": Key.CHECK_OUT,
    "p": Key.CHECK_IN,
    "y": Key.CONFIRM,
    "n": Key.DENY,
}


def move_selection(selection: int | None, item_count: int, step: int) -> int | None:
    """Move a table selection by step without wrapping past either end."""
    if item_count == 0:
        return None
    if selection is None:
        return 0
    return min(max(selection + step, 0), item_count - 1)


def clamp_selection(selection: int | None, item_count: int) -> int | None:
    """Keep a selection valid after the item list was replaced."""
    if item_count == 0:
        return None
    if selection is None:
        return 0
    return min(max(selection, 0), item_count - 1)


def clamp_scroll(offset: int, max_scroll: int) -> int:
    return min(max(offset, 0), max(max_scroll, 0))
