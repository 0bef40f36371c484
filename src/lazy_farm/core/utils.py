"""Utility functions for lazy-farm."""

from __future__ import annotations

import atexit
import os
import select
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from datetime import UTC, datetime

from rich.console import Console
from rich.spinner import Spinner

# Try to import Unix-specific terminal control modules
try:
    import termios
    import tty

    HAS_TERMIOS = True
    # Store original terminal settings globally
    _original_terminal_settings = None
    if sys.stdin.isatty():
        _original_terminal_settings = termios.tcgetattr(sys.stdin.fileno())

        # Register cleanup on exit
        def restore_terminal() -> None:
            if _original_terminal_settings and sys.stdin.isatty():
                with suppress(termios.error):
                    termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, _original_terminal_settings)

        atexit.register(restore_terminal)
except ImportError:
    HAS_TERMIOS = False

console = Console()

ESCAPE_SEQUENCE_TIMEOUT = 0.01  # seconds
_DURATION_UNITS = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))


def print_error(message: str) -> None:
    console.print(f"❌ {message}", style="red")


def print_info(message: str) -> None:
    console.print(message, style="blue")


@contextmanager
def show_spinner() -> Iterator[None]:
    """Context manager that shows a spinner while running operations."""
    spinner = Spinner("dots", style="cyan")
    with console.status(spinner):
        yield


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def format_duration(seconds: float) -> str:
    """Render a duration as its two most significant units, e.g. '3h 12m'."""
    remaining = max(int(round(seconds)), 0)
    parts = []
    for suffix, size in _DURATION_UNITS:
        value, remaining = divmod(remaining, size)
        if value or parts:
            parts.append(f"{value}{suffix}")
        if len(parts) == 2:
            break
    if not parts:
        return "0s"
    # "2h 0m" -> "2h"
    if len(parts) == 2 and parts[1].startswith("0"):
        parts.pop()
    return " ".join(parts)


def format_age(created_at: datetime | None, now: datetime | None = None) -> str:
    """Human age of a workload. 'Unknown' when created_at lies in the future."""
    if created_at is None:
        return "n/a"
    seconds = ((now or utc_now()) - created_at).total_seconds()
    if seconds < 0:
        return "Unknown"
    return format_duration(seconds)


def format_run_time(started_at: datetime | None, finished_at: datetime | None, now: datetime | None = None) -> str:
    """Elapsed time between start and finish, or start and now while still running."""
    if started_at is None:
        return "n/a"
    seconds = ((finished_at or now or utc_now()) - started_at).total_seconds()
    if seconds < 0:
        return "Unknown"
    return format_duration(seconds)


@contextmanager
def cbreak_terminal() -> Iterator[None]:
    """Put stdin in cbreak mode for single-key input, restoring it afterwards."""
    if not (HAS_TERMIOS and sys.stdin.isatty()):
        yield
        return

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        with suppress(termios.error):
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_key(timeout: float) -> str | None:
    """Wait up to timeout seconds for one keypress.

    Returns the raw key, with escape sequences (arrow keys) read in full,
    or None when nothing was pressed in time.
    """
    if not (HAS_TERMIOS and sys.stdin.isatty()):
        time.sleep(timeout)
        return None

    fd = sys.stdin.fileno()
    if not select.select([fd], [], [], timeout)[0]:
        return None

    char = os.read(fd, 1).decode("utf-8", errors="ignore")
    if char == "\x03":  # Ctrl-C
        raise KeyboardInterrupt()
    if char != "\x1b":
        return char

    sequence = char
    for _ in range(2):
        if not select.select([fd], [], [], ESCAPE_SEQUENCE_TIMEOUT)[0]:
            break
        sequence += os.read(fd, 1).decode("utf-8", errors="ignore")
    return sequence
