"""ALF_PROGRESS markers and ETA estimation."""

from __future__ import annotations

from collections.abc import Sequence

PROGRESS_TOKEN = "ALF_PROGRESS"


def parse_progress(line: str) -> int | None:
    """Parse 'ALF_PROGRESS 57%' into 57, clamped to 0-100. Anything else gives None."""
    if not line.startswith(PROGRESS_TOKEN):
        return None
    tokens = line.split()
    if len(tokens) < 2 or tokens[0] != PROGRESS_TOKEN:
        return None
    try:
        percent = int(tokens[1].removesuffix("%"))
    except ValueError:
        return None
    return min(max(percent, 0), 100)


def latest_progress(lines: Sequence[str]) -> int | None:
    """Most recent progress value in the buffer."""
    for line in reversed(lines):
        percent = parse_progress(line)
        if percent is not None:
            return percent
    return None


def estimate_eta_seconds(percent: int, elapsed_seconds: float) -> int:
    """Linear extrapolation of the remaining time. Noisy early and near the end."""
    if percent >= 100 or percent < 1:
        return 0
    total = elapsed_seconds / (percent / 100)
    return max(round(total - elapsed_seconds), 0)
