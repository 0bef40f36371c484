"""UI components for the log view."""

from __future__ import annotations

from datetime import datetime

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from ...core.base import BaseUIComponent
from ...core.utils import format_duration
from .progress import estimate_eta_seconds, latest_progress

EMPTY_LOG_TEXT = "(no data yet)"
PANEL_BORDER_ROWS = 2
PANEL_BORDER_COLUMNS = 4
PROGRESS_ROWS = 3


class LogsUI(BaseUIComponent):
    """Renders the log pane with an optional progress/ETA bar."""

    def render_logs(
        self,
        pod_name: str,
        stream_start: datetime,
        lines: list[str],
        scroll_offset: int,
        width: int,
        height: int,
        now: datetime,
    ) -> tuple[RenderableType, int]:
        """Return the log pane and the largest valid scroll offset for its size.

        scroll_offset counts wrapped rows back from the bottom, so 0 follows the tail.
        """
        percent = latest_progress(lines)
        log_height = height - PANEL_BORDER_ROWS - (PROGRESS_ROWS if percent is not None else 0)
        log_height = max(log_height, 1)
        log_width = max(width - PANEL_BORDER_COLUMNS, 1)

        if lines:
            text = Text("\n".join([f"Start Logs for {pod_name}", *lines]))
        else:
            text = Text(EMPTY_LOG_TEXT, style="dim")
        rows = list(text.wrap(self.console, log_width))

        max_scroll = max(len(rows) - log_height, 0)
        offset = min(max(scroll_offset, 0), max_scroll)
        start = max_scroll - offset
        visible = Text("\n").join(rows[start : start + log_height])

        log_panel = Panel(
            visible, title=f"Logs for {pod_name}", title_align="left", height=log_height + PANEL_BORDER_ROWS
        )
        if percent is None:
            return log_panel, max_scroll

        elapsed = (now - stream_start).total_seconds()
        eta = format_duration(estimate_eta_seconds(percent, elapsed))
        gauge = Panel(
            ProgressBar(total=100, completed=percent, complete_style="blue", style="black"),
            title=f"ETA: {eta}  ({percent}%)",
            title_align="left",
            height=PROGRESS_ROWS,
        )
        return Group(log_panel, gauge), max_scroll
