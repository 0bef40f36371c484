"""UI components for the workload table."""

from __future__ import annotations

from datetime import datetime

from rich.table import Table

from ...core.base import BaseUIComponent
from ...core.types import WorkloadSnapshot
from ...core.utils import format_age, format_run_time

SELECTION_SYMBOL = "⇝"
# Table border, header row and header separator
TABLE_CHROME_ROWS = 4

_STATUS_STYLES = {
    "Running": "green",
    "Pending": "blue",
    "Succeeded": "bright_black",
    "Failed": "red",
    "CrashLoopBackOff": "red",
    "CrashLoopBackoff": "red",
}

_COLUMNS = (
    ("Name", 5),
    ("Status", 1),
    ("Owner", 1),
    ("Node", 1),
    ("Run Time", 1),
    ("Age", 1),
)


def status_style(status: str) -> str:
    """Row colour for a workload status; unknown statuses get the default style."""
    return _STATUS_STYLES.get(status, "")


def visible_window(item_count: int, selection: int | None, rows: int) -> tuple[int, int]:
    """Slice of rows to draw so the selected row stays on screen."""
    rows = max(rows, 1)
    if item_count <= rows:
        return 0, item_count
    start = 0 if selection is None else max(selection - rows + 1, 0)
    return start, min(start + rows, item_count)


class WorkloadUI(BaseUIComponent):
    """Renders workload snapshots as a table."""

    def render_table(
        self,
        items: list[WorkloadSnapshot],
        selection: int | None,
        height: int,
        now: datetime,
    ) -> Table:
        table = Table(expand=True, show_lines=False, highlight=False)
        table.add_column("", width=1, no_wrap=True)
        for title, ratio in _COLUMNS:
            table.add_column(title, ratio=ratio, no_wrap=True, overflow="ellipsis")

        start, end = visible_window(len(items), selection, height - TABLE_CHROME_ROWS)
        for index in range(start, end):
            item = items[index]
            selected = index == selection
            style = status_style(item.status)
            if selected:
                style = f"{style} reverse".strip()
            table.add_row(
                SELECTION_SYMBOL if selected else "",
                item.name,
                item.status,
                item.owner_tag,
                item.node,
                format_run_time(item.started_at, item.finished_at, now),
                format_age(item.created_at, now),
                style=style or None,
            )

        if not items:
            table.caption = "No workloads found"
        return table
