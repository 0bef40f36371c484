"""UI layer - turns dashboard state into rich renderables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rich.align import Align
from rich.console import Console, RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .core.base import BaseUIComponent
from .core.types import ApplicationState, LogsMode
from .features.logs.ui import LogsUI
from .features.workload.ui import WorkloadUI

HEADER_ROWS = 3
FOOTER_ROWS = 3
CONFIRMATION_ROWS = 6
HELP_TEXT = "lazy-farm - (q) to quit, (Enter) to view logs, (Shift + D) to cancel a job."


@dataclass
class Frame:
    """One rendered tick: what to draw, plus the scroll limit the log view measured."""

    renderable: RenderableType
    max_scroll: int = 0


def checkout_status_text(host_schedulable: bool | None) -> str:
    if host_schedulable is None:
        return "Your node is not part of the cluster."
    if host_schedulable:
        return "Your node is on the farm. Press (o) to check out your node."
    return "Your node is not on the farm. Press (p) to return it to the farm."


class DashboardView(BaseUIComponent):
    """Composes the table, log and confirmation components into one screen."""

    def __init__(self, console: Console | None = None) -> None:
        super().__init__(console)
        self._workload_ui = WorkloadUI(self.console)
        self._logs_ui = LogsUI(self.console)

    def render(self, state: ApplicationState, width: int, height: int, now: datetime) -> Frame:
        if isinstance(state.mode, LogsMode):
            renderable, max_scroll = self._logs_ui.render_logs(
                state.mode.pod_name,
                state.mode.stream_start,
                state.log_buffer,
                state.scroll_offset,
                width,
                height,
                now,
            )
            return Frame(renderable, max_scroll)
        return Frame(self._render_table_screen(state, height, now))

    def _render_table_screen(self, state: ApplicationState, height: int, now: datetime) -> Layout:
        footer = Text(checkout_status_text(state.host_schedulable))
        footer_rows = FOOTER_ROWS
        for message in (state.refresh_error, state.status_message):
            if message:
                footer.append(f"\n{message}", style="yellow")
                footer_rows += 1

        confirmation_rows = CONFIRMATION_ROWS if state.confirmation else 0
        table_height = max(height - HEADER_ROWS - footer_rows - confirmation_rows, 1)

        sections = [
            Layout(Panel(HELP_TEXT), name="header", size=HEADER_ROWS),
            Layout(
                self._workload_ui.render_table(state.items, state.selection, table_height, now),
                name="table",
                ratio=1,
            ),
        ]
        if state.confirmation:
            confirmation = self.render_confirmation(state.confirmation.prompt)
            sections.append(Layout(confirmation, name="confirm", size=CONFIRMATION_ROWS))
        sections.append(Layout(Panel(footer), name="footer", size=footer_rows))

        layout = Layout()
        layout.split_column(*sections)
        return layout

    def render_confirmation(self, prompt: str) -> Panel:
        body = Text.assemble(f"{prompt}\n\n", ("(y/n)", "bold"), justify="center")
        return Panel(Align.center(body, vertical="middle"), title="Confirmation", border_style="yellow")
