"""Main application logic for lazy-farm: the dashboard controller."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from rich.console import Console, RenderableType
from rich.live import Live

from ..features.logs.session import LogStreamSession
from ..features.node.actions import FarmActions
from ..features.workload.workload import WorkloadService
from ..ui import DashboardView
from .errors import GatewayError
from .navigation import Key, clamp_scroll, clamp_selection, move_selection
from .types import ApplicationState, CancelJob, CheckoutNode, ConfirmAction, LogsMode, TableMode
from .utils import cbreak_terminal, console, read_key, utc_now

if TYPE_CHECKING:
    from ..gateway import ClusterGateway
    from .config import FarmConfig


class DashboardApp:
    """Owns the dashboard state and drives the render/input tick loop."""

    def __init__(
        self,
        gateway: ClusterGateway,
        config: FarmConfig,
        view: DashboardView | None = None,
        app_console: Console | None = None,
        clock: Callable[[], datetime] = utc_now,
        key_reader: Callable[[float], str | None] = read_key,
    ) -> None:
        self.gateway = gateway
        self.config = config
        self.console = app_console or console
        self.view = view or DashboardView(self.console)
        self.workloads = WorkloadService(gateway, config)
        self.actions = FarmActions(gateway, config)
        self.state = ApplicationState()
        self._clock = clock
        self._read_key = key_reader

    def load(self) -> None:
        """Initial fetch. Unlike refresh(), a failure here propagates."""
        self.state.items = self.workloads.list_snapshots()
        self.state.selection = clamp_selection(None, len(self.state.items))
        self.state.host_schedulable = self.actions.is_host_schedulable()

    def run(self) -> None:
        """Run the tick loop until the operator quits."""
        with (
            cbreak_terminal(),
            Live(console=self.console, screen=True, auto_refresh=False, transient=True) as live,
        ):
            try:
                while True:
                    live.update(self.render(), refresh=True)
                    if self.tick(self._read_key(self.config.tick_interval)):
                        break
            finally:
                self.shutdown()

    def render(self) -> RenderableType:
        size = self.console.size
        frame = self.view.render(self.state, size.width, size.height, self._clock())
        self.state.max_scroll = frame.max_scroll
        self.state.scroll_offset = clamp_scroll(self.state.scroll_offset, frame.max_scroll)
        return frame.renderable

    def tick(self, raw_key: str | None) -> bool:
        """Process one tick after rendering. Returns True when the loop should exit."""
        pressed = raw_key is not None
        if pressed and self.handle_key(Key.from_raw(raw_key)):
            return True

        if self.state.in_logs:
            self.drain_logs()
        elif not pressed:
            self.refresh()
        self.collect_action_outcomes()
        return False

    def refresh(self) -> None:
        """Replace items with a fresh fetch, keeping the old ones on failure."""
        try:
            items = self.workloads.list_snapshots()
        except GatewayError as e:
            self.state.refresh_error = f"Refresh failed: {e}"
            return

        self.state.items = items
        self.state.selection = clamp_selection(self.state.selection, len(items))
        self.state.refresh_error = None
        # A failed node read mid-session keeps the last known checkout state
        host_schedulable = self.actions.is_host_schedulable()
        if host_schedulable is not None:
            self.state.host_schedulable = host_schedulable

    def collect_action_outcomes(self) -> None:
        """Show the latest finished background action in the footer."""
        for outcome in self.actions.drain_outcomes():
            self.state.status_message = outcome

    def handle_key(self, key: Key | None) -> bool:
        """Dispatch a key to the active mode. Returns True to quit."""
        if key is None:
            return False
        if self.state.confirmation is not None:
            self._handle_confirmation_key(key)
            return False
        if self.state.in_logs:
            self._handle_logs_key(key)
            return False
        return self._handle_table_key(key)

    def _handle_table_key(self, key: Key) -> bool:
        if key in (Key.QUIT, Key.ESCAPE):
            self.stop_log_session()
            return True
        handler = self.get_table_key_handlers().get(key)
        if handler:
            handler()
        return False

    def _handle_logs_key(self, key: Key) -> None:
        handler = self.get_logs_key_handlers().get(key)
        if handler:
            handler()

    def _handle_confirmation_key(self, key: Key) -> None:
        if key == Key.CONFIRM:
            self.confirm()
        elif key == Key.DENY:
            self.deny()

    def get_table_key_handlers(self) -> dict[Key, Callable[[], None]]:
        """Get mapping of table-mode keys to their handlers."""
        return {
            Key.DOWN: lambda: self.move(1),
            Key.UP: lambda: self.move(-1),
            Key.ENTER: self.start_log_mode,
            Key.CANCEL_JOB: self.request_cancel_job,
            Key.CHECK_OUT: lambda: self.request_checkout(schedulable=False),
            Key.CHECK_IN: lambda: self.request_checkout(schedulable=True),
        }

    def get_logs_key_handlers(self) -> dict[Key, Callable[[], None]]:
        """Get mapping of log-mode keys to their handlers."""
        return {
            Key.QUIT: self.exit_log_mode,
            Key.ESCAPE: self.exit_log_mode,
            Key.UP: lambda: self.scroll(1),
            Key.DOWN: lambda: self.scroll(-1),
        }

    def move(self, step: int) -> None:
        self.state.selection = move_selection(self.state.selection, len(self.state.items), step)

    def scroll(self, step: int) -> None:
        """Scroll the log view; positive steps go back in time."""
        self.state.scroll_offset = clamp_scroll(self.state.scroll_offset + step, self.state.max_scroll)

    def request_cancel_job(self) -> None:
        """Ask to cancel the selected row's whole job family."""
        item = self.state.selected_item
        if item is None or item.controller_id is None:
            return
        self.state.confirmation = CancelJob(item.controller_id)

    def request_checkout(self, schedulable: bool) -> None:
        self.state.confirmation = CheckoutNode(schedulable)

    def confirm(self) -> None:
        action = self.state.confirmation
        self.state.confirmation = None
        if action is not None:
            self.execute(action)

    def deny(self) -> None:
        self.state.confirmation = None

    def execute(self, action: ConfirmAction) -> None:
        if isinstance(action, CancelJob):
            self.actions.cancel_job(action.controller_id)
            return

        success, error = self.actions.set_checkout(action.schedulable)
        if success:
            self.state.host_schedulable = action.schedulable
            self.state.status_message = None
        else:
            self.state.status_message = error

    def start_log_mode(self) -> None:
        """Switch to the log view of the selected workload, replacing any previous session."""
        item = self.state.selected_item
        if item is None:
            return

        self.stop_log_session()
        self.state.log_buffer = []
        self.state.scroll_offset = 0
        self.state.max_scroll = 0
        self.state.log_session = LogStreamSession.start(
            self.gateway, self.config.namespace, item.name, self.config.tail_lines
        )
        self.state.mode = LogsMode(pod_name=item.name, stream_start=item.started_at or self._clock())

    def exit_log_mode(self) -> None:
        self.stop_log_session()
        self.state.log_buffer = []
        self.state.scroll_offset = 0
        self.state.max_scroll = 0
        self.state.mode = TableMode()

    def drain_logs(self) -> None:
        if self.state.log_session is not None:
            self.state.log_buffer.extend(self.state.log_session.drain())

    def stop_log_session(self) -> None:
        session = self.state.log_session
        self.state.log_session = None
        if session is not None:
            session.stop()

    def shutdown(self) -> None:
        self.stop_log_session()
