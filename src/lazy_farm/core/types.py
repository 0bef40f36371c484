"""Type definitions for lazy-farm."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..features.logs.session import LogStreamSession

UNASSIGNED_NODE = "unassigned"
UNKNOWN_OWNER = "Unknown"


@dataclass(frozen=True)
class WorkloadSnapshot:
    name: str
    status: str
    node: str = UNASSIGNED_NODE
    owner_tag: str = UNKNOWN_OWNER
    controller_id: str | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None


@dataclass(frozen=True)
class TableMode:
    pass


@dataclass(frozen=True)
class LogsMode:
    pod_name: str
    stream_start: datetime


Mode = TableMode | LogsMode


@dataclass(frozen=True)
class CancelJob:
    controller_id: str

    @property
    def prompt(self) -> str:
        return f"Cancel every workload of job '{self.controller_id}'?"


@dataclass(frozen=True)
class CheckoutNode:
    schedulable: bool

    @property
    def prompt(self) -> str:
        if self.schedulable:
            return "Return your node to the farm?"
        return "Check your node out of the farm?"


ConfirmAction = CancelJob | CheckoutNode


@dataclass
class ApplicationState:
    """Everything the dashboard shows. Mutated only by the controller."""

    items: list[WorkloadSnapshot] = field(default_factory=list)
    selection: int | None = None
    mode: Mode = field(default_factory=TableMode)
    confirmation: ConfirmAction | None = None
    log_buffer: list[str] = field(default_factory=list)
    scroll_offset: int = 0
    max_scroll: int = 0
    log_session: LogStreamSession | None = None
    host_schedulable: bool | None = None
    status_message: str | None = None
    refresh_error: str | None = None

    @property
    def selected_item(self) -> WorkloadSnapshot | None:
        if self.selection is None or not 0 <= self.selection < len(self.items):
            return None
        return self.items[self.selection]

    @property
    def in_logs(self) -> bool:
        return isinstance(self.mode, LogsMode)
