"""Base classes for cluster services and UI components."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from ..gateway import ClusterGateway
    from .config import FarmConfig


class BaseClusterService:
    """Base class for cluster interactions with common patterns."""

    def __init__(self, gateway: ClusterGateway, config: FarmConfig) -> None:
        self.gateway = gateway
        self.config = config


class BaseUIComponent:
    """Base class for UI components with common patterns."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
