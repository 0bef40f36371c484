"""Runtime configuration for lazy-farm."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass, field

DEFAULT_NAMESPACE = "dcc"
DEFAULT_SELECTOR = "artist"
DEFAULT_OWNER_LABEL = "artist"
DEFAULT_CHECKOUT_LABEL = "farm.schedulable"
DEFAULT_TICK_INTERVAL = 0.5  # seconds
MIN_TICK_INTERVAL = 0.1
MAX_TICK_INTERVAL = 1.0
DEFAULT_TAIL_LINES = 150


def clamp_tick_interval(seconds: float) -> float:
    return min(max(seconds, MIN_TICK_INTERVAL), MAX_TICK_INTERVAL)


def _env(name: str, default: str) -> str:
    return os.environ.get(name) or default


@dataclass
class FarmConfig:
    """Settings shared by the gateway, the controller and the CLI."""

    namespace: str = DEFAULT_NAMESPACE
    label_selector: str = DEFAULT_SELECTOR
    owner_label: str = DEFAULT_OWNER_LABEL
    node_name: str = field(default_factory=socket.gethostname)
    checkout_label: str = DEFAULT_CHECKOUT_LABEL
    tick_interval: float = DEFAULT_TICK_INTERVAL
    tail_lines: int = DEFAULT_TAIL_LINES

    def __post_init__(self) -> None:
        self.tick_interval = clamp_tick_interval(self.tick_interval)
        if self.tail_lines < 1:
            raise ValueError(f"tail_lines must be positive, got {self.tail_lines}")

    @classmethod
    def from_env(cls) -> FarmConfig:
        """Build a config from LAZY_FARM_* environment variables."""
        return cls(
            namespace=_env("LAZY_FARM_NAMESPACE", DEFAULT_NAMESPACE),
            label_selector=_env("LAZY_FARM_SELECTOR", DEFAULT_SELECTOR),
            owner_label=_env("LAZY_FARM_OWNER_LABEL", DEFAULT_OWNER_LABEL),
            node_name=_env("LAZY_FARM_NODE", socket.gethostname()),
            checkout_label=_env("LAZY_FARM_CHECKOUT_LABEL", DEFAULT_CHECKOUT_LABEL),
            tick_interval=float(_env("LAZY_FARM_TICK", str(DEFAULT_TICK_INTERVAL))),
            tail_lines=int(_env("LAZY_FARM_TAIL_LINES", str(DEFAULT_TAIL_LINES))),
        )
