"""Error types raised at the cluster boundary."""

from __future__ import annotations


class GatewayError(Exception):
    """Network, auth or API failure talking to the cluster."""


class StreamError(GatewayError):
    """Log stream read failure after the stream was opened."""
