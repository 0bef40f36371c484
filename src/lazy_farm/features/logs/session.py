"""Background log streaming for the log view."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterable, Iterator
from contextlib import suppress
from typing import TYPE_CHECKING

from ...core.errors import GatewayError, StreamError
from ...gateway import describe_error

if TYPE_CHECKING:
    from urllib3.response import HTTPResponse

    from ...gateway import ClusterGateway

LOG_ERROR_PREFIX = "Log error: "


def iter_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """Split a byte chunk stream into text lines, buffering partial lines across chunks."""
    buffer = bytearray()
    for chunk in chunks:
        buffer.extend(chunk)
        *complete, rest = buffer.split(b"\n")
        for raw in complete:
            yield raw.decode("utf-8", errors="replace").rstrip("\r")
        buffer = bytearray(rest)
    if buffer:
        yield buffer.decode("utf-8", errors="replace").rstrip("\r")


class LogStreamSession:
    """One follow-stream of a pod's log, read on a daemon thread.

    Lines are handed to the UI thread through an unbounded queue. stop()
    abandons the reader: queued lines are dropped, not drained.
    """

    def __init__(self, pod_name: str) -> None:
        self.pod_name = pod_name
        self._queue: queue.Queue[str] | None = queue.Queue()
        self._stop_event = threading.Event()
        self._response: HTTPResponse | None = None
        self._thread: threading.Thread | None = None

    @classmethod
    def start(cls, gateway: ClusterGateway, namespace: str, pod_name: str, tail_lines: int) -> LogStreamSession:
        session = cls(pod_name)
        session._thread = threading.Thread(
            target=session._read,
            args=(gateway, namespace, tail_lines, session._queue),
            name=f"log-reader-{pod_name}",
            daemon=True,
        )
        session._thread.start()
        return session

    @property
    def is_active(self) -> bool:
        return self._queue is not None

    def drain(self) -> list[str]:
        """Return every line received so far, without blocking."""
        if self._queue is None:
            return []
        lines = []
        while True:
            try:
                lines.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return lines

    def stop(self) -> None:
        """Abort the reader and drop the queue. Safe to call more than once."""
        if self._queue is None:
            return
        self._stop_event.set()
        self._queue = None
        self._close_response()

    def _read(self, gateway: ClusterGateway, namespace: str, tail_lines: int, lines: queue.Queue[str]) -> None:
        try:
            response = gateway.open_log_stream(namespace, self.pod_name, follow=True, tail_lines=tail_lines)
        except GatewayError as e:
            self._report(lines, e)
            return

        self._response = response
        if self._stop_event.is_set():
            self._close_response()
            return

        try:
            for line in iter_lines(response.stream(amt=None, decode_content=True)):
                if self._stop_event.is_set():
                    break
                lines.put(line)
        except Exception as e:  # noqa: BLE001
            self._report(lines, StreamError(describe_error(e)))
        finally:
            self._close_response()

    def _report(self, lines: queue.Queue[str], error: Exception) -> None:
        if not self._stop_event.is_set():
            lines.put(f"{LOG_ERROR_PREFIX}{error}")

    def _close_response(self) -> None:
        response = self._response
        if response is None:
            return
        with suppress(Exception):
            response.close()
        with suppress(Exception):
            response.release_conn()
