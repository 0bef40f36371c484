"""Tests for the background log stream session."""

import threading
from unittest.mock import Mock

from urllib3.exceptions import ProtocolError

from lazy_farm.core.errors import GatewayError
from lazy_farm.features.logs.session import LogStreamSession, iter_lines

from conftest import wait_for


def _response(chunks):
    response = Mock()
    response.stream.return_value = iter(chunks)
    return response


def _failing_stream(chunks, error):
    yield from chunks
    raise error


def test_iter_lines_joins_lines_split_across_chunks():
    chunks = [b"frame 1\nfra", b"me 2\r\n", b"", b"tail without newline"]
    assert list(iter_lines(chunks)) == ["frame 1", "frame 2", "tail without newline"]


def test_iter_lines_handles_multibyte_split():
    text = "größe\n".encode()
    assert list(iter_lines([text[:3], text[3:]])) == ["größe"]


def test_iter_lines_replaces_invalid_bytes():
    assert list(iter_lines([b"bad \xff byte\n"])) == ["bad � byte"]


def test_session_forwards_lines_in_order(mock_gateway):
    mock_gateway.open_log_stream.return_value = _response([b"one\ntwo\n", b"three\n"])

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    received = []
    wait_for(lambda: received.extend(session.drain()) or len(received) == 3)

    assert received == ["one", "two", "three"]
    mock_gateway.open_log_stream.assert_called_once_with("dcc", "render-1", follow=True, tail_lines=150)
    session.stop()


def test_session_open_failure_yields_one_error_line(mock_gateway):
    mock_gateway.open_log_stream.side_effect = GatewayError("Opening logs for 'render-1': 404 Not Found")

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    received = []
    wait_for(lambda: received.extend(session.drain()) or received)
    session._thread.join(timeout=2)
    received.extend(session.drain())

    assert received == ["Log error: Opening logs for 'render-1': 404 Not Found"]


def test_session_read_failure_yields_error_after_lines(mock_gateway):
    response = Mock()
    response.stream.return_value = _failing_stream([b"partial\n"], ProtocolError("Connection broken"))
    mock_gateway.open_log_stream.return_value = response

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    session._thread.join(timeout=2)

    assert session.drain() == ["partial", "Log error: Connection broken"]
    response.close.assert_called()


def test_drain_is_non_blocking_when_empty(mock_gateway):
    release = threading.Event()

    def _blocked():
        release.wait(2)
        yield b"late\n"

    response = Mock()
    response.stream.return_value = _blocked()
    mock_gateway.open_log_stream.return_value = response

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    assert session.drain() == []

    release.set()
    session.stop()


def test_stop_drops_queue_and_closes_response(mock_gateway):
    release = threading.Event()
    first_line_sent = threading.Event()

    def _stream():
        yield b"first\n"
        first_line_sent.set()
        release.wait(2)
        yield b"after stop\n"

    response = Mock()
    response.stream.return_value = _stream()
    mock_gateway.open_log_stream.return_value = response

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    assert first_line_sent.wait(2)

    session.stop()
    release.set()
    session._thread.join(timeout=2)

    assert not session.is_active
    assert session.drain() == []
    response.close.assert_called()


def test_stop_is_idempotent(mock_gateway):
    mock_gateway.open_log_stream.return_value = _response([])

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    session.stop()
    session.stop()

    assert not session.is_active


def test_errors_after_stop_are_not_reported(mock_gateway):
    release = threading.Event()

    def _stream():
        release.wait(2)
        raise ProtocolError("socket closed")
        yield b""  # pragma: no cover

    response = Mock()
    response.stream.return_value = _stream()
    mock_gateway.open_log_stream.return_value = response

    session = LogStreamSession.start(mock_gateway, "dcc", "render-1", 150)
    queue_ref = session._queue
    session.stop()
    release.set()
    session._thread.join(timeout=2)

    assert queue_ref.empty()
