"""Tests for core utility functions."""

import time
from datetime import timedelta

import pytest

from lazy_farm.core.utils import (
    format_age,
    format_duration,
    format_run_time,
    print_error,
    print_info,
    read_key,
    show_spinner,
)

from conftest import NOW


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0s"),
        (45, "45s"),
        (60, "1m"),
        (61, "1m 1s"),
        (3600 * 3 + 12 * 60 + 40, "3h 12m"),
        (7200, "2h"),
        (86400 + 3600 * 5, "1d 5h"),
        (-5, "0s"),
        (59.6, "1m"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_age():
    assert format_age(NOW - timedelta(hours=3, minutes=12), NOW) == "3h 12m"


def test_format_age_absent_is_na():
    assert format_age(None, NOW) == "n/a"


def test_format_age_in_future_is_unknown():
    assert format_age(NOW + timedelta(seconds=30), NOW) == "Unknown"


def test_format_age_is_pure():
    created = NOW - timedelta(minutes=7)
    assert format_age(created, NOW) == format_age(created, NOW) == "7m"


def test_format_run_time_finished():
    assert format_run_time(NOW - timedelta(minutes=90), NOW - timedelta(minutes=30), NOW + timedelta(days=1)) == "1h"


def test_format_run_time_still_running_uses_now():
    assert format_run_time(NOW - timedelta(seconds=42), None, NOW) == "42s"


def test_format_run_time_negative_is_unknown():
    assert format_run_time(NOW, NOW - timedelta(seconds=1), NOW) == "Unknown"


def test_format_run_time_not_started():
    assert format_run_time(None, None, NOW) == "n/a"


def test_read_key_without_terminal_waits_and_returns_none(monkeypatch):
    monkeypatch.setattr("lazy_farm.core.utils.HAS_TERMIOS", False)
    assert read_key(0.01) is None


def test_show_spinner():
    with show_spinner():
        time.sleep(0.01)


def test_print_error(capsys):
    print_error("Something went wrong")
    captured = capsys.readouterr()
    assert "Something went wrong" in captured.out


def test_print_info(capsys):
    print_info("Informational message")
    captured = capsys.readouterr()
    assert "Informational message" in captured.out
