"""Tests for duration formatting and ``hours:minutes`` parsing."""

from datetime import timedelta

import pytest

from timekeeper.exceptions import DurationFormatError, InvalidInputError
from timekeeper.formatting import format_duration, format_duration_short, parse_duration


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0s"),
        (7, "7s"),
        (65, "1m 05s"),
        (3600, "1h 00m 00s"),
        (3723, "1h 02m 03s"),
        (90061, "25h 01m 01s"),
        (-5, "0s"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(timedelta(seconds=seconds)) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (30, "< 1m"),
        (240, "4m"),
        (3720, "1h 02m"),
    ],
)
def test_format_duration_short(seconds, expected):
    assert format_duration_short(timedelta(seconds=seconds)) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1:30", timedelta(hours=1, minutes=30)),
        ("0:05", timedelta(minutes=5)),
        (" 2:00 ", timedelta(hours=2)),
        ("12:59", timedelta(hours=12, minutes=59)),
        ("3", timedelta(hours=3)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("", "empty"),
        ("abc", "whole number"),
        ("1:xx", "whole number"),
        ("1.5:00", "whole number"),
        ("-1:30", "negative"),
        ("1:-5", "negative"),
        ("1:60", "less than 60"),
        ("1:75", "less than 60"),
        ("1:2:3", "hours:minutes"),
        ("1:", "whole number"),
    ],
)
def test_parse_duration_rejects(text, reason):
    with pytest.raises(DurationFormatError) as exc_info:
        parse_duration(text)
    assert reason in str(exc_info.value)


def test_duration_error_is_value_error():
    with pytest.raises(ValueError):
        parse_duration("nope")
    assert issubclass(DurationFormatError, InvalidInputError)
