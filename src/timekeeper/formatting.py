"""Human-readable durations and parsing of user-entered ``hours:minutes``."""

from __future__ import annotations

from datetime import timedelta

from timekeeper.exceptions import DurationFormatError


def format_duration(duration: timedelta) -> str:
    """Format like ``"1h 02m 03s"``, ``"4m 05s"`` or ``"7s"``."""
    total = max(int(duration.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes:02d}m {seconds:02d}s"
    if minutes > 0:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"


def format_duration_short(duration: timedelta) -> str:
    """Minute-resolution format for summaries: ``"1h 02m"``, ``"4m"`` or ``"< 1m"``."""
    total = max(int(duration.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    if minutes > 0:
        return f"{minutes}m"
    return "< 1m"


def parse_duration(text: str) -> timedelta:
    """Parse ``"H:MM"`` (or a bare ``"H"``) into a duration.

    Raises:
        DurationFormatError: If either part is not a non-negative integer,
            or minutes are 60 or more.
    """
    raw = text.strip()
    if not raw:
        raise DurationFormatError(text, "empty input")

    hours_part, sep, minutes_part = raw.partition(":")
    if sep and ":" in minutes_part:
        raise DurationFormatError(text, "expected hours:minutes")

    hours = _parse_part(text, hours_part, "hours")
    minutes = _parse_part(text, minutes_part, "minutes") if sep else 0
    if minutes >= 60:
        raise DurationFormatError(text, "minutes must be less than 60")
    return timedelta(hours=hours, minutes=minutes)


def _parse_part(text: str, part: str, label: str) -> int:
    part = part.strip()
    if not (part.isascii() and part.isdigit()):
        if part.startswith("-") and part[1:].isdigit():
            raise DurationFormatError(text, f"{label} cannot be negative")
        raise DurationFormatError(text, f"{label} must be a whole number")
    return int(part)
