"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from timedef.domain.durations import format_duration
from timedef.domain.period import Period


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 date or date-time; a bare date means midnight.

    Raises:
        ValueError: If *text* is not ISO-8601.
    """
    value = text.strip()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        msg = f"Invalid ISO-8601 instant: {text!r}"
        raise ValueError(msg) from None


def parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        msg = f"Invalid ISO-8601 date: {text!r}"
        raise ValueError(msg) from None


def parse_time(text: str) -> time:
    try:
        return time.fromisoformat(text.strip())
    except ValueError:
        msg = f"Invalid ISO-8601 time: {text!r}"
        raise ValueError(msg) from None


def split_range(text: str) -> tuple[str, str]:
    """Split ``"FROM/TO"`` into its two halves.

    Examples:
        >>> split_range("2015-06-01/2015-08-01")
        ('2015-06-01', '2015-08-01')
    """
    left, sep, right = text.partition("/")
    if not sep or not left.strip() or not right.strip():
        msg = f"Expected FROM/TO, got {text!r}"
        raise ValueError(msg)
    return left.strip(), right.strip()


def parse_period(start: str, end: str) -> Period:
    """Build a Period from two ISO-8601 strings.

    Raises:
        ValueError: For unparsable text (``InvalidPeriodError`` for a
            reversed or mixed-kind range).
    """
    return Period(parse_instant(start), parse_instant(end))


def period_to_dict(period: Period) -> dict[str, Any]:
    """JSON-friendly view of a period."""
    return {
        "start": period.start.isoformat(),
        "end": period.end.isoformat(),
        "duration": format_duration(period.duration),
        "duration_seconds": period.duration.total_seconds(),
    }
