"""ISO-8601 durations with a fixed length.

Only the units that map onto an exact :class:`~datetime.timedelta` are
accepted: weeks, days, hours, minutes and (fractional) seconds. Years and
months vary in length and are rejected.
"""

from __future__ import annotations

import re
from datetime import timedelta

_DURATION_RE = re.compile(
    r"""
    ^(?P<sign>-)?P
    (?:(?P<weeks>\d+)W)?
    (?:(?P<days>\d+)D)?
    (?:T
        (?:(?P<hours>\d+)H)?
        (?:(?P<minutes>\d+)M)?
        (?:(?P<seconds>\d+(?:[.,]\d+)?)S)?
    )?$
    """,
    re.VERBOSE,
)
_CALENDAR_UNITS_RE = re.compile(r"^-?P\d+[YM]")


def parse_duration(text: str) -> timedelta:
    """Parse ``[-]P[nW][nD][T[nH][nM][nS]]`` into a timedelta.

    Raises:
        ValueError: If *text* is not a fixed-length ISO-8601 duration.
    """
    candidate = text.strip().upper()
    match = _DURATION_RE.match(candidate)
    if match is None or candidate in ("P", "-P") or candidate.endswith("T"):
        if _CALENDAR_UNITS_RE.match(candidate):
            msg = f"Years and months have no fixed length: {text!r}"
            raise ValueError(msg)
        msg = f"Invalid ISO-8601 duration: {text!r}"
        raise ValueError(msg)

    parts = match.groupdict()
    try:
        result = timedelta(
            weeks=int(parts["weeks"] or 0),
            days=int(parts["days"] or 0),
            hours=int(parts["hours"] or 0),
            minutes=int(parts["minutes"] or 0),
            seconds=float((parts["seconds"] or "0").replace(",", ".")),
        )
    except OverflowError:
        msg = f"Duration out of range: {text!r}"
        raise ValueError(msg) from None
    return -result if parts["sign"] else result


def try_parse_duration(text: str) -> timedelta | None:
    """Like :func:`parse_duration` but returns None instead of raising."""
    try:
        return parse_duration(text)
    except ValueError:
        return None


def format_duration(value: timedelta) -> str:
    """Render *value* canonically, e.g. ``P1DT2H30M`` or ``PT0S``."""
    if not value:
        return "PT0S"
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)
    days = value.days
    hours, rest = divmod(value.seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    text = f"{sign}P"
    if days:
        text += f"{days}D"
    clock = ""
    if hours:
        clock += f"{hours}H"
    if minutes:
        clock += f"{minutes}M"
    if seconds or value.microseconds:
        if value.microseconds:
            clock += f"{seconds}.{value.microseconds:06d}".rstrip("0") + "S"
        else:
            clock += f"{seconds}S"
    if clock:
        text += f"T{clock}"
    return text
