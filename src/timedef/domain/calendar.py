"""Calendar primitives — weekdays, months, and boundary arithmetic.

Pure functions over naive or aware ``datetime`` values. Time zones are
never converted: an aware value keeps its ``tzinfo`` through every
operation, so boundaries are computed in the value's own wall clock.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import IntEnum

_DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
_MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


class DayOfWeek(IntEnum):
    """Day of the week, numbered like :meth:`datetime.date.weekday`."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, value: date) -> DayOfWeek:
        """Project the weekday of a date or datetime."""
        return cls(value.weekday())

    @classmethod
    def parse(cls, text: str | int) -> DayOfWeek:
        """Parse ``"mon"``, ``"Monday"``, ``"0"`` or ``0`` into a DayOfWeek.

        Raises:
            ValueError: If *text* names no weekday.
        """
        if isinstance(text, int):
            return cls(text)
        key = text.strip().lower()
        if key.isdigit():
            return cls(int(key))
        for index, name in enumerate(_DAY_NAMES):
            if key == name or (len(key) >= 3 and name.startswith(key)):
                return cls(index)
        msg = f"Unknown weekday: {text!r}"
        raise ValueError(msg)

    @property
    def short(self) -> str:
        return self.name[:3]


class MonthOfYear(IntEnum):
    """Month of the year, numbered like :attr:`datetime.date.month`."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @classmethod
    def of(cls, value: date) -> MonthOfYear:
        """Project the month of a date or datetime."""
        return cls(value.month)

    @classmethod
    def parse(cls, text: str | int) -> MonthOfYear:
        """Parse ``"jun"``, ``"June"``, ``"6"`` or ``6`` into a MonthOfYear.

        Raises:
            ValueError: If *text* names no month.
        """
        if isinstance(text, int):
            return cls(text)
        key = text.strip().lower()
        if key.isdigit():
            return cls(int(key))
        for index, name in enumerate(_MONTH_NAMES, start=1):
            if key == name or (len(key) >= 3 and name.startswith(key)):
                return cls(index)
        msg = f"Unknown month: {text!r}"
        raise ValueError(msg)

    @property
    def short(self) -> str:
        return self.name[:3]


# --- Floors ---


def start_of_minute(dt: datetime) -> datetime:
    return dt.replace(second=0, microsecond=0)


def start_of_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(dt: datetime, week_start: DayOfWeek = DayOfWeek.MONDAY) -> datetime:
    """Midnight of the most recent *week_start* day on or before *dt*."""
    back = (dt.weekday() - int(week_start)) % 7
    return start_of_day(dt) - timedelta(days=back)


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt).replace(day=1)


def start_of_year(dt: datetime) -> datetime:
    return start_of_day(dt).replace(month=1, day=1)


# --- Next boundaries (strictly after dt) ---


def next_minute(dt: datetime) -> datetime:
    return start_of_minute(dt) + timedelta(minutes=1)


def next_hour(dt: datetime) -> datetime:
    return start_of_hour(dt) + timedelta(hours=1)


def next_day(dt: datetime) -> datetime:
    return start_of_day(dt) + timedelta(days=1)


def next_week(dt: datetime, week_start: DayOfWeek = DayOfWeek.MONDAY) -> datetime:
    return start_of_week(dt, week_start) + timedelta(days=7)


def next_month(dt: datetime) -> datetime:
    first = start_of_month(dt)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def next_year(dt: datetime) -> datetime:
    return start_of_year(dt).replace(year=dt.year + 1)


# --- Month arithmetic ---


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(dt: datetime, months: int) -> datetime:
    """Shift *dt* by whole calendar months, clamping the day of month.

    ``add_months(datetime(2015, 1, 31), 1)`` is 2015-02-28.
    """
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(dt.day, days_in_month(year, month))
    return dt.replace(year=year, month=month, day=day)


def occurrence_in_month(value: date) -> int:
    """Which occurrence (1..5) of its weekday *value* is within its month."""
    return (value.day - 1) // 7 + 1


def occurrence_from_end_of_month(value: date) -> int:
    """Occurrence of *value*'s weekday counted from the month end (-1 = last)."""
    remaining = days_in_month(value.year, value.month) - value.day
    return -(remaining // 7 + 1)
