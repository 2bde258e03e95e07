"""Period — an immutable closed interval ``[start, end]`` of instants.

INVARIANT: ``start <= end``. Enforced at construction; a violated range
raises :class:`InvalidPeriodError`. Zero-length periods are legal.

Every arithmetic operation returns new periods. Decomposition methods
(``days()``, ``hours()``, ...) are generators: re-invoking one starts a
fresh pass, nothing is cached on the period.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum, IntEnum

from timedef.domain.calendar import (
    DayOfWeek,
    next_day,
    next_hour,
    next_minute,
    next_month,
    next_week,
    next_year,
)


class InvalidPeriodError(ValueError):
    """Raised when a period would end before it starts."""


class Direction(Enum):
    """Which bound an anchor instant becomes in :meth:`Period.from_duration`."""

    FORWARD = "forward"
    BACKWARD = "backward"


class Granularity(IntEnum):
    """Calendar units a period can be decomposed into, finest first."""

    MINUTE = 0
    HOUR = 1
    DAY = 2
    WEEK = 3
    MONTH = 4
    YEAR = 5


@dataclass(frozen=True, order=True)
class Period:
    """A closed time interval ordered by ``(start, end)``."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        start_aware = self.start.tzinfo is not None
        end_aware = self.end.tzinfo is not None
        if start_aware != end_aware:
            msg = (
                f"start ({self.start.isoformat()}) and end ({self.end.isoformat()}) "
                "must both be naive or both be aware"
            )
            raise InvalidPeriodError(msg)
        if self.end < self.start:
            msg = f"end ({self.end.isoformat()}) is before start ({self.start.isoformat()})"
            raise InvalidPeriodError(msg)

    # --- Construction ---

    @classmethod
    def from_duration(
        cls,
        anchor: datetime,
        duration: timedelta,
        direction: Direction = Direction.FORWARD,
    ) -> Period:
        """Build a period from an anchor instant and a duration.

        FORWARD makes *anchor* the start, BACKWARD makes it the end.
        """
        if direction is Direction.FORWARD:
            return cls(anchor, anchor + duration)
        return cls(anchor - duration, anchor)

    @classmethod
    def from_dates(cls, start: date, end: date) -> Period:
        """Period between two dates, both taken at midnight."""
        return cls(datetime.combine(start, time.min), datetime.combine(end, time.min))

    @classmethod
    def from_times(cls, start: time, end: time, *, on: date) -> Period:
        """Period between two times of day on the date *on*."""
        return cls(datetime.combine(on, start), datetime.combine(on, end))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """True for a zero-length period."""
        return self.start == self.end

    # --- Operators ---

    def __add__(self, span: timedelta) -> Period:
        if not isinstance(span, timedelta):
            return NotImplemented
        return Period(self.start, self.end + span)

    def __sub__(self, span: timedelta) -> Period:
        if not isinstance(span, timedelta):
            return NotImplemented
        return Period(self.start, self.end - span)

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()}]"

    # --- Predicates ---

    def is_between(self, instant: datetime) -> bool:
        """Inclusive containment: ``start <= instant <= end``."""
        return self.start <= instant <= self.end

    def is_within(self, instant: datetime) -> bool:
        """Exclusive containment: ``start < instant < end``."""
        return self.start < instant < self.end

    def is_overlapping(self, other: Period) -> bool:
        """True if the periods share at least one instant (touching counts)."""
        return self.start <= other.end and self.end >= other.start

    def contains(self, other: Period) -> bool:
        """True if *other* lies entirely inside this period."""
        return self.start <= other.start and other.end <= self.end

    def is_covered_by(self, periods: Iterable[Period]) -> bool:
        """True if the union of *periods* covers this period completely.

        Each candidate is subtracted from whatever is still uncovered;
        the period is covered when nothing remains.
        """
        remaining = [self]
        for candidate in periods:
            remaining = [piece for part in remaining for piece in part.subtract(candidate)]
            if not remaining:
                return True
        return not remaining

    # --- Interval arithmetic ---

    def intersect(self, other: Period) -> Period | None:
        """The overlap of both periods, or None if they are disjoint."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start > end:
            return None
        return Period(start, end)

    def intersect_all(self, periods: Iterable[Period]) -> Iterator[Period]:
        """Yield the overlap with each candidate, skipping disjoint ones."""
        for candidate in periods:
            overlap = self.intersect(candidate)
            if overlap is not None:
                yield overlap

    def union(self, other: Period) -> Period | None:
        """The covering period if both overlap or touch, else None."""
        if not self.is_overlapping(other):
            return None
        return Period(min(self.start, other.start), max(self.end, other.end))

    def subtract(self, other: Period) -> list[Period]:
        """The parts of this period not covered by *other*.

        Returns no period if *other* covers this one, the whole period if
        they do not overlap, one remainder if *other* overlaps one side,
        and two remainders if *other* is strictly nested inside.
        """
        if not self.is_overlapping(other):
            return [self]
        result: list[Period] = []
        #  self  [--------
        #  other     [----
        if self.start < other.start:
            result.append(Period(self.start, other.start))
        #  self  --------]
        #  other ----]
        if self.end > other.end:
            result.append(Period(other.end, self.end))
        return result

    def symmetric_difference(self, other: Period) -> list[Period]:
        """Parts covered by exactly one of the two periods."""
        return self.subtract(other) + other.subtract(self)

    # --- Decomposition ---

    def _chop(self, boundary: Callable[[datetime], datetime]) -> Iterator[Period]:
        if self.start == self.end:
            yield self
            return
        cursor = self.start
        while cursor < self.end:
            piece_end = min(boundary(cursor), self.end)
            yield Period(cursor, piece_end)
            cursor = piece_end

    def minutes(self) -> Iterator[Period]:
        """Pieces aligned to the top of each minute."""
        return self._chop(next_minute)

    def hours(self) -> Iterator[Period]:
        """Pieces aligned to the top of each hour."""
        return self._chop(next_hour)

    def days(self) -> Iterator[Period]:
        """Pieces aligned to midnight."""
        return self._chop(next_day)

    def weeks(self, week_start: DayOfWeek = DayOfWeek.MONDAY) -> Iterator[Period]:
        """Pieces aligned to midnight of *week_start*."""
        return self._chop(lambda dt: next_week(dt, week_start))

    def months(self) -> Iterator[Period]:
        """Pieces aligned to the first of each month."""
        return self._chop(next_month)

    def years(self) -> Iterator[Period]:
        """Pieces aligned to January 1st."""
        return self._chop(next_year)

    def split(
        self,
        unit: Granularity,
        week_start: DayOfWeek = DayOfWeek.MONDAY,
    ) -> Iterator[Period]:
        """Decompose by *unit*, dispatching to the matching method."""
        if unit is Granularity.WEEK:
            return self.weeks(week_start)
        return _SPLITTERS[unit](self)


_SPLITTERS: dict[Granularity, Callable[[Period], Iterator[Period]]] = {
    Granularity.MINUTE: Period.minutes,
    Granularity.HOUR: Period.hours,
    Granularity.DAY: Period.days,
    Granularity.MONTH: Period.months,
    Granularity.YEAR: Period.years,
}


def merge_periods(periods: Iterable[Period]) -> list[Period]:
    """Collapse overlapping or touching periods into disjoint ones, sorted by start."""
    merged: list[Period] = []
    for period in sorted(periods):
        if merged:
            combined = merged[-1].union(period)
            if combined is not None:
                merged[-1] = combined
                continue
        merged.append(period)
    return merged
