"""TimeDef — the closed recurrence-expression tree.

Pure data, no evaluation logic (see :mod:`timedef.services.validator`).
Every node is a frozen dataclass, so equality and hashing are structural:
same node class, same field values, recursively through combinators.
Value sets are normalised to ``frozenset`` on construction, which never
fails — an empty set is legal and simply matches nothing.

Node families:
- Point patterns: Year, Month, Day, Hour, Minute, Weekday, WeekOfMonth.
- Durations: Years, Months, Days, Hours, Minutes.
- Ranges: DateSpan, TimeSpan, DateTimeSpan, Weeks.
- Combinators: And, Or, Not, Union, Difference.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time

from timedef.domain.calendar import DayOfWeek, MonthOfYear


class TimeDef:
    """Base class of every expression node.

    ``a & b``, ``a | b`` and ``~a`` build And, Or and Not nodes.
    """

    __slots__ = ()

    def __and__(self, other: TimeDef) -> TimeDef:
        return And(self, other)

    def __or__(self, other: TimeDef) -> TimeDef:
        return Or(self, other)

    def __invert__(self) -> TimeDef:
        return Not(self)


def _freeze(node: TimeDef, name: str) -> None:
    object.__setattr__(node, name, frozenset(getattr(node, name)))


def _fmt_values(values: frozenset[int], enum: type[DayOfWeek] | type[MonthOfYear] | None = None) -> str:
    parts: list[str] = []
    for value in sorted(values):
        if enum is not None and value in enum._value2member_map_:
            parts.append(enum(value).short)
        else:
            parts.append(str(value))
    return ", ".join(parts)


# --- Point patterns ---


@dataclass(frozen=True)
class Year(TimeDef):
    years: frozenset[int]

    def __post_init__(self) -> None:
        _freeze(self, "years")

    def __str__(self) -> str:
        return f"Year({_fmt_values(self.years)})"


@dataclass(frozen=True)
class Month(TimeDef):
    months: frozenset[MonthOfYear]

    def __post_init__(self) -> None:
        _freeze(self, "months")

    def __str__(self) -> str:
        return f"Month({_fmt_values(self.months, MonthOfYear)})"


@dataclass(frozen=True)
class Day(TimeDef):
    """Day of month."""

    days: frozenset[int]

    def __post_init__(self) -> None:
        _freeze(self, "days")

    def __str__(self) -> str:
        return f"Day({_fmt_values(self.days)})"


@dataclass(frozen=True)
class Hour(TimeDef):
    """Hour of day. Two values are two allowed hours, not a range."""

    hours: frozenset[int]

    def __post_init__(self) -> None:
        _freeze(self, "hours")

    def __str__(self) -> str:
        return f"Hour({_fmt_values(self.hours)})"


@dataclass(frozen=True)
class Minute(TimeDef):
    """Minute of hour. Two values are two allowed minutes, not a range."""

    minutes: frozenset[int]

    def __post_init__(self) -> None:
        _freeze(self, "minutes")

    def __str__(self) -> str:
        return f"Minute({_fmt_values(self.minutes)})"


@dataclass(frozen=True)
class Weekday(TimeDef):
    weekdays: frozenset[DayOfWeek]

    def __post_init__(self) -> None:
        _freeze(self, "weekdays")

    def __str__(self) -> str:
        return f"Weekday({_fmt_values(self.weekdays, DayOfWeek)})"


@dataclass(frozen=True)
class WeekOfMonth(TimeDef):
    """The *occurrence*-th *weekday* of a month; negative counts from the end."""

    weekday: DayOfWeek
    occurrence: int

    def __str__(self) -> str:
        return f"WeekOfMonth({_fmt_values(frozenset({self.weekday}), DayOfWeek)}, {self.occurrence})"


# --- Durations ---


@dataclass(frozen=True)
class Years(TimeDef):
    count: int

    def __str__(self) -> str:
        return f"Years({self.count})"


@dataclass(frozen=True)
class Months(TimeDef):
    count: int

    def __str__(self) -> str:
        return f"Months({self.count})"


@dataclass(frozen=True)
class Days(TimeDef):
    count: int

    def __str__(self) -> str:
        return f"Days({self.count})"


@dataclass(frozen=True)
class Hours(TimeDef):
    count: int

    def __str__(self) -> str:
        return f"Hours({self.count})"


@dataclass(frozen=True)
class Minutes(TimeDef):
    count: int

    def __str__(self) -> str:
        return f"Minutes({self.count})"


# --- Ranges ---


@dataclass(frozen=True)
class DateSpan(TimeDef):
    start: date
    end: date

    def __str__(self) -> str:
        return f"DateSpan({self.start.isoformat()}..{self.end.isoformat()})"


@dataclass(frozen=True)
class TimeSpan(TimeDef):
    """Time-of-day range; ``start > end`` wraps past midnight."""

    start: time
    end: time

    def __str__(self) -> str:
        return f"TimeSpan({self.start.isoformat('minutes')}..{self.end.isoformat('minutes')})"


@dataclass(frozen=True)
class DateTimeSpan(TimeDef):
    start: datetime
    end: datetime

    def __str__(self) -> str:
        return f"DateTimeSpan({self.start.isoformat()}..{self.end.isoformat()})"


@dataclass(frozen=True)
class Weeks(TimeDef):
    count: int
    week_start: DayOfWeek = DayOfWeek.MONDAY

    def __str__(self) -> str:
        return f"Weeks({self.count}, {self.week_start.short})"


# --- Combinators ---


@dataclass(frozen=True)
class And(TimeDef):
    lhs: TimeDef
    rhs: TimeDef

    def __str__(self) -> str:
        return f"({self.lhs} & {self.rhs})"


@dataclass(frozen=True)
class Or(TimeDef):
    lhs: TimeDef
    rhs: TimeDef

    def __str__(self) -> str:
        return f"({self.lhs} | {self.rhs})"


@dataclass(frozen=True)
class Not(TimeDef):
    operand: TimeDef

    def __str__(self) -> str:
        return f"~{self.operand}"


@dataclass(frozen=True)
class Union(TimeDef):
    lhs: TimeDef
    rhs: TimeDef

    def __str__(self) -> str:
        return f"Union({self.lhs}, {self.rhs})"


@dataclass(frozen=True)
class Difference(TimeDef):
    lhs: TimeDef
    rhs: TimeDef

    def __str__(self) -> str:
        return f"Difference({self.lhs}, {self.rhs})"


POINT_PATTERNS: tuple[type[TimeDef], ...] = (Year, Month, Day, Hour, Minute, Weekday, WeekOfMonth)
DURATIONS: tuple[type[TimeDef], ...] = (Years, Months, Days, Hours, Minutes)
RANGES: tuple[type[TimeDef], ...] = (DateSpan, TimeSpan, DateTimeSpan, Weeks)
COMBINATORS: tuple[type[TimeDef], ...] = (And, Or, Not, Union, Difference)


def is_point_pattern(node: TimeDef) -> bool:
    return isinstance(node, POINT_PATTERNS)


def is_duration(node: TimeDef) -> bool:
    return isinstance(node, DURATIONS)


def is_range(node: TimeDef) -> bool:
    return isinstance(node, RANGES)


def is_combinator(node: TimeDef) -> bool:
    return isinstance(node, COMBINATORS)


# --- Traversal ---


def children(node: TimeDef) -> tuple[TimeDef, ...]:
    """Direct sub-expressions of *node* (empty for leaves)."""
    if isinstance(node, Not):
        return (node.operand,)
    if isinstance(node, (And, Or, Union, Difference)):
        return (node.lhs, node.rhs)
    return ()


def walk(node: TimeDef) -> Iterator[TimeDef]:
    """Yield *node* and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


# --- Chaining ---


def chain(timedefs: Iterable[TimeDef], combine: Callable[[TimeDef, TimeDef], TimeDef]) -> TimeDef:
    """Left-fold *timedefs* with a binary node factory.

    Raises:
        ValueError: If *timedefs* is empty.
    """
    it = iter(timedefs)
    try:
        result = next(it)
    except StopIteration:
        msg = "Cannot chain an empty sequence of expressions"
        raise ValueError(msg) from None
    for node in it:
        result = combine(result, node)
    return result


def chain_by_and(*timedefs: TimeDef) -> TimeDef:
    return chain(timedefs, And)


def chain_by_or(*timedefs: TimeDef) -> TimeDef:
    return chain(timedefs, Or)


# --- Validating factories ---


def _check_range(name: str, values: Iterable[int], low: int, high: int) -> list[int]:
    checked = list(values)
    bad = [v for v in checked if v < low or v > high]
    if bad:
        msg = f"{name} must be between [{low}..{high}], got {bad}"
        raise ValueError(msg)
    return checked


def from_year(*years: int) -> Year:
    return Year(frozenset(years))


def from_month(*months: int | MonthOfYear) -> Month:
    return Month(frozenset(MonthOfYear(m) for m in _check_range("month", months, 1, 12)))


def from_day(*days: int) -> Day:
    return Day(frozenset(_check_range("day", days, 1, 31)))


def from_hour(*hours: int) -> Hour:
    return Hour(frozenset(_check_range("hour", hours, 0, 23)))


def from_minute(*minutes: int) -> Minute:
    return Minute(frozenset(_check_range("minute", minutes, 0, 59)))


def from_weekday(*weekdays: DayOfWeek | int) -> Weekday:
    return Weekday(frozenset(DayOfWeek(d) for d in weekdays))


def from_week_of_month(weekday: DayOfWeek | int, occurrence: int) -> WeekOfMonth:
    if occurrence == 0 or not -5 <= occurrence <= 5:
        msg = f"occurrence must be between [1..5] or [-5..-1], got {occurrence}"
        raise ValueError(msg)
    return WeekOfMonth(DayOfWeek(weekday), occurrence)


def from_date(year: int, month: int | MonthOfYear, day: int) -> TimeDef:
    """``Year & Month & Day`` matching a single calendar date."""
    return chain_by_and(from_year(year), from_month(month), from_day(day))


def from_time(hour: int, minute: int) -> TimeDef:
    """``Hour & Minute`` matching a single time of day."""
    return And(from_hour(hour), from_minute(minute))


def from_datetime(dt: datetime) -> TimeDef:
    """``Year & Month & Day & Hour & Minute`` matching one minute."""
    return chain_by_and(
        from_year(dt.year),
        from_month(dt.month),
        from_day(dt.day),
        from_hour(dt.hour),
        from_minute(dt.minute),
    )
