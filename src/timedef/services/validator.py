"""TimeDef validators — does a period (or an instant) match a TimeDef?

:class:`TimeDefPeriodValidator` uses existential semantics and works in
two modes:

1. **No point-pattern leaf** (only durations, ranges and combinators):
   the expression is evaluated once against the whole period.
2. **Otherwise** the period is decomposed into calendar atoms at the
   finest granularity any leaf needs (``Minute`` -> minutes, ``Hour`` ->
   hours, ``Day``/``Weekday``/``WeekOfMonth`` -> days, ``Month`` ->
   months, ``Year`` -> years) and the expression is evaluated per atom.
   The period is valid iff at least one atom satisfies it; the search
   stops at the first hit.

Leaf rules:
- Point patterns test the atom start's calendar field.
- Duration leaves (``Days``, ``Months``, ...) and ``Weeks`` always look
  at the original period, never at an atom.
- Range leaves test the atom start against inclusive bounds; a span
  bound falling inside the atom also counts. In mode 1 the period's
  projection (dates, times of day, or instants) must lie inside the
  bounds.

:class:`TimeDefDateTimeValidator` evaluates the same tree against a
single instant. Durations do not constrain an instant.

``Union`` evaluates like ``Or``; ``Difference(a, b)`` like ``a & ~b``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import datetime, time, timedelta
from functools import partial

from timedef.domain.calendar import (
    DayOfWeek,
    add_months,
    occurrence_from_end_of_month,
    occurrence_in_month,
)
from timedef.domain.expressions import (
    And,
    DateSpan,
    DateTimeSpan,
    Day,
    Days,
    Difference,
    Hour,
    Hours,
    Minute,
    Minutes,
    Month,
    Months,
    Not,
    Or,
    TimeDef,
    TimeSpan,
    Union,
    Weekday,
    WeekOfMonth,
    Weeks,
    Year,
    Years,
    walk,
)
from timedef.domain.period import Granularity, Period

logger = logging.getLogger(__name__)

_MEASURES: tuple[type[TimeDef], ...] = (Days, Hours, Minutes, Months, Years, Weeks)

_POINT_GRANULARITY: dict[type[TimeDef], Granularity] = {
    Minute: Granularity.MINUTE,
    Hour: Granularity.HOUR,
    Day: Granularity.DAY,
    Weekday: Granularity.DAY,
    WeekOfMonth: Granularity.DAY,
    Month: Granularity.MONTH,
    Year: Granularity.YEAR,
}


def _bound_granularity(*bounds: datetime | time) -> Granularity:
    """Coarsest atom size that never straddles a whole-minute bound in *bounds*."""
    if any(b.minute or b.second or b.microsecond for b in bounds):
        return Granularity.MINUTE
    if any(b.hour for b in bounds):
        return Granularity.HOUR
    return Granularity.DAY


def _range_granularity(node: TimeDef) -> Granularity | None:
    if isinstance(node, DateSpan):
        return Granularity.DAY
    if isinstance(node, TimeSpan):
        # A time-of-day bound always needs at least hourly atoms.
        return min(_bound_granularity(node.start, node.end), Granularity.HOUR)
    if isinstance(node, DateTimeSpan):
        return _bound_granularity(node.start, node.end)
    return None


def infer_granularity(timedef: TimeDef) -> Granularity | None:
    """Finest atom granularity *timedef* needs, or None to skip decomposition.

    Only point-pattern leaves force decomposition. Once decomposing, range
    leaves may refine the granularity so atoms line up with their bounds.
    """
    point: Granularity | None = None
    ranges: list[Granularity] = []
    for node in walk(timedef):
        unit = _POINT_GRANULARITY.get(type(node))
        if unit is not None:
            point = unit if point is None else min(point, unit)
            continue
        refined = _range_granularity(node)
        if refined is not None:
            ranges.append(refined)
    if point is None:
        return None
    return min([point, *ranges])


def _evaluate(node: TimeDef, leaf: Callable[[TimeDef], bool]) -> bool:
    """Evaluate the combinators of *node*, delegating leaves to *leaf*."""
    if isinstance(node, And):
        return _evaluate(node.lhs, leaf) and _evaluate(node.rhs, leaf)
    if isinstance(node, (Or, Union)):
        return _evaluate(node.lhs, leaf) or _evaluate(node.rhs, leaf)
    if isinstance(node, Not):
        return not _evaluate(node.operand, leaf)
    if isinstance(node, Difference):
        return _evaluate(node.lhs, leaf) and not _evaluate(node.rhs, leaf)
    return leaf(node)


def _matches_point(node: TimeDef, instant: datetime) -> bool | None:
    """Point-pattern test of *instant*, or None when *node* is no point pattern."""
    if isinstance(node, Year):
        return instant.year in node.years
    if isinstance(node, Month):
        return instant.month in node.months
    if isinstance(node, Day):
        return instant.day in node.days
    if isinstance(node, Hour):
        return instant.hour in node.hours
    if isinstance(node, Minute):
        return instant.minute in node.minutes
    if isinstance(node, Weekday):
        return DayOfWeek.of(instant) in node.weekdays
    if isinstance(node, WeekOfMonth):
        if DayOfWeek.of(instant) != node.weekday:
            return False
        if node.occurrence < 0:
            return occurrence_from_end_of_month(instant) == node.occurrence
        return occurrence_in_month(instant) == node.occurrence
    return None


# --- Durations ---


def _whole_units(period: Period, unit: timedelta, count: int) -> bool:
    units, rest = divmod(period.duration, unit)
    return not rest and units == count


def _whole_months(period: Period, count: int) -> bool:
    start, end = period.start, period.end
    # add_months always lands in the target month, so compare months first
    if (end.year - start.year) * 12 + end.month - start.month != count:
        return False
    return add_months(start, count) == end


# --- Range projections ---


def _wall(value: time) -> time:
    """Time-of-day bounds compare as wall-clock times."""
    return value.replace(tzinfo=None)


def _time_in(value: time, start: time, end: time) -> bool:
    start, end = _wall(start), _wall(end)
    if start <= end:
        return start <= value <= end
    return value >= start or value <= end


def _time_ranges(start: time, end: time) -> list[tuple[time, time]]:
    start, end = _wall(start), _wall(end)
    if start <= end:
        return [(start, end)]
    return [(start, time.max), (time.min, end)]


def _period_time_ranges(period: Period) -> list[tuple[time, time]]:
    """Time-of-day ranges covered by *period*, split at midnight."""
    if period.duration >= timedelta(days=1):
        return [(time.min, time.max)]
    first, last = period.start.time(), period.end.time()
    if period.start.date() == period.end.date():
        return [(first, last)]
    return [(first, time.max), (time.min, last)]


def _period_within_timespan(period: Period, node: TimeSpan) -> bool:
    spans = _time_ranges(node.start, node.end)
    return all(any(y0 <= x0 and x1 <= y1 for y0, y1 in spans) for x0, x1 in _period_time_ranges(period))


def _starts_inside(bound: datetime, atom: Period) -> bool:
    return atom.start < bound < atom.end


def _same_kind(*values: datetime) -> bool:
    """Naive and aware instants never compare, so such a span never matches."""
    return len({v.tzinfo is None for v in values}) == 1


class TimeDefPeriodValidator:
    """Stateless validator; one instance may be shared freely."""

    def is_valid(self, timedef: TimeDef, period: Period) -> bool:
        """True iff *period* contains at least one instant satisfying *timedef*."""
        for _ in self.matching_atoms(timedef, period):
            return True
        return False

    def matching_atoms(self, timedef: TimeDef, period: Period) -> Iterator[Period]:
        """Lazily yield every atom of *period* that satisfies *timedef*.

        Without point-pattern leaves the only candidate is *period* itself.
        """
        unit = infer_granularity(timedef)
        logger.debug("Validating %s against %s at granularity %s", timedef, period, unit.name if unit else "PERIOD")
        if unit is None:
            if _evaluate(timedef, partial(self._evaluate_whole, period=period)):
                yield period
            return

        inspected = 0
        try:
            for atom in period.split(unit):
                inspected += 1
                if _evaluate(timedef, partial(self._evaluate_atom, atom=atom, original=period)):
                    yield atom
        finally:
            logger.debug("Inspected %d %s atom(s)", inspected, unit.name.lower())

    # --- Leaves ---

    def _evaluate_duration(self, node: TimeDef, original: Period) -> bool:
        if isinstance(node, Days):
            return _whole_units(original, timedelta(days=1), node.count)
        if isinstance(node, Hours):
            return _whole_units(original, timedelta(hours=1), node.count)
        if isinstance(node, Minutes):
            return _whole_units(original, timedelta(minutes=1), node.count)
        if isinstance(node, Months):
            return _whole_months(original, node.count)
        if isinstance(node, Years):
            return _whole_months(original, 12 * node.count)
        if isinstance(node, Weeks):
            return sum(1 for _ in original.weeks(node.week_start)) == node.count
        msg = f"Unsupported TimeDef node: {type(node).__name__}"
        raise TypeError(msg)

    def _evaluate_atom(self, node: TimeDef, *, atom: Period, original: Period) -> bool:
        instant = atom.start
        point = _matches_point(node, instant)
        if point is not None:
            return point
        if isinstance(node, _MEASURES):
            return self._evaluate_duration(node, original)
        if isinstance(node, DateSpan):
            return node.start <= instant.date() <= node.end
        if isinstance(node, TimeSpan):
            if _time_in(instant.time(), node.start, node.end):
                return True
            return _starts_inside(datetime.combine(instant.date(), node.start, instant.tzinfo), atom)
        if isinstance(node, DateTimeSpan):
            if not _same_kind(node.start, node.end, instant):
                return False
            return node.start <= instant <= node.end or _starts_inside(node.start, atom)
        msg = f"Unsupported TimeDef node: {type(node).__name__}"
        raise TypeError(msg)

    def _evaluate_whole(self, node: TimeDef, *, period: Period) -> bool:
        if isinstance(node, _MEASURES):
            return self._evaluate_duration(node, period)
        if isinstance(node, DateSpan):
            return node.start <= period.start.date() and period.end.date() <= node.end
        if isinstance(node, TimeSpan):
            return _period_within_timespan(period, node)
        if isinstance(node, DateTimeSpan):
            if not _same_kind(node.start, node.end, period.start):
                return False
            return node.start <= period.start and period.end <= node.end
        msg = f"Unsupported TimeDef node: {type(node).__name__}"
        raise TypeError(msg)


class TimeDefDateTimeValidator:
    """Evaluates a TimeDef against a single instant."""

    def is_valid(self, timedef: TimeDef, instant: datetime) -> bool:
        """True iff *instant* satisfies *timedef*.

        Point patterns test the instant's fields and ranges test inclusive
        containment. Duration leaves always hold.
        """
        return _evaluate(timedef, partial(self._evaluate_leaf, instant=instant))

    def _evaluate_leaf(self, node: TimeDef, *, instant: datetime) -> bool:
        point = _matches_point(node, instant)
        if point is not None:
            return point
        if isinstance(node, _MEASURES):
            return True
        if isinstance(node, DateSpan):
            return node.start <= instant.date() <= node.end
        if isinstance(node, TimeSpan):
            return _time_in(instant.time(), node.start, node.end)
        if isinstance(node, DateTimeSpan):
            return _same_kind(node.start, node.end, instant) and node.start <= instant <= node.end
        msg = f"Unsupported TimeDef node: {type(node).__name__}"
        raise TypeError(msg)
