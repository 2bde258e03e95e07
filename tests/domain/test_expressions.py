"""Tests for the TimeDef expression tree."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime, time

import pytest

from timedef.domain.calendar import DayOfWeek, MonthOfYear
from timedef.domain.expressions import (
    And,
    DateSpan,
    Day,
    Days,
    Difference,
    Hour,
    Hours,
    Minute,
    Month,
    Not,
    Or,
    TimeDef,
    TimeSpan,
    Union,
    Weekday,
    WeekOfMonth,
    Weeks,
    Year,
    chain,
    chain_by_and,
    chain_by_or,
    children,
    from_date,
    from_datetime,
    from_day,
    from_hour,
    from_minute,
    from_month,
    from_time,
    from_week_of_month,
    from_weekday,
    from_year,
    is_combinator,
    is_duration,
    is_point_pattern,
    is_range,
    walk,
)


class TestStructuralEquality:
    def test_value_sets_normalised(self) -> None:
        assert Day([15, 1, 15]) == Day(frozenset({1, 15}))
        assert Day([1, 15]).days == frozenset({1, 15})

    def test_equal_nodes_hash_equal(self) -> None:
        a = And(Day({1}), Weekday({DayOfWeek.MONDAY}))
        b = And(Day([1]), Weekday([DayOfWeek.MONDAY]))
        assert a == b
        assert hash(a) == hash(b)

    def test_enum_and_int_members_compare_equal(self) -> None:
        assert Month({6}) == Month({MonthOfYear.JUNE})

    def test_different_variants_differ(self) -> None:
        assert Hours(2) != Days(2)
        assert Union(Day({1}), Day({2})) != Or(Day({1}), Day({2}))

    def test_child_order_matters(self) -> None:
        assert And(Day({1}), Year({2015})) != And(Year({2015}), Day({1}))

    def test_empty_set_is_legal(self) -> None:
        assert Year([]).years == frozenset()

    def test_frozen(self) -> None:
        node = Days(3)
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.count = 4  # type: ignore[misc]


class TestOperators:
    def test_and_or_not(self) -> None:
        a, b = Day({1}), Weekday({DayOfWeek.MONDAY})
        assert (a & b) == And(a, b)
        assert (a | b) == Or(a, b)
        assert ~a == Not(a)


class TestStr:
    def test_point_patterns(self) -> None:
        expr = from_day(1, 15) & from_weekday(DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY)
        assert str(expr) == "(Day(1, 15) & Weekday(MON, WED))"

    def test_month_names(self) -> None:
        assert str(from_month(8, 6)) == "Month(JUN, AUG)"

    def test_not_and_durations(self) -> None:
        assert str(~Days(3)) == "~Days(3)"

    def test_ranges(self) -> None:
        assert str(DateSpan(date(2015, 6, 1), date(2015, 8, 1))) == "DateSpan(2015-06-01..2015-08-01)"
        assert str(TimeSpan(time(22), time(6))) == "TimeSpan(22:00..06:00)"
        assert str(Weeks(2)) == "Weeks(2, MON)"

    def test_week_of_month(self) -> None:
        assert str(WeekOfMonth(DayOfWeek.FRIDAY, -1)) == "WeekOfMonth(FRI, -1)"


class TestChaining:
    def test_chain_by_and_left_folds(self) -> None:
        a, b, c = Year({2015}), Month({6}), Day({1})
        assert chain_by_and(a, b, c) == And(And(a, b), c)

    def test_chain_by_or_single(self) -> None:
        a = Year({2015})
        assert chain_by_or(a) is a

    def test_chain_custom_combiner(self) -> None:
        a, b = Day({1}), Day({2})
        assert chain([a, b], Difference) == Difference(a, b)

    @pytest.mark.parametrize("func", [chain_by_and, chain_by_or])
    def test_empty_chain_fails(self, func: object) -> None:
        with pytest.raises(ValueError, match="empty"):
            func()  # type: ignore[operator]


class TestFactories:
    def test_valid(self) -> None:
        assert from_year(2015, 2016) == Year({2015, 2016})
        assert from_month(MonthOfYear.JUNE) == Month({6})
        assert from_hour(0, 23) == Hour({0, 23})
        assert from_minute(59) == Minute({59})
        assert from_weekday(0) == Weekday({DayOfWeek.MONDAY})
        assert from_week_of_month(DayOfWeek.FRIDAY, -1) == WeekOfMonth(DayOfWeek.FRIDAY, -1)

    @pytest.mark.parametrize(
        ("factory", "value"),
        [
            (from_day, 0),
            (from_day, 32),
            (from_hour, 24),
            (from_minute, 60),
            (from_minute, -1),
            (from_month, 13),
        ],
    )
    def test_out_of_range(self, factory: object, value: int) -> None:
        with pytest.raises(ValueError, match="between"):
            factory(value)  # type: ignore[operator]

    @pytest.mark.parametrize("occurrence", [0, 6, -6])
    def test_week_of_month_occurrence(self, occurrence: int) -> None:
        with pytest.raises(ValueError):
            from_week_of_month(DayOfWeek.MONDAY, occurrence)

    def test_from_date(self) -> None:
        assert from_date(2015, 6, 1) == And(And(Year({2015}), Month({6})), Day({1}))

    def test_from_time(self) -> None:
        assert from_time(7, 30) == And(Hour({7}), Minute({30}))

    def test_from_datetime(self) -> None:
        leaves = [n for n in walk(from_datetime(datetime(2015, 6, 1, 7, 30))) if not is_combinator(n)]
        assert leaves == [Year({2015}), Month({6}), Day({1}), Hour({7}), Minute({30})]


class TestTraversal:
    def test_children(self) -> None:
        a, b = Day({1}), Year({2015})
        assert children(And(a, b)) == (a, b)
        assert children(Not(a)) == (a,)
        assert children(a) == ()

    def test_walk_is_pre_order(self) -> None:
        a, b = Day({1}), Year({2015})
        expr = And(Not(a), b)
        assert list(walk(expr)) == [expr, Not(a), a, b]


class TestClassification:
    @pytest.mark.parametrize(
        ("node", "kind"),
        [
            (Year({2015}), "point"),
            (WeekOfMonth(DayOfWeek.MONDAY, 1), "point"),
            (Days(3), "duration"),
            (Hours(1), "duration"),
            (Weeks(2), "range"),
            (TimeSpan(time(8), time(12)), "range"),
            (Not(Days(1)), "combinator"),
            (Difference(Day({1}), Day({2})), "combinator"),
        ],
    )
    def test_exactly_one_family(self, node: TimeDef, kind: str) -> None:
        flags = {
            "point": is_point_pattern(node),
            "duration": is_duration(node),
            "range": is_range(node),
            "combinator": is_combinator(node),
        }
        assert [k for k, v in flags.items() if v] == [kind]
