"""Tests for next-occurrence search.

Search tests pin the timezone so results do not depend on the host's local
zone.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cronsight import CronExpression, CronIterator, Occurrences
from cronsight.search import next_wall_time

NEW_YORK = ZoneInfo("America/New_York")


def utc_expr(expression: str, **options) -> CronExpression:
    return CronExpression.parse(expression, timezone="UTC", **options)


# =============================================================================
# Basic Search Tests
# =============================================================================


class TestCronExpressionNext:
    """Tests for next-run calculation."""

    def test_next_simple(self):
        """Test next for simple expression."""
        expr = utc_expr("0 9 * * *")
        assert expr.next(datetime(2024, 1, 15, 8, 0)) == datetime(2024, 1, 15, 9, 0)

    def test_next_is_strictly_after(self):
        expr = utc_expr("0 9 * * *")
        assert expr.next(datetime(2024, 1, 15, 9, 0)) == datetime(2024, 1, 16, 9, 0)

    def test_next_inclusive(self):
        expr = utc_expr("0 9 * * *")
        start = datetime(2024, 1, 15, 9, 0)
        assert expr.next(start, inclusive=True) == start

    def test_inclusive_with_subsecond_offset(self):
        """Test a start past the matching instant is not itself accepted."""
        expr = utc_expr("0 9 * * *")
        start = datetime(2024, 1, 15, 9, 0, 0, 500000)
        assert expr.next(start, inclusive=True) == datetime(2024, 1, 16, 9, 0)

    def test_next_every_minute(self):
        expr = utc_expr("* * * * *")
        assert expr.next(datetime(2024, 1, 15, 9, 0, 30)) == datetime(2024, 1, 15, 9, 1)

    def test_next_with_seconds(self):
        expr = utc_expr("*/30 * * * * *")
        assert expr.next(datetime(2024, 1, 15, 10, 0, 5)) == datetime(2024, 1, 15, 10, 0, 30)

    def test_next_weekday(self):
        """Test next for weekday expression from a Saturday."""
        expr = utc_expr("0 9 * * MON-FRI")
        assert expr.next(datetime(2024, 6, 15, 10, 0)) == datetime(2024, 6, 17, 9, 0)

    def test_carry_over_short_month(self):
        expr = utc_expr("0 0 31 * *")
        assert expr.next(datetime(2024, 4, 15)) == datetime(2024, 5, 31)

    def test_carry_over_year(self):
        expr = utc_expr("59 23 31 12 *")
        assert expr.next(datetime(2024, 12, 31, 23, 59)) == datetime(2025, 12, 31, 23, 59)

    def test_leap_day(self):
        expr = utc_expr("0 0 29 2 *")
        assert expr.next(datetime(2024, 3, 1)) == datetime(2028, 2, 29)

    def test_leap_day_across_century(self):
        """Test the default horizon covers 2096 to 2104."""
        expr = utc_expr("0 0 29 2 *")
        assert expr.next(datetime(2096, 3, 1)) == datetime(2104, 2, 29)

    def test_aware_input_gives_aware_result(self):
        expr = utc_expr("0 9 * * *")
        result = expr.next(datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc))
        assert result == datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
        assert result.tzinfo is not None

    def test_aware_input_converted_to_schedule_zone(self):
        expr = CronExpression.parse("0 9 * * *", timezone="America/New_York")
        result = expr.next(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))
        assert result.astimezone(timezone.utc) == datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)
        assert result.tzinfo is NEW_YORK

    def test_default_start_is_now(self):
        expr = utc_expr("* * * * *")
        before = datetime.now(timezone.utc)
        result = expr.next()
        assert result is not None
        assert before < result <= before + timedelta(minutes=1)


# =============================================================================
# Quartz Extension Search Tests
# =============================================================================


class TestSpecialSearch:
    """Tests for search with L, W, # and nL."""

    def test_next_nth_weekday(self):
        expr = utc_expr("0 0 * * 5#3")
        assert expr.next(datetime(2024, 3, 1)) == datetime(2024, 3, 15)

    def test_next_last_weekday(self):
        expr = utc_expr("0 0 * * 5L")
        assert expr.next(datetime(2024, 3, 1)) == datetime(2024, 3, 29)
        assert expr.next(datetime(2024, 3, 29)) == datetime(2024, 4, 26)

    def test_next_last_day(self):
        expr = utc_expr("0 0 L * *")
        assert expr.next(datetime(2024, 2, 1)) == datetime(2024, 2, 29)
        assert expr.next(datetime(2023, 2, 1)) == datetime(2023, 2, 28)

    def test_next_nearest_weekday(self):
        expr = utc_expr("0 0 15W * *")
        assert expr.next(datetime(2024, 6, 1)) == datetime(2024, 6, 14)
        assert expr.next(datetime(2024, 9, 1)) == datetime(2024, 9, 16)

    def test_nearest_weekday_month_boundaries(self):
        assert utc_expr("0 0 1W * *").next(datetime(2024, 5, 31)) == datetime(2024, 6, 3)
        assert utc_expr("0 0 31W * *").next(datetime(2024, 8, 1)) == datetime(2024, 8, 30)

    def test_day_or_weekday(self):
        """Test restricted day fields combine with OR during search."""
        expr = utc_expr("0 0 13 * FRI")
        results = list(expr.next_n(3, datetime(2024, 9, 1)))
        assert results == [
            datetime(2024, 9, 6),
            datetime(2024, 9, 13),
            datetime(2024, 9, 20),
        ]


# =============================================================================
# Exhaustion Tests
# =============================================================================


class TestExhaustion:
    """Tests for expressions without occurrences."""

    def test_impossible_date_returns_none(self):
        expr = utc_expr("0 0 30 2 *")
        assert expr.next(datetime(2024, 1, 1)) is None

    def test_impossible_date_next_n_exhausted(self):
        result = utc_expr("0 0 30 2 *").next_n(3, datetime(2024, 1, 1))
        assert isinstance(result, Occurrences)
        assert len(result) == 0
        assert result.exhausted

    def test_short_horizon(self):
        expr = utc_expr("0 0 29 2 *", search_years=1)
        assert expr.next(datetime(2024, 3, 1)) is None

    def test_partial_results(self):
        """Test the horizon is measured from each previous occurrence."""
        expr = utc_expr("0 0 29 2 *", search_years=3)
        result = expr.next_n(5, datetime(2024, 1, 1))
        assert list(result) == [datetime(2024, 2, 29)]
        assert result.requested == 5
        assert result.exhausted

    def test_iterator_stops(self):
        expr = utc_expr("0 0 30 2 *")
        assert list(expr.iter(datetime(2024, 1, 1))) == []


# =============================================================================
# next_n / iter Tests
# =============================================================================


class TestNextN:
    """Tests for bounded queries."""

    def test_next_n(self):
        expr = utc_expr("0 */6 * * *")
        result = expr.next_n(4, datetime(2024, 1, 15, 1, 0))
        assert list(result) == [
            datetime(2024, 1, 15, 6, 0),
            datetime(2024, 1, 15, 12, 0),
            datetime(2024, 1, 15, 18, 0),
            datetime(2024, 1, 16, 0, 0),
        ]
        assert not result.exhausted
        assert result[0] == datetime(2024, 1, 15, 6, 0)

    def test_next_n_zero(self):
        result = utc_expr("* * * * *").next_n(0, datetime(2024, 1, 1))
        assert len(result) == 0
        assert not result.exhausted

    def test_next_n_negative(self):
        with pytest.raises(ValueError):
            utc_expr("* * * * *").next_n(-1, datetime(2024, 1, 1))

    def test_next_n_strictly_increasing(self):
        result = utc_expr("*/7 * * * *").next_n(20, datetime(2024, 1, 1))
        assert all(a < b for a, b in zip(result, result[1:]))

    def test_iter_with_limit(self):
        """Test iterating with limit."""
        expr = utc_expr("0 * * * *")
        results = list(expr.iter(after=datetime(2024, 1, 15, 0, 30), limit=3))
        assert results == [
            datetime(2024, 1, 15, 1, 0),
            datetime(2024, 1, 15, 2, 0),
            datetime(2024, 1, 15, 3, 0),
        ]

    def test_iterator_type(self):
        assert isinstance(utc_expr("* * * * *").iter(limit=1), CronIterator)


class TestNextWallTime:
    """Tests for the wall-clock search primitive."""

    def test_start_is_inclusive(self):
        fields = utc_expr("30 9 * * *").fields
        start = datetime(2024, 1, 15, 9, 30)
        assert next_wall_time(fields, start, 2030) == start

    def test_limit_year(self):
        fields = utc_expr("0 0 1 1 *").fields
        assert next_wall_time(fields, datetime(2024, 1, 2), 2024) is None
        assert next_wall_time(fields, datetime(2024, 1, 2), 2025) == datetime(2025, 1, 1)


# =============================================================================
# DST Tests
# =============================================================================


def in_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


class TestDaylightSaving:
    """Tests for searches across DST transitions (America/New_York, 2024)."""

    @pytest.fixture
    def ny(self):
        def build(expression: str) -> CronExpression:
            return CronExpression.parse(expression, timezone="America/New_York")

        return build

    def test_spring_forward_skips_missing_time(self, ny):
        """02:30 does not exist on 2024-03-10 and is skipped."""
        result = ny("30 2 * * *").next(datetime(2024, 3, 9, 12, 0, tzinfo=NEW_YORK))
        assert in_utc(result) == datetime(2024, 3, 11, 6, 30, tzinfo=timezone.utc)

    def test_spring_forward_hourly(self, ny):
        result = ny("0 * * * *").next(datetime(2024, 3, 10, 1, 30, tzinfo=NEW_YORK))
        assert in_utc(result) == datetime(2024, 3, 10, 7, 0, tzinfo=timezone.utc)
        assert result.hour == 3

    def test_spring_forward_naive(self, ny):
        """Naive inputs get the next existing wall time."""
        assert ny("30 2 * * *").next(datetime(2024, 3, 9, 12, 0)) == datetime(2024, 3, 11, 2, 30)

    def test_fall_back_fires_once(self, ny):
        """01:30 occurs twice on 2024-11-03; only the first fires."""
        expr = ny("30 1 * * *")
        first = expr.next(datetime(2024, 11, 3, 0, 0, tzinfo=NEW_YORK))
        assert in_utc(first) == datetime(2024, 11, 3, 5, 30, tzinfo=timezone.utc)
        assert first.fold == 0

        second = expr.next(first)
        assert in_utc(second) == datetime(2024, 11, 4, 6, 30, tzinfo=timezone.utc)

    def test_fall_back_hourly(self, ny):
        result = ny("0 * * * *").next_n(3, datetime(2024, 11, 3, 0, 30, tzinfo=NEW_YORK))
        assert [in_utc(r) for r in result] == [
            datetime(2024, 11, 3, 5, 0, tzinfo=timezone.utc),
            datetime(2024, 11, 3, 7, 0, tzinfo=timezone.utc),
            datetime(2024, 11, 3, 8, 0, tzinfo=timezone.utc),
        ]

    def test_start_inside_repeated_hour(self, ny):
        """A start in the second pass never yields an earlier instant."""
        start = datetime(2024, 11, 3, 6, 10, tzinfo=timezone.utc)  # 01:10 EST
        result = ny("30 * * * *").next(start)
        assert in_utc(result) == datetime(2024, 11, 3, 7, 30, tzinfo=timezone.utc)

    def test_results_strictly_increase_across_transitions(self, ny):
        expr = ny("*/20 * * * *")
        for start in (
            datetime(2024, 3, 10, 0, 0, tzinfo=NEW_YORK),
            datetime(2024, 11, 3, 0, 0, tzinfo=NEW_YORK),
        ):
            instants = [in_utc(r) for r in expr.next_n(12, start)]
            assert all(a < b for a, b in zip(instants, instants[1:]))

    def test_london_spring_forward(self):
        """01:30 does not exist in London on 2024-03-31."""
        expr = CronExpression.parse("30 1 * * *", timezone="Europe/London")
        start = datetime(2024, 3, 30, 12, 0, tzinfo=timezone.utc)
        result = expr.next(start)
        assert in_utc(result) == datetime(2024, 4, 1, 0, 30, tzinfo=timezone.utc)

    def test_london_fall_back(self):
        expr = CronExpression.parse("30 1 * * *", timezone="Europe/London")
        start = datetime(2024, 10, 26, 12, 0, tzinfo=timezone.utc)
        result = expr.next(start)
        # First 01:30 on 2024-10-27 is BST
        assert in_utc(result) == datetime(2024, 10, 27, 0, 30, tzinfo=timezone.utc)
