"""Tests for field compilation and compiled field lookups."""

import pytest

from cronsight import CronFieldType, CronSyntaxError
from cronsight.compiler import compile_field, domain_bits, implicit_seconds, range_bits
from cronsight.fields import FIELD_CONSTRAINTS, CronField
from cronsight.terms import (
    LastDay,
    NearestWeekday,
    Range,
    Single,
    Step,
    TermList,
    Wildcard,
)


def terms(*items):
    return TermList(tuple(items))


# =============================================================================
# Bit Helpers Tests
# =============================================================================


class TestBitHelpers:
    """Tests for bitset construction."""

    def test_range_bits(self):
        assert range_bits(0, 0) == 0b1
        assert range_bits(2, 4) == 0b11100

    def test_domain_bits(self):
        bits = domain_bits(FIELD_CONSTRAINTS[CronFieldType.HOUR])
        assert bits == (1 << 24) - 1


# =============================================================================
# compile_field Tests
# =============================================================================


class TestCompileField:
    """Tests for compile_field."""

    def test_wildcard(self):
        field = compile_field(terms(Wildcard()), CronFieldType.MINUTE)
        assert field.is_any
        assert field.values == frozenset(range(60))

    def test_union_of_terms(self):
        field = compile_field(
            terms(Single(1), Range(10, 12), Step(Wildcard(), 20)),
            CronFieldType.MINUTE,
        )
        assert field.values == frozenset([0, 1, 10, 11, 12, 20, 40])
        assert not field.is_any

    def test_step_from_single(self):
        field = compile_field(terms(Step(Single(3), 10)), CronFieldType.HOUR)
        assert field.values == frozenset([3, 13, 23])

    def test_sunday_alias_folded(self):
        """Test 7 in day of week compiles to 0."""
        field = compile_field(terms(Single(7)), CronFieldType.DAY_OF_WEEK)
        assert field.values == frozenset([0])
        assert field.contains(0)
        assert not field.contains(7)

    def test_wildcard_day_of_week_has_no_seventh_day(self):
        field = compile_field(terms(Step(Wildcard(), 1)), CronFieldType.DAY_OF_WEEK)
        assert field.values == frozenset(range(7))

    def test_weekday_open_step_capped_at_saturday(self):
        field = compile_field(terms(Step(Single(1), 2)), CronFieldType.DAY_OF_WEEK)
        assert field.values == frozenset([1, 3, 5])
        field = compile_field(terms(Step(Wildcard(), 3)), CronFieldType.DAY_OF_WEEK)
        assert field.values == frozenset([0, 3, 6])

    def test_weekday_step_from_seven(self):
        field = compile_field(terms(Step(Single(7), 2)), CronFieldType.DAY_OF_WEEK)
        assert field.values == frozenset([0])

    def test_special_becomes_marker(self):
        field = compile_field(terms(Single(1), LastDay()), CronFieldType.DAY_OF_MONTH)
        assert field.values == frozenset([1])
        assert field.marker == LastDay()
        assert field.has_special

    def test_conflicting_specials(self):
        with pytest.raises(CronSyntaxError, match="Conflicting"):
            compile_field(
                terms(LastDay(), NearestWeekday(15)),
                CronFieldType.DAY_OF_MONTH,
                original="L,15W",
                index=2,
            )

    def test_wraparound_range(self):
        with pytest.raises(CronSyntaxError, match="Wrap-around") as exc:
            compile_field(terms(Range(22, 2)), CronFieldType.HOUR, original="22-2", index=1)
        assert exc.value.field_index == 1
        assert exc.value.field_text == "22-2"

    def test_zero_step(self):
        with pytest.raises(CronSyntaxError):
            compile_field(terms(Step(Wildcard(), 0)), CronFieldType.MINUTE)

    def test_implicit_seconds(self):
        field = implicit_seconds()
        assert field.field_type is CronFieldType.SECOND
        assert field.values == frozenset([0])
        assert not field.is_any


# =============================================================================
# CronField Lookup Tests
# =============================================================================


class TestCronFieldLookup:
    """Tests for bitset lookups on compiled fields."""

    @pytest.fixture
    def quarter_hours(self):
        return compile_field(terms(Step(Wildcard(), 15)), CronFieldType.MINUTE)

    def test_next_value(self, quarter_hours):
        assert quarter_hours.next_value(0) == 0
        assert quarter_hours.next_value(1) == 15
        assert quarter_hours.next_value(45) == 45
        assert quarter_hours.next_value(46) is None

    def test_first_value(self, quarter_hours):
        assert quarter_hours.first_value() == 0

    def test_contains(self, quarter_hours):
        assert quarter_hours.contains(30)
        assert not quarter_hours.contains(31)

    def test_equality_ignores_original_text(self):
        a = compile_field(terms(Single(0), Single(30)), CronFieldType.MINUTE, original="0,30")
        b = compile_field(terms(Step(Wildcard(), 30)), CronFieldType.MINUTE, original="*/30")
        assert a == b
        assert hash(a) == hash(b)

    def test_repr(self):
        field = CronField(CronFieldType.HOUR, 1 << 9, original="9")
        assert repr(field) == "CronField(HOUR, '9')"
