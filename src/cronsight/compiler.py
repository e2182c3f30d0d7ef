"""Field compiler: expands parsed terms into a compiled field.

Each term contributes bits to the field's bitset; special terms contribute
no bits and become the field's marker instead. At most one marker is
allowed per field.
"""

from __future__ import annotations

from cronsight.errors import CronSyntaxError
from cronsight.fields import FIELD_CONSTRAINTS, CronField, CronFieldType, FieldConstraints
from cronsight.terms import (
    SPECIAL_TERMS,
    Range,
    Single,
    Step,
    Term,
    TermList,
    Wildcard,
)

_SUNDAY_ALIAS_BIT = 1 << 7


def range_bits(low: int, high: int) -> int:
    """Bits low..high inclusive."""
    return ((1 << (high - low + 1)) - 1) << low


def domain_bits(constraints: FieldConstraints) -> int:
    return range_bits(constraints.min_value, constraints.max_value)


def _step_bounds(base: Term, constraints: FieldConstraints) -> tuple[int, int]:
    if isinstance(base, Wildcard):
        return constraints.min_value, constraints.open_max
    if isinstance(base, Single):
        return base.value, max(base.value, constraints.open_max)
    if isinstance(base, Range):
        return base.low, base.high
    raise TypeError(f"Unsupported step base: {base!r}")


def expand_term(term: Term, constraints: FieldConstraints) -> int:
    """Expand a non-special term into a bitset."""
    if isinstance(term, Wildcard):
        return domain_bits(constraints)
    if isinstance(term, Single):
        return 1 << term.value
    if isinstance(term, Range):
        return range_bits(term.low, term.high)
    if isinstance(term, Step):
        start, end = _step_bounds(term.base, constraints)
        bits = 0
        for value in range(start, end + 1, term.interval):
            bits |= 1 << value
        return bits
    if isinstance(term, SPECIAL_TERMS):
        return 0
    raise TypeError(f"Unknown term: {term!r}")


def compile_field(
    terms: TermList,
    field_type: CronFieldType,
    *,
    original: str = "",
    index: int = -1,
    expression: str = "",
) -> CronField:
    """Compile one field's terms.

    Also a public entry point for terms built without the parser, so range
    order and step size are checked here as well as while lexing.

    Raises:
        CronSyntaxError: On a wrap-around range, a zero step or more than one
            special term.
    """
    constraints = FIELD_CONSTRAINTS[field_type]

    def fail(message: str) -> CronSyntaxError:
        return CronSyntaxError(
            message,
            expression,
            field_index=index,
            field_type=field_type,
            field_text=original,
        )

    specials = terms.specials
    if len(specials) > 1:
        raise fail("Conflicting special values")

    bits = 0
    for term in terms.terms:
        ranged = term.base if isinstance(term, Step) else term
        if isinstance(ranged, Range) and ranged.low > ranged.high:
            raise fail(f"Wrap-around range {ranged.low}-{ranged.high} is not supported")
        if isinstance(term, Step) and term.interval < 1:
            raise fail(f"Step must be positive: {term.interval}")
        bits |= expand_term(term, constraints)

    if field_type is CronFieldType.DAY_OF_WEEK and bits & _SUNDAY_ALIAS_BIT:
        bits = (bits & ~_SUNDAY_ALIAS_BIT) | 1

    return CronField(
        field_type,
        bits,
        is_any=terms.is_bare_wildcard,
        marker=specials[0] if specials else None,
        original=original,
    )


def implicit_seconds() -> CronField:
    """Seconds field of a 5-field expression: second 0 only."""
    return CronField(CronFieldType.SECOND, 1, original="0")
