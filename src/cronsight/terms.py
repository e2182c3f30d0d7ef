"""Parsed cron terms.

A term is the unit produced by the parser before expansion. Terms form a
closed set of frozen dataclasses; the compiler and the matcher dispatch on
the concrete type.

Special terms (``LastDay``, ``NearestWeekday``, ``NthWeekday``,
``LastWeekday``) cannot be expanded into a static value set because they
depend on the month being evaluated. The compiler stores them unchanged as
the field's marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Wildcard:
    """``*`` or ``?``: every legal value."""


@dataclass(frozen=True)
class Single:
    value: int


@dataclass(frozen=True)
class Range:
    low: int
    high: int


@dataclass(frozen=True)
class Step:
    """``base/interval``; ``base`` is a Wildcard, Single or Range."""

    base: "Wildcard | Single | Range"
    interval: int


@dataclass(frozen=True)
class LastDay:
    """``L`` in day-of-month: the last day of the month."""


@dataclass(frozen=True)
class NearestWeekday:
    """``NW`` in day-of-month: the weekday nearest to ``day``."""

    day: int


@dataclass(frozen=True)
class NthWeekday:
    """``W#N`` in day-of-week: the ``nth`` occurrence of ``weekday``."""

    weekday: int
    nth: int


@dataclass(frozen=True)
class LastWeekday:
    """``WL`` in day-of-week: the last occurrence of ``weekday``."""

    weekday: int


SpecialTerm = Union[LastDay, NearestWeekday, NthWeekday, LastWeekday]
SimpleTerm = Union[Wildcard, Single, Range, Step]
Term = Union[SimpleTerm, SpecialTerm]

SPECIAL_TERMS = (LastDay, NearestWeekday, NthWeekday, LastWeekday)


@dataclass(frozen=True)
class TermList:
    """Comma-separated members of one field."""

    terms: tuple[Term, ...]

    @property
    def specials(self) -> tuple[SpecialTerm, ...]:
        return tuple(t for t in self.terms if isinstance(t, SPECIAL_TERMS))

    @property
    def is_bare_wildcard(self) -> bool:
        return len(self.terms) == 1 and isinstance(self.terms[0], Wildcard)
