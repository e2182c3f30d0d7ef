"""Cron field domains and the compiled field representation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet

from cronsight.terms import SpecialTerm


class CronFieldType(Enum):
    """Types of cron fields."""

    SECOND = auto()
    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()


@dataclass(frozen=True)
class FieldConstraints:
    """Constraints for a cron field."""

    min_value: int
    max_value: int
    names: dict[str, int] = field(default_factory=dict)
    supports_l: bool = False
    supports_w: bool = False
    supports_hash: bool = False
    supports_question: bool = False
    # Upper bound of an open step (*/K, N/K) when it differs from max_value
    step_max: int | None = None

    @property
    def open_max(self) -> int:
        return self.max_value if self.step_max is None else self.step_max


MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)

# Cron numbering: Sunday is 0
WEEKDAY_NAMES = (
    "SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY",
)


def _name_table(names: tuple[str, ...], first: int) -> dict[str, int]:
    table: dict[str, int] = {}
    for offset, name in enumerate(names):
        table[name] = first + offset
        table[name[:3]] = first + offset
    return table


FIELD_CONSTRAINTS: dict[CronFieldType, FieldConstraints] = {
    CronFieldType.SECOND: FieldConstraints(0, 59),
    CronFieldType.MINUTE: FieldConstraints(0, 59),
    CronFieldType.HOUR: FieldConstraints(0, 23),
    CronFieldType.DAY_OF_MONTH: FieldConstraints(
        1, 31,
        supports_l=True,
        supports_w=True,
        supports_question=True,
    ),
    CronFieldType.MONTH: FieldConstraints(
        1, 12,
        names=_name_table(MONTH_NAMES, 1),
    ),
    # 7 is accepted as an alias for Sunday and folded onto 0 when compiled
    CronFieldType.DAY_OF_WEEK: FieldConstraints(
        0, 7,
        names=_name_table(WEEKDAY_NAMES, 0),
        supports_l=True,
        supports_hash=True,
        supports_question=True,
        step_max=6,
    ),
}

FIVE_FIELD_LAYOUT = (
    CronFieldType.MINUTE,
    CronFieldType.HOUR,
    CronFieldType.DAY_OF_MONTH,
    CronFieldType.MONTH,
    CronFieldType.DAY_OF_WEEK,
)

SIX_FIELD_LAYOUT = (CronFieldType.SECOND,) + FIVE_FIELD_LAYOUT


class CronField:
    """Represents a compiled cron field.

    The accepted values are held as an integer bitset over the field's
    domain: bit ``n`` is set when value ``n`` is accepted. Day-of-month and
    day-of-week fields may also carry one special marker whose acceptance
    depends on the month being evaluated.

    Attributes:
        field_type: The type of field (MINUTE, HOUR, etc.)
        bits: Bitset of accepted values
        is_any: True if the field was written as a bare wildcard
        marker: Special term (L, W, #, nL) or None
        original: Field text as written
    """

    __slots__ = (
        "_field_type",
        "_bits",
        "_is_any",
        "_marker",
        "_original",
    )

    def __init__(
        self,
        field_type: CronFieldType,
        bits: int,
        *,
        is_any: bool = False,
        marker: SpecialTerm | None = None,
        original: str = "",
    ) -> None:
        self._field_type = field_type
        self._bits = bits
        self._is_any = is_any
        self._marker = marker
        self._original = original

    @property
    def field_type(self) -> CronFieldType:
        return self._field_type

    @property
    def bits(self) -> int:
        return self._bits

    @property
    def is_any(self) -> bool:
        return self._is_any

    @property
    def marker(self) -> SpecialTerm | None:
        return self._marker

    @property
    def has_special(self) -> bool:
        """Check if field has a special modifier."""
        return self._marker is not None

    @property
    def original(self) -> str:
        return self._original

    @property
    def constraints(self) -> FieldConstraints:
        return FIELD_CONSTRAINTS[self._field_type]

    @property
    def values(self) -> FrozenSet[int]:
        """Values accepted through the bitset (markers excluded)."""
        bits = self._bits
        result = []
        value = 0
        while bits:
            if bits & 1:
                result.append(value)
            bits >>= 1
            value += 1
        return frozenset(result)

    def contains(self, value: int) -> bool:
        """Test bitset membership; a wildcard contains every value."""
        if self._is_any:
            return True
        return bool((self._bits >> value) & 1)

    def next_value(self, value: int) -> int | None:
        """Return the smallest accepted value >= ``value``, or None."""
        if value < 0:
            value = 0
        remaining = self._bits >> value
        if not remaining:
            return None
        return value + (remaining & -remaining).bit_length() - 1

    def first_value(self) -> int | None:
        return self.next_value(0)

    def __repr__(self) -> str:
        return f"CronField({self._field_type.name}, {self._original!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronField):
            return (
                self._field_type is other._field_type
                and self._bits == other._bits
                and self._is_any == other._is_any
                and self._marker == other._marker
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._field_type, self._bits, self._is_any, self._marker))
