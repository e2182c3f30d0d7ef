"""Parser for cron expressions.

Splits an expression into fields, checks the field count against the
seconds policy, tokenizes each field into terms and hands them to the
field compiler.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from cronsight.compiler import compile_field, implicit_seconds
from cronsight.config import CronConfig, SecondsPolicy, check_field_count
from cronsight.errors import CronParseError, CronSyntaxError
from cronsight.fields import (
    FIELD_CONSTRAINTS,
    FIVE_FIELD_LAYOUT,
    SIX_FIELD_LAYOUT,
    CronField,
    CronFieldType,
    FieldConstraints,
)
from cronsight.terms import (
    LastDay,
    LastWeekday,
    NearestWeekday,
    NthWeekday,
    Range,
    Single,
    Step,
    Term,
    TermList,
    Wildcard,
)

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class _FieldContext:
    """Position of the field being parsed, for error reporting."""

    expression: str
    index: int
    field_type: CronFieldType
    text: str

    @property
    def constraints(self) -> FieldConstraints:
        return FIELD_CONSTRAINTS[self.field_type]

    def error(self, message: str) -> CronSyntaxError:
        return CronSyntaxError(
            message,
            self.expression,
            field_index=self.index,
            field_type=self.field_type,
            field_text=self.text,
        )


class CronParser:
    """Parser for cron expressions.

    Supports:
        - Standard 5-field cron (minute hour day month weekday)
        - Extended 6-field cron (second minute hour day month weekday)
        - Quartz extensions: L, W, # and nL
        - Predefined expressions (@yearly, @monthly, etc.)
    """

    # Predefined expression aliases
    ALIASES: dict[str, str] = {
        "@yearly": "0 0 1 1 *",
        "@annually": "0 0 1 1 *",
        "@monthly": "0 0 1 * *",
        "@weekly": "0 0 * * 0",
        "@daily": "0 0 * * *",
        "@midnight": "0 0 * * *",
        "@hourly": "0 * * * *",
    }

    def __init__(self, expression: str, config: CronConfig | None = None) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string.
            config: Compilation options; defaults to optional seconds.
        """
        if not isinstance(expression, str):
            raise CronParseError(
                f"Cron expression must be a string, got {type(expression).__name__}"
            )
        self._original = expression
        self._config = config or CronConfig()
        self._expression = self._resolve_alias(expression.strip())
        self._has_seconds = False

    @property
    def has_seconds(self) -> bool:
        return self._has_seconds

    def _resolve_alias(self, expression: str) -> str:
        """Resolve predefined aliases."""
        alias = self.ALIASES.get(expression.lower())
        if alias is None:
            return expression
        if self._config.seconds is SecondsPolicy.REQUIRED:
            return f"0 {alias}"
        return alias

    def split(self) -> list[str]:
        """Split into fields and validate the count against the policy."""
        parts = self._expression.split()
        self._has_seconds = check_field_count(
            len(parts), self._config.seconds, self._original
        )
        return parts

    def parse(self) -> list[CronField]:
        """Parse the cron expression.

        Returns:
            Six compiled fields, seconds first. A 5-field expression gets an
            implicit seconds field matching second 0.

        Raises:
            FieldCountError: If the number of fields is not accepted.
            CronSyntaxError: If a field is invalid.
        """
        parts = self.split()
        layout = SIX_FIELD_LAYOUT if self._has_seconds else FIVE_FIELD_LAYOUT

        fields = [
            self._parse_field(part, index, field_type)
            for index, (part, field_type) in enumerate(zip(parts, layout))
        ]
        if not self._has_seconds:
            fields.insert(0, implicit_seconds())

        logger.debug(
            "Parsed cron expression %r (%d fields, seconds=%s)",
            self._original,
            len(parts),
            self._has_seconds,
        )
        return fields

    def parse_terms(self, part: str, index: int, field_type: CronFieldType) -> TermList:
        """Tokenize one field into terms without compiling it."""
        ctx = _FieldContext(self._original, index, field_type, part)
        if not part:
            raise ctx.error("Empty field")
        return TermList(tuple(self._parse_member(m, ctx) for m in part.split(",")))

    def _parse_field(self, part: str, index: int, field_type: CronFieldType) -> CronField:
        terms = self.parse_terms(part, index, field_type)
        return compile_field(
            terms,
            field_type,
            original=part,
            index=index,
            expression=self._original,
        )

    def _parse_member(self, member: str, ctx: _FieldContext) -> Term:
        """Parse one comma-separated member of a field."""
        constraints = ctx.constraints
        text = member.strip().upper()

        if not text:
            raise ctx.error("Empty list member")

        if text == "*":
            return Wildcard()

        # Handle ? (no specific value)
        if text == "?":
            if not constraints.supports_question:
                raise ctx.error(f"? not supported for {ctx.field_type.name}")
            return Wildcard()

        if "#" in text:
            return self._parse_nth(text, ctx)

        if "/" in text:
            return self._parse_step(text, ctx)

        if text.endswith("L") and (text == "L" or _NUMBER.fullmatch(text[:-1])
                                   or text[:-1] in constraints.names):
            return self._parse_last(text, ctx)

        if text.endswith("W") and _NUMBER.fullmatch(text[:-1]):
            return self._parse_weekday(text, ctx)

        if "-" in text:
            return self._parse_range(text, ctx)

        return Single(self._resolve_value(text, ctx))

    def _parse_last(self, text: str, ctx: _FieldContext) -> Term:
        """Parse L (last) modifier."""
        if not ctx.constraints.supports_l:
            raise ctx.error(f"L not supported for {ctx.field_type.name}")

        if ctx.field_type is CronFieldType.DAY_OF_MONTH:
            if text != "L":
                raise ctx.error(f"Invalid L expression: {text}")
            return LastDay()

        # Handle nL (e.g., 5L = last Friday)
        if text == "L":
            raise ctx.error("L in day-of-week needs a weekday (e.g. 5L)")
        weekday = self._resolve_value(text[:-1], ctx) % 7
        return LastWeekday(weekday)

    def _parse_weekday(self, text: str, ctx: _FieldContext) -> Term:
        """Parse W (nearest weekday) modifier."""
        if not ctx.constraints.supports_w:
            raise ctx.error(f"W not supported for {ctx.field_type.name}")
        return NearestWeekday(self._resolve_value(text[:-1], ctx))

    def _parse_nth(self, text: str, ctx: _FieldContext) -> Term:
        """Parse # (nth weekday) modifier."""
        if not ctx.constraints.supports_hash:
            raise ctx.error(f"# not supported for {ctx.field_type.name}")

        parts = text.split("#")
        if len(parts) != 2 or not _NUMBER.fullmatch(parts[1]):
            raise ctx.error(f"Invalid # expression: {text}")

        weekday = self._resolve_value(parts[0], ctx) % 7
        nth = int(parts[1])
        if nth < 1 or nth > 5:
            raise ctx.error(f"Invalid nth value: {nth}")

        return NthWeekday(weekday, nth)

    def _parse_step(self, text: str, ctx: _FieldContext) -> Term:
        """Parse step expression (*/n, n/s, n-m/s or /n)."""
        parts = text.split("/")
        if len(parts) != 2:
            raise ctx.error(f"Invalid step: {text}")

        base_text, step_text = parts
        if not _NUMBER.fullmatch(step_text):
            raise ctx.error(f"Invalid step: {text}")

        step = int(step_text)
        if step <= 0:
            raise ctx.error(f"Step must be positive: {step}")

        base: Wildcard | Single | Range
        if base_text in ("", "*"):
            base = Wildcard()
        elif "-" in base_text:
            base = self._parse_range(base_text, ctx)
        else:
            base = Single(self._resolve_value(base_text, ctx))

        return Step(base, step)

    def _parse_range(self, text: str, ctx: _FieldContext) -> Range:
        """Parse range expression (n-m)."""
        parts = text.split("-")
        if len(parts) != 2:
            raise ctx.error(f"Invalid range: {text}")

        start = self._resolve_value(parts[0], ctx)
        end = self._resolve_value(parts[1], ctx)

        # The domain is linear: 22-2 is rejected rather than wrapped
        if start > end:
            raise ctx.error(f"Wrap-around range {text} is not supported")

        return Range(start, end)

    def _resolve_value(self, value: str, ctx: _FieldContext) -> int:
        """Resolve a value (number or name) to integer."""
        constraints = ctx.constraints

        # Check named values
        if value in constraints.names:
            return constraints.names[value]

        if not _NUMBER.fullmatch(value):
            raise ctx.error(f"Invalid value: {value}")

        num = int(value)
        if num < constraints.min_value or num > constraints.max_value:
            raise ctx.error(
                f"Value {num} out of range "
                f"[{constraints.min_value}-{constraints.max_value}]"
            )
        return num
