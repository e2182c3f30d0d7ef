"""Exception hierarchy for cron parsing and configuration.

All errors derive from :class:`CronError`, itself a ``ValueError`` so that
callers treating bad expressions as bad values keep working.

Search exhaustion is not an error: ``CronExpression.next`` returns ``None``
and ``Occurrences.exhausted`` is set instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cronsight.config import SecondsPolicy
    from cronsight.fields import CronFieldType


class CronError(ValueError):
    """Base class for every error raised by cronsight."""


class ConfigError(CronError):
    """Raised when a configuration value is invalid.

    Raised at construction time, before any expression is parsed.
    """

    def __init__(self, message: str, option: str = "") -> None:
        self.option = option
        super().__init__(message)


class CronParseError(CronError):
    """Raised when cron expression parsing fails."""

    def __init__(self, message: str, expression: str = "", position: int = -1) -> None:
        self.expression = expression
        self.position = position
        super().__init__(message)


class FieldCountError(CronParseError):
    """Raised when an expression has the wrong number of fields."""

    def __init__(
        self,
        count: int,
        expression: str = "",
        policy: "SecondsPolicy | None" = None,
    ) -> None:
        self.count = count
        self.policy = policy

        if count not in (5, 6):
            expected = "5 or 6"
        elif policy is not None and policy.value == "required":
            expected = "6 (seconds are required)"
        elif policy is not None and policy.value == "disallowed":
            expected = "5 (seconds are not allowed)"
        else:
            expected = "5 or 6"

        super().__init__(
            f"Invalid number of fields: {count}. Expected {expected} fields.",
            expression,
        )


class CronSyntaxError(CronParseError):
    """Raised when a single field cannot be parsed or compiled.

    Attributes:
        field_index: Zero-based position of the field in the expression.
        field_type: Type of the offending field, when known.
        field_text: Text of the offending field.
    """

    def __init__(
        self,
        message: str,
        expression: str = "",
        *,
        field_index: int = -1,
        field_type: "CronFieldType | None" = None,
        field_text: str = "",
    ) -> None:
        self.field_index = field_index
        self.field_type = field_type
        self.field_text = field_text

        if field_type is not None:
            message = f"{message} (field {field_index} {field_type.name}: {field_text!r})"

        super().__init__(message, expression, field_index)
