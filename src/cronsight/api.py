"""Main API functions for cronsight.

These are thin functions over :class:`~cronsight.expression.CronExpression`
for callers that prefer a functional interface.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from cronsight.config import CronConfig
from cronsight.errors import CronError
from cronsight.expression import CronExpression
from cronsight.search import Occurrences

logger = logging.getLogger(__name__)


def compile(text: str, config: CronConfig | None = None, **options: Any) -> CronExpression:
    """Compile a cron expression.

    Args:
        text: Cron expression (5 or 6 fields, or a predefined alias).
        config: Compilation options.
        **options: ``seconds`` ("optional", "required", "disallowed"),
            ``timezone`` (IANA name or tzinfo) and ``search_years``.

    Raises:
        ConfigError: If an option is invalid.
        FieldCountError: If the field count is not accepted.
        CronSyntaxError: If a field is invalid.
    """
    return CronExpression.parse(text, config, **options)


def validate(text: str, config: CronConfig | None = None, **options: Any) -> bool:
    """Check whether ``text`` compiles; never raises."""
    try:
        CronExpression.parse(text, config, **options)
    except CronError as e:
        logger.debug("Invalid cron expression %r: %s", text, e)
        return False
    return True


def validate_expression(text: str, config: CronConfig | None = None, **options: Any) -> list[str]:
    """Validate a cron expression.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        CronExpression.parse(text, config, **options)
    except CronError as e:
        errors.append(str(e))

    return errors


def matches(schedule: CronExpression, instant: datetime) -> bool:
    return schedule.matches(instant)


def next_occurrence(
    schedule: CronExpression,
    from_: datetime | None = None,
    inclusive: bool = False,
) -> datetime | None:
    """Next occurrence after ``from_`` (default: now), or None if exhausted."""
    return schedule.next(from_, inclusive=inclusive)


def next_occurrences(
    schedule: CronExpression,
    count: int,
    from_: datetime | None = None,
) -> Occurrences:
    """Up to ``count`` ascending occurrences after ``from_`` (default: now)."""
    return schedule.next_n(count, from_)


def describe(schedule: CronExpression) -> str:
    return schedule.describe()


def pattern(schedule: CronExpression) -> str:
    """The expression text exactly as it was given."""
    return schedule.pattern


def has_seconds(schedule: CronExpression) -> bool:
    return schedule.has_seconds


def parse_and_describe(text: str, config: CronConfig | None = None, **options: Any) -> dict[str, str]:
    """Compile ``text`` and return its pattern and description.

    Raises:
        CronError: If the expression does not compile.
    """
    schedule = CronExpression.parse(text, config, **options)
    return {"pattern": schedule.pattern, "description": schedule.describe()}
