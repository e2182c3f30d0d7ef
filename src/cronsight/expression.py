"""Compiled cron expression."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from cronsight.config import CronConfig
from cronsight.dates import to_wall
from cronsight.describe import describe as describe_expression
from cronsight.errors import CronParseError
from cronsight.fields import CronField, CronFieldType
from cronsight.matcher import MatchContext, matches as fields_match
from cronsight.parser import CronParser
from cronsight.search import CronIterator, Occurrences, default_start, find_next, find_next_n


class CronExpression:
    """Parsed cron expression with efficient next-run calculation.

    CronExpression is immutable and thread-safe. It can be used to:
    - Check if a datetime matches the expression
    - Calculate the next matching datetime
    - Iterate over matching datetimes
    - Describe the schedule in English

    Example:
        >>> expr = CronExpression.parse("0 9 * * MON-FRI", timezone="Europe/Paris")
        >>> expr.matches(datetime(2024, 1, 15, 9, 0))  # True (Monday)
        >>> expr.next()  # Next matching datetime
        >>> list(expr.iter(limit=5))  # Next 5 matching datetimes
    """

    __slots__ = (
        "_expression",
        "_fields",
        "_has_seconds",
        "_config",
        "_tzinfo",
        "_field_map",
    )

    def __init__(
        self,
        expression: str,
        fields: list[CronField],
        has_seconds: bool,
        config: CronConfig | None = None,
    ) -> None:
        """Initialize cron expression.

        Args:
            expression: Original expression string.
            fields: Six compiled fields, seconds first.
            has_seconds: Whether the expression was written with seconds.
            config: Options the expression was compiled with.
        """
        if len(fields) != 6:
            raise CronParseError(f"Expected 6 compiled fields, got {len(fields)}", expression)

        self._expression = expression
        self._fields = tuple(fields)
        self._has_seconds = has_seconds
        self._config = config or CronConfig()
        self._tzinfo = self._config.tzinfo

        # Build field map for quick access
        self._field_map: dict[CronFieldType, CronField] = {
            f.field_type: f for f in fields
        }

    @classmethod
    def parse(
        cls,
        expression: str,
        config: CronConfig | None = None,
        **options: Any,
    ) -> "CronExpression":
        """Parse a cron expression.

        Args:
            expression: Cron expression string.
            config: Compilation options.
            **options: Overrides for ``config`` fields (``seconds``,
                ``timezone``, ``search_years``).

        Returns:
            Parsed CronExpression.

        Raises:
            ConfigError: If an option is invalid.
            FieldCountError: If the field count is not accepted.
            CronSyntaxError: If a field is invalid.
        """
        config = CronConfig.from_options(config, **options)
        parser = CronParser(expression, config)
        fields = parser.parse()
        return cls(expression, fields, parser.has_seconds, config)

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    @property
    def pattern(self) -> str:
        """Alias of :attr:`expression`: the text exactly as given."""
        return self._expression

    @property
    def fields(self) -> tuple[CronField, ...]:
        """Get compiled fields, seconds first."""
        return self._fields

    @property
    def has_seconds(self) -> bool:
        """Check if expression includes seconds."""
        return self._has_seconds

    @property
    def config(self) -> CronConfig:
        return self._config

    @property
    def tzinfo(self) -> tzinfo | None:
        """Timezone used for matching and search (None: system-local)."""
        return self._tzinfo

    @property
    def search_years(self) -> int:
        return self._config.search_years

    def get_field(self, field_type: CronFieldType) -> CronField:
        """Get a specific field by type."""
        return self._field_map[field_type]

    def matches(self, dt: datetime) -> bool:
        """Check if a datetime matches this expression.

        Aware datetimes are converted to the expression's timezone first;
        naive ones are taken as wall-clock time there. Microseconds are
        ignored.
        """
        context = MatchContext.from_datetime(to_wall(dt, self._tzinfo))
        return fields_match(self._fields, context)

    def next(self, after: datetime | None = None, inclusive: bool = False) -> datetime | None:
        """Get next matching datetime.

        Args:
            after: Start searching from this datetime (default: now).
            inclusive: Accept ``after`` itself when it matches.

        Returns:
            Next matching datetime, or None if none found within the search
            horizon.
        """
        if after is None:
            after = default_start()
        return find_next(self, after, inclusive)

    def next_n(self, n: int, after: datetime | None = None) -> Occurrences:
        """Get next n matching datetimes.

        Args:
            n: Number of matches to find.
            after: Start searching after this datetime.

        Returns:
            Occurrences in ascending order; ``exhausted`` is set when fewer
            than ``n`` were found.
        """
        return find_next_n(self, n, after)

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> CronIterator:
        """Create iterator over matching datetimes.

        Args:
            after: Start after this datetime.
            limit: Maximum number of matches.

        Returns:
            CronIterator.
        """
        return CronIterator(self, after, limit)

    def describe(self) -> str:
        """Human-readable description of the schedule."""
        return describe_expression(self)

    def __repr__(self) -> str:
        return f"CronExpression({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronExpression):
            return self._expression == other._expression and self._config == other._config
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._expression, self._config))
