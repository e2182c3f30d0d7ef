"""Configuration accepted alongside a cron expression.

Example:
    >>> config = CronConfig(seconds="required", timezone="Europe/Berlin")
    >>> config.seconds
    <SecondsPolicy.REQUIRED: 'required'>
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Any

from cronsight.dates import resolve_timezone
from cronsight.errors import ConfigError, FieldCountError

# Years searched past the start instant before a query reports exhaustion.
# Eight years spans the longest gap between two February 29ths (2096 -> 2104).
DEFAULT_SEARCH_YEARS = 8


class SecondsPolicy(str, Enum):
    """How a leading seconds field is handled."""

    OPTIONAL = "optional"
    REQUIRED = "required"
    DISALLOWED = "disallowed"

    @classmethod
    def coerce(cls, value: Any) -> "SecondsPolicy":
        """Convert a policy or policy name, raising ConfigError otherwise."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ConfigError("'seconds' option must be a string", option="seconds")
        try:
            return cls(value)
        except ValueError:
            raise ConfigError(
                "'seconds' option must be 'optional', 'required', or 'disallowed'",
                option="seconds",
            ) from None


@dataclass(frozen=True)
class CronConfig:
    """Options used when compiling an expression.

    Attributes:
        seconds: Seconds-field policy (policy or its name).
        timezone: IANA zone name or tzinfo; None means system-local time.
        search_years: Search horizon, in years, for next-occurrence queries.
    """

    seconds: SecondsPolicy = SecondsPolicy.OPTIONAL
    timezone: str | tzinfo | None = None
    search_years: int = DEFAULT_SEARCH_YEARS

    def __post_init__(self) -> None:
        object.__setattr__(self, "seconds", SecondsPolicy.coerce(self.seconds))

        if isinstance(self.search_years, bool) or not isinstance(self.search_years, int):
            raise ConfigError("'search_years' option must be an integer", option="search_years")
        if self.search_years < 1:
            raise ConfigError(
                f"'search_years' must be at least 1, got {self.search_years}",
                option="search_years",
            )

        # Fail now rather than on the first query
        resolve_timezone(self.timezone)

    @property
    def tzinfo(self) -> tzinfo | None:
        """Resolved timezone (None for system-local)."""
        return resolve_timezone(self.timezone)

    @classmethod
    def from_options(cls, config: "CronConfig | None" = None, **options: Any) -> "CronConfig":
        """Build a config from an optional base config and keyword overrides."""
        unknown = set(options) - {"seconds", "timezone", "search_years"}
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        if config is None:
            return cls(**options)
        if not isinstance(config, cls):
            raise ConfigError(
                f"config must be a CronConfig, got {type(config).__name__}"
            )
        if not options:
            return config
        merged = {
            "seconds": config.seconds,
            "timezone": config.timezone,
            "search_years": config.search_years,
        }
        merged.update(options)
        return cls(**merged)


def check_field_count(count: int, policy: SecondsPolicy, expression: str = "") -> bool:
    """Validate the number of fields against the seconds policy.

    Returns:
        True when the expression carries a seconds field.

    Raises:
        FieldCountError: If the count is not acceptable under ``policy``.
    """
    if count not in (5, 6):
        raise FieldCountError(count, expression, policy)
    if policy is SecondsPolicy.REQUIRED and count != 6:
        raise FieldCountError(count, expression, policy)
    if policy is SecondsPolicy.DISALLOWED and count != 5:
        raise FieldCountError(count, expression, policy)
    return count == 6
