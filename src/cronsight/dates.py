"""Calendar and timezone helpers.

Weekdays in this module use cron numbering (Sunday = 0). Wall-clock values
are naive datetimes read in a given zone; ``None`` as a zone means the
system's local time.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronsight.errors import ConfigError


def resolve_timezone(value: str | tzinfo | None) -> tzinfo | None:
    """Resolve a timezone name or object.

    Raises:
        ConfigError: If the name is not a known IANA zone.
    """
    if value is None or isinstance(value, tzinfo):
        return value
    if not isinstance(value, str):
        raise ConfigError("'timezone' option must be a string or tzinfo", option="timezone")
    if value.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown timezone: {value!r}", option="timezone") from None


# =============================================================================
# Calendar arithmetic
# =============================================================================


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def cron_weekday(year: int, month: int, day: int) -> int:
    """Weekday of a date, Sunday = 0."""
    return (date(year, month, day).weekday() + 1) % 7


def weekday_ordinal(day: int) -> int:
    """Which occurrence of its weekday ``day`` is within the month (1-5)."""
    return (day - 1) // 7 + 1


def is_last_weekday_occurrence(day: int, last_day: int) -> bool:
    """True when no later date in the month falls on the same weekday."""
    return day + 7 > last_day


def nearest_weekday(year: int, month: int, target: int) -> int | None:
    """Return the Monday-Friday day nearest to ``target`` within the month.

    Saturday moves back to Friday and Sunday forward to Monday, unless that
    would leave the month, in which case the shift goes the other way
    (1st on a Saturday gives Monday the 3rd). Returns None when the month
    has no such day.
    """
    last_day = last_day_of_month(year, month)
    if target > last_day:
        return None

    weekday = cron_weekday(year, month, target)
    if weekday == 6:  # Saturday
        return target - 1 if target > 1 else target + 2
    if weekday == 0:  # Sunday
        return target + 1 if target < last_day else target - 2
    return target


def add_months(year: int, month: int, months: int = 1) -> tuple[int, int]:
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


# =============================================================================
# Wall-clock conversion
# =============================================================================


def to_wall(instant: datetime, tz: tzinfo | None) -> datetime:
    """Wall-clock reading of an instant in ``tz``.

    Naive datetimes are already wall-clock values and are returned as-is.
    """
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(tz).replace(tzinfo=None)


def localize(wall: datetime, tz: tzinfo | None, fold: int = 0) -> datetime:
    """Attach ``tz`` to a wall-clock value, producing an aware datetime.

    Ambiguous wall times resolve according to ``fold``; the first occurrence
    by default.
    """
    wall = wall.replace(fold=fold)
    if tz is None:
        return wall.astimezone()
    return wall.replace(tzinfo=tz)


def as_instant(value: datetime, tz: tzinfo | None) -> datetime:
    """Aware form of ``value``; naive values are read as wall-clock in ``tz``."""
    if value.tzinfo is None:
        return localize(value, tz, value.fold)
    return value


def wall_time_exists(wall: datetime, tz: tzinfo | None) -> bool:
    """False when ``wall`` falls in a spring-forward gap of ``tz``."""
    aware = localize(wall, tz)
    round_trip = aware.astimezone(timezone.utc).astimezone(tz)
    return round_trip.replace(tzinfo=None, fold=0) == wall.replace(fold=0)
