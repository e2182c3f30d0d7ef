"""Matching of decomposed calendar instants against compiled fields."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from cronsight.dates import (
    cron_weekday,
    is_last_weekday_occurrence,
    last_day_of_month,
    nearest_weekday,
    weekday_ordinal,
)
from cronsight.fields import CronField
from cronsight.terms import LastDay, LastWeekday, NearestWeekday, NthWeekday


@dataclass(frozen=True)
class MatchContext:
    """A wall-clock instant decomposed into cron fields.

    ``weekday`` uses cron numbering (Sunday = 0). ``last_day`` and
    ``ordinal`` describe the date's month and its weekday occurrence.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    weekday: int = 0
    last_day: int = 31
    ordinal: int = 1

    @classmethod
    def for_date(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
    ) -> "MatchContext":
        return cls(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            weekday=cron_weekday(year, month, day),
            last_day=last_day_of_month(year, month),
            ordinal=weekday_ordinal(day),
        )

    @classmethod
    def from_datetime(cls, wall: datetime) -> "MatchContext":
        """Decompose a wall-clock datetime (its tzinfo is ignored)."""
        return cls.for_date(
            wall.year, wall.month, wall.day, wall.hour, wall.minute, wall.second
        )


def day_of_month_matches(field: CronField, ctx: MatchContext) -> bool:
    if field.is_any or field.contains(ctx.day):
        return True

    marker = field.marker
    if isinstance(marker, LastDay):
        return ctx.day == ctx.last_day
    if isinstance(marker, NearestWeekday):
        return ctx.day == nearest_weekday(ctx.year, ctx.month, marker.day)
    return False


def day_of_week_matches(field: CronField, ctx: MatchContext) -> bool:
    if field.is_any or field.contains(ctx.weekday):
        return True

    marker = field.marker
    if isinstance(marker, NthWeekday):
        return ctx.weekday == marker.weekday and ctx.ordinal == marker.nth
    if isinstance(marker, LastWeekday):
        return ctx.weekday == marker.weekday and is_last_weekday_occurrence(
            ctx.day, ctx.last_day
        )
    return False


def day_matches(dom: CronField, dow: CronField, ctx: MatchContext) -> bool:
    """Combine day-of-month and day-of-week.

    When both are restricted either one may match; otherwise the restricted
    one decides (a wildcard always matches).
    """
    if not dom.is_any and not dow.is_any:
        return day_of_month_matches(dom, ctx) or day_of_week_matches(dow, ctx)
    return day_of_month_matches(dom, ctx) and day_of_week_matches(dow, ctx)


def matches(fields: Sequence[CronField], ctx: MatchContext) -> bool:
    """Check a decomposed instant against six compiled fields.

    Fields are ordered second, minute, hour, day-of-month, month,
    day-of-week.
    """
    second, minute, hour, dom, month, dow = fields
    return (
        second.contains(ctx.second)
        and minute.contains(ctx.minute)
        and hour.contains(ctx.hour)
        and month.contains(ctx.month)
        and day_matches(dom, dow, ctx)
    )
