"""Next-occurrence search.

The search walks a wall-clock cursor from the coarsest field to the finest.
When a field does not accept the cursor's value it jumps to the field's next
accepted value (a bitset lookup) and resets every finer field to zero; when
no value is left in range it carries into the next coarser unit and starts
over from the month. Day selection scans the month only when a special
marker or the day-of-month/day-of-week OR rule is involved.

Candidates are converted to real instants at the end. Wall times that do not
exist (spring-forward gaps) are skipped; ambiguous wall times (fall-back)
resolve to their first occurrence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Iterator, overload

from cronsight.dates import (
    add_months,
    as_instant,
    cron_weekday,
    last_day_of_month,
    localize,
    to_wall,
    wall_time_exists,
)
from cronsight.fields import CronField
from cronsight.matcher import MatchContext, day_matches

if TYPE_CHECKING:
    from cronsight.expression import CronExpression

logger = logging.getLogger(__name__)


def _next_day(dom: CronField, dow: CronField, year: int, month: int, day: int) -> int | None:
    """First day >= ``day`` in the month accepted by the day fields."""
    last_day = last_day_of_month(year, month)
    if day > last_day:
        return None

    if dow.is_any and not dom.has_special:
        found = dom.next_value(day)
        return found if found is not None and found <= last_day else None

    if dom.is_any and not dow.has_special:
        weekday = cron_weekday(year, month, day)
        for offset in range(7):
            if dow.contains((weekday + offset) % 7):
                found = day + offset
                return found if found <= last_day else None
        return None

    for candidate in range(day, last_day + 1):
        if day_matches(dom, dow, MatchContext.for_date(year, month, candidate)):
            return candidate
    return None


def next_wall_time(
    fields: Sequence[CronField],
    start: datetime,
    limit_year: int,
) -> datetime | None:
    """Earliest wall-clock time >= ``start`` accepted by ``fields``.

    Args:
        fields: Six compiled fields, seconds first.
        start: Naive wall-clock starting point (microseconds ignored).
        limit_year: Last calendar year searched.

    Returns:
        Matching naive datetime, or None once ``limit_year`` is passed.
    """
    second, minute, hour, dom, month, dow = fields
    year, mon, day = start.year, start.month, start.day
    hh, mm, ss = start.hour, start.minute, start.second

    while year <= limit_year:
        if not month.contains(mon):
            found = month.next_value(mon)
            if found is None:
                year, mon = year + 1, month.first_value()
            else:
                mon = found
            day, hh, mm, ss = 1, 0, 0, 0
            continue

        found = _next_day(dom, dow, year, mon, day)
        if found is None:
            year, mon = add_months(year, mon)
            day, hh, mm, ss = 1, 0, 0, 0
            continue
        if found != day:
            day, hh, mm, ss = found, 0, 0, 0

        found = hour.next_value(hh)
        if found is None:
            day, hh, mm, ss = day + 1, 0, 0, 0
            continue
        if found != hh:
            hh, mm, ss = found, 0, 0

        found = minute.next_value(mm)
        if found is None:
            hh, mm, ss = hh + 1, 0, 0
            continue
        if found != mm:
            mm, ss = found, 0

        found = second.next_value(ss)
        if found is None:
            mm, ss = mm + 1, 0
            continue

        return datetime(year, mon, day, hh, mm, found)

    return None


def find_next(
    expression: "CronExpression",
    after: datetime,
    inclusive: bool = False,
) -> datetime | None:
    """Next instant matching ``expression``.

    Aware inputs give aware results in the expression's timezone; naive
    inputs are read, and answered, as wall-clock time in that timezone.

    A wall time that falls in a spring-forward gap is skipped, not moved:
    ``30 2 * * *`` does not fire on a day whose 02:30 does not exist and
    next fires at 02:30 the following day. An ambiguous wall time fires
    once, at its first occurrence.

    Returns:
        The occurrence, or None when none exists within the search horizon.
    """
    tz = expression.tzinfo
    unit = timedelta(seconds=1) if expression.has_seconds else timedelta(minutes=1)

    wall = to_wall(after, tz).replace(fold=0)
    origin: datetime | None = as_instant(after, tz).astimezone(timezone.utc)
    if after.tzinfo is None and not wall_time_exists(wall, tz):
        # A naive start inside a gap has no instant of its own
        origin = None

    start = wall.replace(microsecond=0)
    if not expression.has_seconds:
        start = start.replace(second=0)
    if not inclusive or start < wall:
        start += unit

    limit_year = wall.year + expression.search_years

    while True:
        candidate = next_wall_time(expression.fields, start, limit_year)
        if candidate is None:
            logger.debug(
                "No occurrence of %r within %d years after %s",
                expression.expression,
                expression.search_years,
                after,
            )
            return None

        if not wall_time_exists(candidate, tz):
            logger.debug("Skipping non-existent wall time %s", candidate)
            start = candidate + unit
            continue

        resolved = localize(candidate, tz)
        instant = resolved.astimezone(timezone.utc)
        if origin is not None and (instant < origin or (instant == origin and not inclusive)):
            # Second pass through a repeated hour; already fired on the first
            start = candidate + unit
            continue

        if after.tzinfo is None:
            return candidate
        return resolved


# =============================================================================
# Bounded iteration
# =============================================================================


@dataclass(frozen=True)
class Occurrences(Sequence):
    """Result of a bounded next-occurrences query.

    Behaves as a read-only sequence of datetimes. ``exhausted`` reports that
    the search horizon was reached before ``requested`` occurrences were
    found.
    """

    times: tuple[datetime, ...]
    requested: int

    @property
    def exhausted(self) -> bool:
        return len(self.times) < self.requested

    @overload
    def __getitem__(self, index: int) -> datetime: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[datetime, ...]: ...

    def __getitem__(self, index):
        return self.times[index]

    def __len__(self) -> int:
        return len(self.times)


def default_start() -> datetime:
    return datetime.now(timezone.utc)


def find_next_n(
    expression: "CronExpression",
    count: int,
    after: datetime | None = None,
) -> Occurrences:
    """Find up to ``count`` ascending occurrences after ``after``."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    current = after if after is not None else default_start()
    results: list[datetime] = []

    for _ in range(count):
        next_dt = find_next(expression, current)
        if next_dt is None:
            break
        results.append(next_dt)
        current = next_dt

    return Occurrences(tuple(results), count)


class CronIterator(Iterator[datetime]):
    """Iterator over matching datetimes.

    Efficiently iterates without storing all matches in memory.
    """

    def __init__(
        self,
        expression: "CronExpression",
        after: datetime | None = None,
        limit: int | None = None,
    ) -> None:
        """Initialize iterator.

        Args:
            expression: Cron expression.
            after: Start after this datetime (default: now).
            limit: Maximum matches.
        """
        self._expression = expression
        self._current = after if after is not None else default_start()
        self._limit = limit
        self._count = 0

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        if self._limit is not None and self._count >= self._limit:
            raise StopIteration

        next_dt = find_next(self._expression, self._current)
        if next_dt is None:
            raise StopIteration

        self._current = next_dt
        self._count += 1

        return next_dt
