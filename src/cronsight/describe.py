"""English descriptions of compiled cron expressions.

The description is derived from the compiled fields, not from the original
text, so ``0,30 * * * *`` and ``*/30 * * * *`` read the same. Output is
deterministic and never depends on the current time.

Example:
    >>> describe(CronExpression.parse("*/15 9-17 * * MON-FRI"))
    'Every 15 minutes, between 09:00 and 17:59, on Monday through Friday'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from cronsight.fields import MONTH_NAMES, WEEKDAY_NAMES, CronField
from cronsight.terms import LastDay, LastWeekday, NearestWeekday, NthWeekday

if TYPE_CHECKING:
    from cronsight.expression import CronExpression


class _Shape(NamedTuple):
    """Recognized layout of a field's values."""

    kind: str  # any, single, range, step, list
    values: tuple[int, ...]
    step: int = 1


def _shape(field: CronField) -> _Shape:
    constraints = field.constraints
    values = tuple(sorted(field.values))

    if field.is_any:
        return _Shape("any", values)
    if len(values) == 1:
        return _Shape("single", values)
    if not values:
        return _Shape("list", values)

    diffs = {b - a for a, b in zip(values, values[1:])}
    if diffs == {1}:
        low = constraints.min_value
        high = 6 if field.constraints.max_value == 7 else constraints.max_value
        if values[0] == low and values[-1] == high:
            return _Shape("any", values)
        return _Shape("range", values)

    if len(diffs) == 1:
        step = diffs.pop()
        reaches_end = values[-1] + step > constraints.max_value
        if len(values) >= 3 or (values[0] == constraints.min_value and reaches_end):
            return _Shape("step", values, step)

    return _Shape("list", values)


def _join(items: list[str]) -> str:
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + " and " + items[-1]


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _clock(hour: int, minute: int, second: int | None = None) -> str:
    if second is None:
        return f"{hour:02d}:{minute:02d}"
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def _weekday_name(value: int) -> str:
    return WEEKDAY_NAMES[value % 7].capitalize()


def _month_name(value: int) -> str:
    return MONTH_NAMES[value - 1].capitalize()


# =============================================================================
# Time of day
# =============================================================================


def _unit_phrase(shape: _Shape, unit: str) -> str:
    """Lower-case phrase for a second, minute or hour field."""
    values = shape.values
    if shape.kind == "any":
        return f"every {unit}"
    if shape.kind == "single":
        return f"at {unit} {values[0]}"
    if shape.kind == "range":
        return f"every {unit} from {values[0]} through {values[-1]}"
    if shape.kind == "step":
        phrase = f"every {shape.step} {unit}s"
        if values[0] != 0 or values[-1] + shape.step <= (23 if unit == "hour" else 59):
            phrase += f" from {unit} {values[0]} through {values[-1]}"
        return phrase
    return f"at {unit}s {_join([str(v) for v in values])}"


def _hour_window(hours: _Shape) -> str | None:
    """Phrase restricting sub-hour repetition to the given hours."""
    values = hours.values
    if hours.kind == "any":
        return None
    if hours.kind == "single":
        return f"between {_clock(values[0], 0)} and {_clock(values[0], 59)}"
    if hours.kind == "range":
        return f"between {_clock(values[0], 0)} and {_clock(values[-1], 59)}"
    if hours.kind == "step" and values[0] == 0 and values[-1] + hours.step > 23:
        return f"every {hours.step} hours"
    return f"during hours {_join([str(v) for v in values])}"


def _describe_time(expression: "CronExpression") -> str:
    second_field, minute_field, hour_field = expression.fields[:3]
    seconds = _shape(second_field)
    minutes = _shape(minute_field)
    hours = _shape(hour_field)
    show_seconds = expression.has_seconds

    # Fixed time(s) of day
    if seconds.kind == "single" and minutes.kind == "single":
        second = seconds.values[0] if show_seconds else None
        minute = minutes.values[0]
        if hours.kind == "single":
            return "At " + _clock(hours.values[0], minute, second)
        if hours.kind == "list":
            return "At " + _join([_clock(h, minute, second) for h in hours.values])

    parts: list[str] = []

    if show_seconds and not (seconds.kind == "single" and seconds.values[0] == 0):
        parts.append(_unit_phrase(seconds, "second"))
        if minutes.kind != "any" or seconds.kind not in ("any", "step"):
            parts.append(_unit_phrase(minutes, "minute"))
    elif minutes.kind == "single" and hours.kind == "any":
        return f"At minute {minutes.values[0]} of every hour"
    elif minutes.kind == "single" and hours.kind == "step":
        return f"At minute {minutes.values[0]} past {_unit_phrase(hours, 'hour')}"
    else:
        parts.append(_unit_phrase(minutes, "minute"))

    window = _hour_window(hours)
    if window is not None:
        parts.append(window)

    sentence = ", ".join(parts)
    return sentence[0].upper() + sentence[1:]


# =============================================================================
# Day and month
# =============================================================================


def _describe_day_of_month(field: CronField) -> str | None:
    if field.is_any:
        return None

    shape = _shape(field)
    items: list[str] = []
    if shape.values:
        if shape.kind == "single":
            items.append(f"day {shape.values[0]}")
        elif shape.kind == "range" or shape.kind == "any":
            items.append(f"days {shape.values[0]} through {shape.values[-1]}")
        elif shape.kind == "step":
            items.append(f"every {_ordinal(shape.step)} day from day {shape.values[0]}")
        else:
            items.append(f"days {_join([str(v) for v in shape.values])}")

    marker = field.marker
    if isinstance(marker, LastDay):
        items.append("the last day")
    elif isinstance(marker, NearestWeekday):
        items.append(f"the weekday nearest day {marker.day}")

    return f"on {_join(items)} of the month"


def _describe_day_of_week(field: CronField) -> str | None:
    if field.is_any:
        return None

    shape = _shape(field)
    items: list[str] = []
    if shape.values:
        if shape.kind == "range":
            items.append(
                f"{_weekday_name(shape.values[0])} through {_weekday_name(shape.values[-1])}"
            )
        elif shape.kind == "any":
            items.append("every day of the week")
        else:
            items.append(_join([_weekday_name(v) for v in shape.values]))

    marker = field.marker
    if isinstance(marker, NthWeekday):
        items.append(f"the {_ordinal(marker.nth)} {_weekday_name(marker.weekday)} of the month")
    elif isinstance(marker, LastWeekday):
        items.append(f"the last {_weekday_name(marker.weekday)} of the month")

    return f"on {_join(items)}"


def _describe_month(field: CronField) -> str | None:
    shape = _shape(field)
    if shape.kind == "any":
        return None
    if shape.kind == "range":
        return f"in {_month_name(shape.values[0])} through {_month_name(shape.values[-1])}"
    if shape.kind == "step" and shape.values[0] == 1 and shape.values[-1] + shape.step > 12:
        return f"every {shape.step} months"
    return f"in {_join([_month_name(v) for v in shape.values])}"


def describe(expression: "CronExpression") -> str:
    """Render a compiled expression as an English sentence."""
    _, _, _, dom, month, dow = expression.fields

    parts = [_describe_time(expression)]

    day_of_month = _describe_day_of_month(dom)
    day_of_week = _describe_day_of_week(dow)
    if day_of_month and day_of_week:
        parts.append(f"{day_of_month} or {day_of_week}")
    elif day_of_month or day_of_week:
        parts.append(day_of_month or day_of_week)

    month_phrase = _describe_month(month)
    if month_phrase:
        parts.append(month_phrase)

    return ", ".join(parts)
