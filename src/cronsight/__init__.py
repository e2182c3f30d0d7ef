"""cronsight - cron expression parsing, matching and next-run calculation.

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Extended 6-field cron with seconds, with a configurable seconds policy
    - Special characters: *, /, -, ,, L, W, #, ?
    - Named months and weekdays (3-letter and full names)
    - Predefined expressions (@yearly, @monthly, @weekly, etc.)
    - Timezone-aware next-run calculation across DST transitions
    - English descriptions

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * / , -
    Minute        0-59            * / , -
    Hour          0-23            * / , -
    Day of Month  1-31            * / , - L W ?
    Month         1-12 or JAN-DEC * / , -
    Day of Week   0-7 or SUN-SAT  * / , - L # ?

Usage:
    >>> import cronsight
    >>>
    >>> expr = cronsight.compile("0 9 * * MON-FRI", timezone="America/New_York")
    >>> expr.next()
    >>> expr.next_n(5)
    >>> expr.describe()
    'At 09:00, on Monday through Friday'
"""

from cronsight.api import (
    compile,
    describe,
    has_seconds,
    matches,
    next_occurrence,
    next_occurrences,
    parse_and_describe,
    pattern,
    validate,
    validate_expression,
)
from cronsight.config import DEFAULT_SEARCH_YEARS, CronConfig, SecondsPolicy
from cronsight.errors import (
    ConfigError,
    CronError,
    CronParseError,
    CronSyntaxError,
    FieldCountError,
)
from cronsight.expression import CronExpression
from cronsight.fields import CronField, CronFieldType
from cronsight.parser import CronParser
from cronsight.search import CronIterator, Occurrences

__version__ = "0.1.0"

__all__ = [
    # Core
    "CronExpression",
    "CronField",
    "CronFieldType",
    "CronParser",
    "CronIterator",
    "Occurrences",
    # Configuration
    "CronConfig",
    "SecondsPolicy",
    "DEFAULT_SEARCH_YEARS",
    # Errors
    "CronError",
    "ConfigError",
    "CronParseError",
    "CronSyntaxError",
    "FieldCountError",
    # Functional API
    "compile",
    "validate",
    "validate_expression",
    "matches",
    "next_occurrence",
    "next_occurrences",
    "describe",
    "pattern",
    "has_seconds",
    "parse_and_describe",
]
