"""Command-line interface for cronsight."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cronsight.errors import CronError
from cronsight.expression import CronExpression

app = typer.Typer(
    name="cronsight",
    help="Parse, match and explain cron expressions",
    add_completion=False,
)

console = Console()

SecondsOpt = Annotated[
    str,
    typer.Option("--seconds", "-s", help="Seconds field policy (optional, required, disallowed)"),
]
TimezoneOpt = Annotated[
    Optional[str],
    typer.Option("--tz", help="IANA timezone (default: system local)"),
]


def _compile(expression: str, seconds: str, tz: str | None = None) -> CronExpression:
    try:
        return CronExpression.parse(expression, seconds=seconds, timezone=tz)
    except CronError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _parse_when(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        typer.echo(f"Error: Invalid ISO datetime: {value}", err=True)
        raise typer.Exit(1)


@app.command(name="describe")
def describe_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    seconds: SecondsOpt = "optional",
) -> None:
    """Describe a cron expression in English."""
    cron = _compile(expression, seconds)
    typer.echo(cron.describe())


@app.command(name="validate")
def validate_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    seconds: SecondsOpt = "optional",
) -> None:
    """Check that a cron expression is valid."""
    _compile(expression, seconds)
    typer.echo("Valid")


@app.command(name="next")
def next_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    count: Annotated[int, typer.Option("--count", "-n", min=0, help="Number of occurrences")] = 5,
    start: Annotated[
        Optional[str],
        typer.Option("--from", help="Start after this ISO datetime (default: now)"),
    ] = None,
    tz: TimezoneOpt = None,
    seconds: SecondsOpt = "optional",
) -> None:
    """List the next occurrences of a cron expression."""
    cron = _compile(expression, seconds, tz)
    after = _parse_when(start) if start else None

    occurrences = cron.next_n(count, after)

    table = Table(title=f"{cron.pattern}  ({cron.describe()})")
    table.add_column("#", justify="right")
    table.add_column("Occurrence")
    for index, when in enumerate(occurrences, start=1):
        table.add_row(str(index), when.isoformat())
    console.print(table)

    if occurrences.exhausted:
        typer.echo(
            f"Only {len(occurrences)} of {count} occurrences found "
            f"within {cron.search_years} years",
            err=True,
        )


@app.command(name="match")
def match_cmd(
    expression: Annotated[str, typer.Argument(help="Cron expression")],
    when: Annotated[str, typer.Argument(help="ISO datetime to test")],
    tz: TimezoneOpt = None,
    seconds: SecondsOpt = "optional",
) -> None:
    """Exit with 0 if the datetime matches the expression, 1 otherwise."""
    cron = _compile(expression, seconds, tz)
    if cron.matches(_parse_when(when)):
        typer.echo("Match")
        return
    typer.echo("No match")
    raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
