"""CLI helpers for date range resolution."""

from collections.abc import Callable
from datetime import date
from typing import Any

import click

from budgetkit.cli.error_handling import fail
from budgetkit.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add one boolean --<period> flag per supported period."""
    for period in reversed(PERIODS):
        func = click.option(
            f"--{period}",
            period.replace("-", "_"),
            is_flag=True,
            help=f"Only {period.replace('-', ' ')}",
        )(func)
    return func


def collect_period_flags(params: dict[str, Any]) -> dict[str, bool]:
    """Map period names to the flag values click passed as keyword arguments."""
    return {period: bool(params.get(period.replace("-", "_"))) for period in PERIODS}


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates.

    A period flag wins over the default range; explicit dates cannot be
    combined with a period flag. Exits the command on invalid input.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        flag_names = ", ".join(f"--{period}" for period in PERIODS)
        fail(ctx, f"Only one period option ({flag_names}) can be specified at a time.")
    if selected and (start_date or end_date):
        fail(ctx, "Period options (--this-month, --last-month, etc.) cannot be combined with --start-date or --end-date.")

    if selected:
        return get_date_range(selected[0])

    start = _parse_or_fail(ctx, start_date, "start")
    end = _parse_or_fail(ctx, end_date, "end")
    if start is None and end is None and default_range is not None:
        return default_range
    return start, end


def _parse_or_fail(ctx: click.Context, value: str | None, which: str) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        fail(ctx, f"Invalid {which} date: {e}")
