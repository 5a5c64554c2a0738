"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ["this-month", "this-year", "this-week", "last-month", "last-year", "last-week"]


def _start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _relative_date(text: str, today: date) -> Optional[date]:
    """Resolve 'today', 'last month', 'this week', 'last friday', etc."""
    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in fixed:
        return fixed[text]

    direction, _, unit = text.partition(" ")
    if direction not in ("last", "this", "next") or not unit:
        return None

    step = {"last": -1, "this": 0, "next": 1}[direction]
    if unit == "month":
        return (today + relativedelta(months=step)).replace(day=1)
    if unit == "year":
        return today.replace(month=1, day=1) + relativedelta(years=step)
    if unit == "week":
        return _start_of_week(today) + timedelta(weeks=step)
    if unit in WEEKDAYS and direction == "last":
        days_ago = (today.weekday() - WEEKDAYS.index(unit)) % 7 or 7
        return today - timedelta(days=days_ago)
    return None


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones ("today", "yesterday", "last month", "this year", "last friday").

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    relative = _relative_date(text, date.today())
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of this-month, this-year, this-week, last-month,
            last-year, last-week

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "this-week":
        return _start_of_week(today), today
    if period == "last-month":
        first_of_this_month = today.replace(day=1)
        return first_of_this_month - relativedelta(months=1), first_of_this_month - timedelta(days=1)
    if period == "last-year":
        first_of_this_year = today.replace(month=1, day=1)
        return first_of_this_year - relativedelta(years=1), first_of_this_year - timedelta(days=1)
    if period == "last-week":
        start = _start_of_week(today) - timedelta(weeks=1)
        return start, start + timedelta(days=6)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def normalize_date(date_str: Optional[str]) -> Optional[str]:
    """Best-effort normalisation of a statement date to ISO format.

    Statement dates are free text. When the text looks like a calendar date
    (at least two numeric groups) and dateutil can read it, the ISO form
    is returned; otherwise the stripped text is kept unchanged. Empty input
    yields None. This never raises.
    """
    if date_str is None:
        return None
    text = date_str.strip()
    if not text:
        return None
    if len(re.findall(r"\d+", text)) < 2:
        return text
    try:
        return date_parser.parse(text).date().isoformat()
    except (ValueError, OverflowError):
        return text
