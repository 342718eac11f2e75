"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_iso_date(date_str: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    Used for request values, where relative phrases and alternative
    layouts are not accepted.

    Raises:
        ValueError: If the string is not a real calendar date in that layout
    """
    if not isinstance(date_str, str) or not ISO_DATE_PATTERN.match(date_str):
        raise ValueError(f"Date '{date_str}' must be in YYYY-MM-DD format")
    try:
        return date_parser.isoparse(date_str).date()
    except ValueError as e:
        raise ValueError(f"Date '{date_str}' is not a valid calendar date: {e}")


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a user-supplied date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15 January 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year",
      "last friday", etc.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "idag": today,
        "yesterday": today - timedelta(days=1),
        "igår": today - timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        if period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        if period in _WEEKDAYS:
            days_ago = (today.weekday() - _WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)
    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        if period == "year":
            return today.replace(month=1, day=1)
        if period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str, default=datetime(today.year, 1, 1))
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of this-month, this-year, last-month, last-year
        today: Reference day (defaults to date.today())

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)
    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return start, today.replace(month=1, day=1) - timedelta(days=1)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-year, last-month, last-year"
    )
