"""Date utilities for the todo.txt line format.

todo.txt only knows calendar dates, so everything in here works on
``datetime.date`` values and the ``YYYY-MM-DD`` string form.
"""

from datetime import date, datetime, timedelta
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"


def today() -> date:
    """Return the current local calendar date.

    Returns:
        Today's date, without any time component
    """
    return date.today()


def date_to_string(value: Optional[date]) -> str:
    """Render a date in ``YYYY-MM-DD`` form.

    Args:
        value: Date to render, or None

    Returns:
        ISO date string, or an empty string if value was None
    """
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def string_to_date(date_str: str) -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Args:
        date_str: Date string to parse

    Returns:
        The parsed date

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    return datetime.strptime(date_str, DATE_FORMAT).date()


def parse_date_or_none(date_str: Optional[str]) -> Optional[date]:
    """Lenient variant of ``string_to_date`` returning None on bad input."""
    if not date_str:
        return None
    try:
        return string_to_date(date_str)
    except ValueError:
        return None


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)
