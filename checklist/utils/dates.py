"""
Calendar date helpers shared by the status engine, the forms and the notifier.

Every date in the application is a local calendar date with no time
component. Strings are read as YYYY-MM-DD in local time, never as UTC
midnight, so a cleaning logged late in the evening stays on the right day.
"""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]

DISPLAY_FORMAT = '%d/%m/%Y'


def local_today() -> date:
    """Current local calendar date."""
    return date.today()


def parse_local_date(value: DateLike) -> Optional[date]:
    """
    Read a calendar date from a date, datetime or ISO string.

    A datetime is truncated to its own calendar date without any time zone
    conversion. A string may carry a time part ('2024-01-01T23:30:00Z'); only
    the leading YYYY-MM-DD is used. Anything else yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if 'T' in text:
        text = text.split('T', 1)[0]
    elif ' ' in text:
        text = text.split(' ', 1)[0]
    try:
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError:
        return None


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is earlier)."""
    return (end - start).days


def format_date(value: DateLike) -> str:
    """Render a date as dd/mm/yyyy, or an empty string when it cannot be read."""
    parsed = parse_local_date(value)
    if parsed is None:
        return ''
    return parsed.strftime(DISPLAY_FORMAT)
