"""
Date utility functions
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Union

from ..models import DateRange, InvalidFilterError


def utc_offset(hours: float) -> timezone:
    """Build a fixed-offset timezone, e.g. utc_offset(5.5) for UTC+05:30"""
    if not hours:
        return timezone.utc
    return timezone(timedelta(minutes=round(hours * 60)))


def parse_day(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD calendar day"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
    except ValueError:
        raise InvalidFilterError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def normalize_range(
    start: Union[str, date],
    end: Union[str, date],
    tz: tzinfo = timezone.utc
) -> DateRange:
    """Build an inclusive day range; the end is pinned to its last instant"""
    return DateRange(start=parse_day(start), end=parse_day(end), tz=tz)


def day_key(instant: datetime, tz: tzinfo = timezone.utc) -> str:
    """Get the YYYY-MM-DD day an instant falls on in the given zone"""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz).strftime('%Y-%m-%d')


def count_working_days(date_range: DateRange) -> int:
    """Count Monday-Friday days in the range (never less than 1)"""
    count = 0
    current = date_range.start

    while current <= date_range.end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)

    return count or 1


def parse_jira_datetime(value: str) -> datetime:
    """Parse a Jira timestamp such as 2024-01-02T09:00:00.000+0000"""
    text = value.strip().replace('Z', '+00:00')

    # Jira omits the colon in its offsets (+0530), fromisoformat wants +05:30
    if len(text) > 5 and text[-5] in '+-' and text[-4:].isdigit():
        text = f"{text[:-2]}:{text[-2:]}"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date_for_jql(value: Union[date, datetime]) -> str:
    """Format a date for a JQL query"""
    return value.strftime('%Y-%m-%d')
