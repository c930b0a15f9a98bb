"""
Conversion between worklog durations and "<H>h <M>m" display strings
"""

import re
from typing import Iterable

_HOURS_PATTERN = re.compile(r'(-?\d+(?:\.\d+)?)\s*h', re.IGNORECASE)
_MINUTES_PATTERN = re.compile(r'(-?\d+(?:\.\d+)?)\s*m', re.IGNORECASE)


def seconds_to_display(seconds) -> str:
    """Format a duration in seconds as "0h", "{H}h" or "{H}h {M}m"

    Leftover seconds below a full minute are truncated, not rounded.
    """
    try:
        total = max(int(seconds or 0), 0)
    except (TypeError, ValueError):
        total = 0

    hours = total // 3600
    minutes = (total % 3600) // 60

    if hours == 0 and minutes == 0:
        return "0h"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def _component(pattern, text: str) -> float:
    match = pattern.search(text)
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def display_to_hours_fraction(display) -> float:
    """Parse "{H}h {M}m" or "{H}h" back into fractional hours

    Unparsable components count as zero. Seconds dropped by
    seconds_to_display() cannot be recovered.
    """
    if not isinstance(display, str):
        return 0.0

    hours = _component(_HOURS_PATTERN, display)
    minutes = _component(_MINUTES_PATTERN, display)
    return hours + minutes / 60


def sum_display_values(displays: Iterable[str]) -> str:
    """Sum display strings into a "{H}h {M}m" total (minutes carried into hours)"""
    total_hours = 0
    total_minutes = 0

    for display in displays:
        if not isinstance(display, str):
            continue
        total_hours += int(_component(_HOURS_PATTERN, display))
        total_minutes += int(_component(_MINUTES_PATTERN, display))

    total_hours += total_minutes // 60
    total_minutes = total_minutes % 60

    return f"{total_hours}h {total_minutes}m"


def round_hours(value: float) -> float:
    """Round an hour quantity to 2 decimal places"""
    return round(float(value or 0.0), 2)
