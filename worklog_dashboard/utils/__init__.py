"""
Utility functions
"""

from .date_utils import (
    utc_offset, parse_day, normalize_range, day_key,
    count_working_days, parse_jira_datetime, format_date_for_jql
)
from .time_format import seconds_to_display, display_to_hours_fraction, sum_display_values, round_hours
from .logging_config import setup_logging, PhaseTimer

__all__ = [
    'utc_offset', 'parse_day', 'normalize_range', 'day_key',
    'count_working_days', 'parse_jira_datetime', 'format_date_for_jql',
    'seconds_to_display', 'display_to_hours_fraction', 'sum_display_values',
    'round_hours', 'setup_logging', 'PhaseTimer'
]
