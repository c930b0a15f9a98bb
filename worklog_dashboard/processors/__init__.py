"""
Data processors
"""

from .worklog_processor import (
    WorklogProcessor, resolve_assignee, resolve_actor, analytics_actor, is_all_users
)
from . import aggregators
from . import report_assembler

__all__ = [
    'WorklogProcessor', 'resolve_assignee', 'resolve_actor', 'analytics_actor',
    'is_all_users', 'aggregators', 'report_assembler'
]
