"""
Worklog flattening and actor resolution
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..models import (
    ALL_USERS, NO_COMMENT, UNASSIGNED, UNKNOWN_USER,
    DateRange, Issue, WorklogEntry, WorklogReportRow
)
from ..utils.date_utils import day_key
from ..utils.time_format import seconds_to_display

logger = logging.getLogger(__name__)


def resolve_assignee(entry: WorklogEntry) -> str:
    """Credit unassigned work to whoever logged it"""
    if entry.assignee == UNASSIGNED:
        return entry.updated_by or UNASSIGNED
    return entry.assignee


def resolve_actor(entry: WorklogEntry, unknown: Optional[str] = None) -> str:
    """Who did the work: the worklog author, else a report-specific fallback

    Without an explicit fallback the issue assignee is used, which itself
    defaults to "Unassigned".
    """
    if entry.updated_by:
        return entry.updated_by
    return unknown if unknown is not None else entry.assignee


def analytics_actor(entry: WorklogEntry) -> str:
    """Actor key of the analytics dashboard (missing author -> "Unknown User")"""
    return resolve_actor(entry, UNKNOWN_USER)


def is_all_users(user: Optional[str]) -> bool:
    return not user or user in ALL_USERS


class WorklogProcessor:
    """Expand issues into per-worklog entries inside a date range

    Day keys use the zone carried by the date range.
    """

    def flatten_issues(self, issues: Sequence[Issue], date_range: DateRange) -> List[WorklogEntry]:
        """One WorklogEntry per worklog whose start lies in the range"""
        entries = []
        dropped = 0

        for issue in issues:
            for worklog in issue.worklogs:
                if not date_range.contains(worklog.started):
                    dropped += 1
                    continue

                entries.append(WorklogEntry(
                    issue_key=issue.key,
                    issue_summary=issue.summary,
                    project_id=issue.project_key,
                    project_name=issue.project_name,
                    assignee=issue.assignee or UNASSIGNED,
                    updated_by=worklog.update_author,
                    logged_at=worklog.started,
                    day=day_key(worklog.started, date_range.tz),
                    duration_seconds=worklog.time_spent_seconds,
                    comment=worklog.comment or NO_COMMENT,
                    author_email=worklog.update_author_email or issue.assignee_email
                ))

        logger.debug(f"Flattened {len(entries)} worklogs ({dropped} outside {date_range.start}..{date_range.end})")
        return entries

    def filter_by_user(
        self,
        entries: Sequence[WorklogEntry],
        user: Optional[str],
        actor: Callable[[WorklogEntry], str] = resolve_actor
    ) -> List[WorklogEntry]:
        """Keep entries credited to one user; the "all" sentinels keep everything"""
        if is_all_users(user):
            return list(entries)
        return [entry for entry in entries if actor(entry) == user]

    def build_worklog_rows(
        self,
        entries: Sequence[WorklogEntry],
        by_user: bool = False
    ) -> List[WorklogReportRow]:
        """Per-entry report rows, oldest day first

        The project report credits unassigned work to its author; the user
        report keeps the raw assignee.
        """
        rows = []

        for entry in entries:
            updated_by = entry.updated_by or entry.assignee
            rows.append(WorklogReportRow(
                date=entry.day,
                project_name=entry.project_name,
                project_id=entry.project_id,
                issue_id=entry.issue_key,
                assignee=entry.assignee if by_user else resolve_assignee(entry),
                updated_by=updated_by,
                issue=entry.issue_summary,
                comment=entry.comment or NO_COMMENT,
                hours=seconds_to_display(entry.duration_seconds)
            ))

        rows.sort(key=lambda row: row.date)
        return rows
