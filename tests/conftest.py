"""
Shared fixtures
"""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from worklog_dashboard.config import Config, JiraConfig, ReportConfig
from worklog_dashboard.models import (
    DateRange, Issue, Worklog, WorklogEntry, WorklogReportRow
)


@pytest.fixture
def jira_config():
    """Jira config that never sleeps or retries"""
    return JiraConfig(
        url="https://test.atlassian.net",
        username="test@example.com",
        api_token="test-token-123456",
        page_size=100,
        page_delay=0,
        max_retries=0
    )


@pytest.fixture
def config(jira_config):
    """Full config with day keys in UTC"""
    return Config(jira=jira_config, report=ReportConfig(utc_offset_hours=0))


@pytest.fixture
def january():
    """2024-01-01 (Mon) .. 2024-01-31 in UTC"""
    return DateRange(date(2024, 1, 1), date(2024, 1, 31), timezone.utc)


@pytest.fixture
def make_entry():
    """Factory for flattened worklog entries"""
    def _make(day="2024-01-02", actor="Alice", hours=1.0, project="Alpha",
              project_id="ALP", assignee=None, issue_key="ALP-1"):
        year, month, day_of_month = (int(part) for part in day.split('-'))
        return WorklogEntry(
            issue_key=issue_key,
            issue_summary=f"Summary of {issue_key}",
            project_id=project_id,
            project_name=project,
            assignee=assignee or actor or "Unassigned",
            updated_by=actor,
            logged_at=datetime(year, month, day_of_month, 9, 0, tzinfo=timezone.utc),
            day=day,
            duration_seconds=int(round(hours * 3600))
        )
    return _make


@pytest.fixture
def make_row():
    """Factory for per-entry report rows"""
    def _make(date="2024-01-02", project="Alpha", hours="1h", updated_by="Alice", assignee="Alice"):
        return WorklogReportRow(
            date=date,
            project_name=project,
            project_id=project[:3].upper(),
            issue_id="ALP-1",
            assignee=assignee,
            updated_by=updated_by,
            issue="Summary",
            comment="No comment",
            hours=hours
        )
    return _make


@pytest.fixture
def make_issue():
    """Factory for issues with worklogs given as (started, seconds, author) tuples"""
    def _make(key="ALP-1", project_key="ALP", project_name="Alpha", assignee="Alice",
              worklogs=(), status="", priority="", issue_type="", created=None, updated=None):
        return Issue(
            key=key,
            summary=f"Summary of {key}",
            project_key=project_key,
            project_name=project_name,
            assignee=assignee,
            status=status,
            priority=priority,
            issue_type=issue_type,
            created=created,
            updated=updated,
            worklogs=[
                Worklog(id=str(idx), started=started, time_spent_seconds=seconds, update_author=author)
                for idx, (started, seconds, author) in enumerate(worklogs, start=1)
            ]
        )
    return _make
