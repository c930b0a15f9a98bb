"""
Data models for the worklog dashboard
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone, tzinfo
from typing import List, Dict, Optional, Mapping
from enum import Enum

ALL_PROJECTS = "ALL"
UNASSIGNED = "Unassigned"
UNKNOWN_USER = "Unknown User"
NO_COMMENT = "No comment"

# User-scope values that mean "everyone"
ALL_USERS = ("ALL", "All Resources", "The Team")


class InvalidFilterError(ValueError):
    """Missing or malformed date range / scope in a report request"""
    pass


class ReportKind(Enum):
    """Report shapes the pipeline can produce"""
    WORKLOG_BY_PROJECT = "worklog-by-project"
    WORKLOG_BY_USER = "worklog-by-user"
    ANALYTICS = "analytics"
    RESOURCE_UTILIZATION = "resource-utilization"
    PROJECT_PERFORMANCE = "project-performance"
    EXECUTIVE_SUMMARY = "executive-summary"

    @classmethod
    def parse(cls, value) -> "ReportKind":
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().lower().replace('_', '-')
        for kind in cls:
            if kind.value == text:
                return kind
        raise InvalidFilterError(f"Unknown report kind: {value!r}")


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day range interpreted in a single timezone"""
    start: date
    end: date
    tz: tzinfo = timezone.utc

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidFilterError(
                f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    @property
    def start_instant(self) -> datetime:
        """Midnight of the first day"""
        return datetime.combine(self.start, time.min, tzinfo=self.tz)

    @property
    def end_instant(self) -> datetime:
        """Last millisecond of the last day (23:59:59.999)"""
        return datetime.combine(self.end, time(23, 59, 59, 999000), tzinfo=self.tz)

    def contains(self, instant: datetime) -> bool:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return self.start_instant <= instant <= self.end_instant


@dataclass
class ReportRequest:
    """Inbound report request"""
    start_date: date
    end_date: date
    kind: ReportKind
    project_scope: str = ALL_PROJECTS
    user_scope: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping) -> "ReportRequest":
        """Parse a request mapping (startDate, endDate, project, user, reportKind)"""
        start = params.get('startDate') or params.get('start_date')
        end = params.get('endDate') or params.get('end_date')
        if not start or not end:
            raise InvalidFilterError("Missing required parameters: startDate and endDate")

        kind = ReportKind.parse(params.get('reportKind') or params.get('kind'))

        project = params.get('project') or params.get('project_scope') or ALL_PROJECTS
        user = params.get('user') or params.get('user_scope')

        if kind == ReportKind.WORKLOG_BY_USER and not user:
            raise InvalidFilterError("Missing required parameter: user")

        from .utils.date_utils import parse_day

        start_day, end_day = parse_day(start), parse_day(end)
        if start_day > end_day:
            raise InvalidFilterError(
                f"Start date {start_day.isoformat()} is after end date {end_day.isoformat()}"
            )

        return cls(
            start_date=start_day,
            end_date=end_day,
            kind=kind,
            project_scope=str(project).strip(),
            user_scope=str(user).strip() if user else None
        )


@dataclass
class Worklog:
    """Single logged-time entry on an issue"""
    id: str
    started: datetime
    time_spent_seconds: int
    update_author: Optional[str] = None
    update_author_email: Optional[str] = None
    comment: Optional[str] = None

    @property
    def hours(self) -> float:
        return self.time_spent_seconds / 3600


@dataclass
class Issue:
    """Jira issue with only the fields the reports consume"""
    key: str
    summary: str
    project_key: str
    project_name: str
    assignee: str = UNASSIGNED
    assignee_email: Optional[str] = None
    status: str = ""
    priority: str = ""
    issue_type: str = ""
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    worklogs: List[Worklog] = field(default_factory=list)


@dataclass
class WorklogEntry:
    """Flattened worklog: one per worklog inside the requested range"""
    issue_key: str
    issue_summary: str
    project_id: str
    project_name: str
    assignee: str
    updated_by: Optional[str]
    logged_at: datetime
    day: str
    duration_seconds: int
    comment: str = NO_COMMENT
    author_email: Optional[str] = None

    @property
    def hours(self) -> float:
        return self.duration_seconds / 3600


@dataclass
class WorklogReportRow:
    """Per-entry row of the worklog reports (by project / by user)"""
    date: str
    project_name: str
    project_id: str
    issue_id: str
    assignee: str
    updated_by: Optional[str]
    issue: str
    comment: str
    hours: str
    unique_key: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'date': self.date,
            'projectName': self.project_name,
            'projectId': self.project_id,
            'issueId': self.issue_id,
            'assignee': self.assignee,
            'updatedBy': self.updated_by,
            'issue': self.issue,
            'comment': self.comment,
            'hours': self.hours,
            'uniqueKey': self.unique_key
        }


@dataclass
class ProjectHours:
    project: str
    total_hours: float


@dataclass
class ResourceAllocation:
    project: str
    user_count: int
    users: List[str] = field(default_factory=list)


@dataclass
class OvertimeRecord:
    resource: str
    date: str
    overtime_hours: float
    total_hours: float


@dataclass
class UndertimeRecord:
    resource: str
    date: str
    undertime_hours: float
    total_hours: float


@dataclass
class AnalyticsReport:
    """Dashboard analytics bundle"""
    project_hours: List[ProjectHours] = field(default_factory=list)
    resource_allocation: List[ResourceAllocation] = field(default_factory=list)
    overtime: List[OvertimeRecord] = field(default_factory=list)
    undertime: List[UndertimeRecord] = field(default_factory=list)
    total_hours: float = 0.0
    total_projects: int = 0
    total_users: int = 0


@dataclass
class ResourceUtilization:
    employee: str
    total_hours: float
    utilization_percent: int
    projects_worked: int
    avg_hours_per_day: float
    email: Optional[str] = None
    last_active_date: Optional[str] = None


@dataclass
class ProjectPerformance:
    project_id: str
    project_name: str
    total_issues: int = 0
    completed_issues: int = 0
    total_hours_spent: float = 0.0
    resource_count: int = 0
    avg_resolution_days: float = 0.0
    high_priority_issues: int = 0
    bug_count: int = 0
    story_count: int = 0
    task_count: int = 0
    last_updated: Optional[str] = None

    @property
    def completion_rate(self) -> float:
        """Completed issues as a percentage of all issues"""
        if not self.total_issues:
            return 0.0
        return self.completed_issues / self.total_issues * 100

    @property
    def avg_hours_per_issue(self) -> float:
        if not self.total_issues:
            return 0.0
        return self.total_hours_spent / self.total_issues

    @property
    def efficiency_score(self) -> float:
        """Completed issues per logged hour, discounted by the bug share"""
        if not self.total_issues:
            return 0.0
        return (self.completed_issues / (self.total_hours_spent or 1)) * (1 - self.bug_count / self.total_issues)


@dataclass
class ProjectBreakdown:
    project: str
    total_hours: float
    worklog_entries: int
    team_members: int
    avg_daily_hours: float


@dataclass
class ResourceBreakdown:
    resource: str
    total_hours: float
    projects_worked: int
    avg_daily_hours: float
    utilization_percent: int


@dataclass
class ExecutiveSummary:
    """Organization-level roll-up

    efficiency and completion_rate have no data-backed definition and stay
    None ("not computed").
    """
    total_projects: int = 0
    active_users: int = 0
    total_hours: float = 0.0
    avg_hours_per_project: float = 0.0
    most_productive_day: Optional[str] = None
    overtime_instances: int = 0
    efficiency: Optional[float] = None
    completion_rate: Optional[float] = None
    project_breakdown: List[ProjectBreakdown] = field(default_factory=list)
    resource_breakdown: List[ResourceBreakdown] = field(default_factory=list)


@dataclass
class ProjectInfo:
    id: str
    name: str


@dataclass
class UserInfo:
    name: str
    account_id: Optional[str] = None
    email: str = ""
