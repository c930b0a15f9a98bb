"""
Base exporter class and the tabular layout shared by all export formats
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import ReportKind
from ..utils.time_format import sum_display_values

NOT_COMPUTED = "Not computed"

WORKLOG_COLUMNS = [
    ('Date', 'date'),
    ('ProjectName', 'projectName'),
    ('ProjectID', 'projectId'),
    ('IssueID', 'issueId'),
    ('Assignee', 'assignee'),
    ('UpdatedBy', 'updatedBy'),
    ('Issue', 'issue'),
    ('Comment', 'comment'),
    ('Hours', 'hours'),
]

UTILIZATION_COLUMNS = [
    ('Employee', 'employee'),
    ('Email', 'email'),
    ('Total Hours', 'totalHours'),
    ('Utilization Rate', 'utilizationRate'),
    ('Projects Worked', 'projectsWorked'),
    ('Avg Hours per Day', 'avgHoursPerDay'),
    ('Last Active Date', 'lastActiveDate'),
]

PERFORMANCE_COLUMNS = [
    ('Project ID', 'projectId'),
    ('Project Name', 'projectName'),
    ('Total Issues', 'totalIssues'),
    ('Completed Issues', 'completedIssues'),
    ('Completion Rate', 'completionRate'),
    ('Total Hours Spent', 'totalHoursSpent'),
    ('Avg Hours per Issue', 'avgHoursPerIssue'),
    ('Team Size', 'resourceCount'),
    ('Avg Resolution Time (days)', 'avgResolutionDays'),
    ('High Priority Issues', 'highPriorityIssues'),
    ('Bugs', 'bugCount'),
    ('User Stories', 'storyCount'),
    ('Tasks', 'taskCount'),
    ('Last Updated', 'lastUpdated'),
    ('Efficiency Score', 'efficiencyScore'),
]


@dataclass
class ReportTable:
    """One titled table of an exported report"""
    title: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    total_row: Optional[List[Any]] = None


def _percent(value) -> str:
    return f"{value}%" if value is not None else NOT_COMPUTED


def _metric(value, suffix: str = "") -> Any:
    if value is None:
        return NOT_COMPUTED
    return f"{value}{suffix}" if suffix else value


def _table(title: str, columns, records: List[Dict], formatters: Optional[Dict] = None) -> ReportTable:
    formatters = formatters or {}
    rows = []
    for record in records:
        row = []
        for _, key in columns:
            value = record.get(key)
            if key in formatters:
                value = formatters[key](value)
            row.append('' if value is None else value)
        rows.append(row)
    return ReportTable(title=title, headers=[header for header, _ in columns], rows=rows)


def _worklog_tables(data: List[Dict], with_total: bool = False) -> List[ReportTable]:
    # uniqueKey is a client-side list handle, not report content
    table = _table("Worklog Report", WORKLOG_COLUMNS, data)
    if with_total:
        total = sum_display_values(record.get('hours') for record in data)
        table.total_row = ["Total Actual Hours"] + [''] * (len(WORKLOG_COLUMNS) - 2) + [total]
    return [table]


def _analytics_tables(data: Dict) -> List[ReportTable]:
    summary = ReportTable(
        title="Summary",
        headers=['Metric', 'Value'],
        rows=[
            ['Total Hours', data.get('totalHours', 0)],
            ['Total Projects', data.get('totalProjects', 0)],
            ['Total Users', data.get('totalUsers', 0)],
        ]
    )
    return [
        summary,
        _table("Project Hours", [('Project', 'project'), ('Total Hours', 'totalHours')],
               data.get('projectHours', [])),
        _table("Resource Allocation",
               [('Project', 'project'), ('User Count', 'userCount'), ('Users', 'users')],
               data.get('resourceAllocation', []),
               {'users': lambda users: ', '.join(users or [])}),
        _table("Overtime",
               [('Resource', 'resource'), ('Date', 'date'), ('Overtime Hours', 'overtimeHours'),
                ('Total Hours', 'totalHours')],
               data.get('overtime', [])),
        _table("Undertime",
               [('Resource', 'resource'), ('Date', 'date'), ('Undertime Hours', 'undertimeHours'),
                ('Total Hours', 'totalHours')],
               data.get('undertime', [])),
    ]


def _executive_tables(data: Dict) -> List[ReportTable]:
    summary = ReportTable(
        title="Executive Summary",
        headers=['Metric', 'Value'],
        rows=[
            ['Total Projects', data.get('totalProjects', 0)],
            ['Active Users', data.get('activeUsers', 0)],
            ['Total Hours Logged', f"{data.get('totalHours', 0)}h"],
            ['Average Hours per Project', f"{data.get('avgHoursPerProject', 0)}h"],
            ['Most Productive Day', data.get('mostProductiveDay') or 'N/A'],
            ['Team Efficiency', _metric(data.get('efficiency'), '%')],
            ['Overtime Instances', data.get('overtimeInstances', 0)],
            ['Project Completion Rate', _metric(data.get('completionRate'), '%')],
        ]
    )
    return [
        summary,
        _table("Project Performance",
               [('Project', 'project'), ('Total Hours', 'totalHours'),
                ('Worklog Entries', 'worklogEntries'), ('Team Members', 'teamMembers'),
                ('Avg Daily Hours', 'avgDailyHours')],
               data.get('projectBreakdown', [])),
        _table("Resource Utilization",
               [('Resource', 'resource'), ('Total Hours', 'totalHours'),
                ('Projects Worked', 'projectsWorked'), ('Avg Daily Hours', 'avgDailyHours'),
                ('Utilization Rate', 'utilizationRate')],
               data.get('resourceBreakdown', []),
               {'utilizationRate': _percent}),
    ]


def report_tables(result: Dict) -> List[ReportTable]:
    """Lay out an assembled report as titled tables"""
    kind = ReportKind.parse(result['kind'])
    data = result.get('data')

    if kind == ReportKind.WORKLOG_BY_PROJECT:
        return _worklog_tables(data or [])
    if kind == ReportKind.WORKLOG_BY_USER:
        return _worklog_tables(data or [], with_total=True)
    if kind == ReportKind.ANALYTICS:
        return _analytics_tables(data or {})
    if kind == ReportKind.RESOURCE_UTILIZATION:
        return [_table("Resource Utilization", UTILIZATION_COLUMNS, data or [],
                       {'utilizationRate': _percent})]
    if kind == ReportKind.PROJECT_PERFORMANCE:
        return [_table("Project Performance", PERFORMANCE_COLUMNS, data or [],
                       {'completionRate': _percent})]
    return _executive_tables(data or {})


class BaseExporter(ABC):
    """Abstract base class for exporters"""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    @abstractmethod
    def export(self, result: Dict) -> Path:
        """Export an assembled report"""
        pass

    def _ensure_directory(self):
        """Ensure output directory exists"""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def _generated_line(self, result: Dict) -> str:
        timestamp_str = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        return f"Generated: {timestamp_str} ({result['start_date']} to {result['end_date']})"
