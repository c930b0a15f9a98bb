"""
Report assembly: the last step before records reach presentation/export

Applies display truncation, 2-decimal rounding, per-report sort order and
result caps, and converts everything to JSON-serializable dicts.
"""

import uuid
from typing import Dict, List, Mapping, Optional, Sequence

from ..models import (
    AnalyticsReport, ExecutiveSummary, OvertimeRecord, ProjectHours, ProjectPerformance,
    ResourceAllocation, ResourceUtilization, UndertimeRecord, WorklogReportRow
)
from ..utils.time_format import round_hours

PROJECT_NAME_WIDTH = 25
PROJECT_HOURS_CAP = 15
ALLOCATION_NAME_WIDTH = 20
ALLOCATION_CAP = 10
RESOURCE_NAME_WIDTH = 15

ELLIPSIS = "..."


def truncate(text: Optional[str], width: int) -> str:
    """Cut text to width characters, marking the cut with an ellipsis"""
    text = text or ""
    if len(text) > width:
        return text[:width] + ELLIPSIS
    return text


def _cap(items: List, limit: Optional[int]) -> List:
    return items if limit is None else items[:limit]


def assemble_analytics(
    project_totals: Mapping[str, float],
    project_actors: Mapping[str, Sequence[str]],
    overtime: Sequence[OvertimeRecord],
    undertime: Sequence[UndertimeRecord],
    total_users: int,
    overtime_cap: Optional[int] = None
) -> AnalyticsReport:
    """Build the dashboard analytics bundle from raw aggregates"""
    project_hours = sorted(project_totals.items(), key=lambda item: item[1], reverse=True)
    allocation = sorted(project_actors.items(), key=lambda item: len(item[1]), reverse=True)

    return AnalyticsReport(
        project_hours=[
            ProjectHours(project=truncate(name, PROJECT_NAME_WIDTH), total_hours=round_hours(hours))
            for name, hours in _cap(project_hours, PROJECT_HOURS_CAP)
        ],
        resource_allocation=[
            ResourceAllocation(
                project=truncate(name, ALLOCATION_NAME_WIDTH),
                user_count=len(actors),
                users=list(actors)
            )
            for name, actors in _cap(allocation, ALLOCATION_CAP)
        ],
        overtime=[
            OvertimeRecord(
                resource=truncate(record.resource, RESOURCE_NAME_WIDTH),
                date=record.date,
                overtime_hours=round_hours(record.overtime_hours),
                total_hours=round_hours(record.total_hours)
            )
            for record in _cap(sorted(overtime, key=lambda r: r.overtime_hours, reverse=True), overtime_cap)
        ],
        undertime=[
            UndertimeRecord(
                resource=truncate(record.resource, RESOURCE_NAME_WIDTH),
                date=record.date,
                undertime_hours=round_hours(record.undertime_hours),
                total_hours=round_hours(record.total_hours)
            )
            for record in _cap(sorted(undertime, key=lambda r: r.undertime_hours, reverse=True), overtime_cap)
        ],
        total_hours=round_hours(sum(project_totals.values())),
        total_projects=len(project_totals),
        total_users=total_users
    )


def analytics_to_dict(report: AnalyticsReport) -> Dict:
    return {
        'projectHours': [
            {'project': p.project, 'totalHours': p.total_hours} for p in report.project_hours
        ],
        'resourceAllocation': [
            {'project': a.project, 'userCount': a.user_count, 'users': a.users}
            for a in report.resource_allocation
        ],
        'overtime': [
            {'resource': o.resource, 'date': o.date, 'overtimeHours': o.overtime_hours,
             'totalHours': o.total_hours}
            for o in report.overtime
        ],
        'undertime': [
            {'resource': u.resource, 'date': u.date, 'undertimeHours': u.undertime_hours,
             'totalHours': u.total_hours}
            for u in report.undertime
        ],
        'totalHours': report.total_hours,
        'totalProjects': report.total_projects,
        'totalUsers': report.total_users
    }


def assemble_worklog_rows(rows: Sequence[WorklogReportRow]) -> List[Dict]:
    """Row dicts, each tagged with a fresh opaque uniqueKey for list identity"""
    assembled = []
    for row in rows:
        record = row.to_dict()
        record['uniqueKey'] = uuid.uuid4().hex
        assembled.append(record)
    return assembled


def assemble_utilization(records: Sequence[ResourceUtilization]) -> List[Dict]:
    """Utilization rows, most utilized first"""
    ordered = sorted(records, key=lambda r: r.utilization_percent, reverse=True)
    return [
        {
            'employee': r.employee,
            'email': r.email or '',
            'totalHours': round_hours(r.total_hours),
            'utilizationRate': r.utilization_percent,
            'projectsWorked': r.projects_worked,
            'avgHoursPerDay': round_hours(r.avg_hours_per_day),
            'lastActiveDate': r.last_active_date
        }
        for r in ordered
    ]


def assemble_performance(records: Sequence[ProjectPerformance]) -> List[Dict]:
    """Performance rows in first-seen project order"""
    return [
        {
            'projectId': r.project_id,
            'projectName': r.project_name,
            'totalIssues': r.total_issues,
            'completedIssues': r.completed_issues,
            'completionRate': round_hours(r.completion_rate),
            'totalHoursSpent': round_hours(r.total_hours_spent),
            'avgHoursPerIssue': round_hours(r.avg_hours_per_issue),
            'resourceCount': r.resource_count,
            'avgResolutionDays': round_hours(r.avg_resolution_days),
            'highPriorityIssues': r.high_priority_issues,
            'bugCount': r.bug_count,
            'storyCount': r.story_count,
            'taskCount': r.task_count,
            'efficiencyScore': round_hours(r.efficiency_score),
            'lastUpdated': r.last_updated
        }
        for r in records
    ]


def assemble_executive(summary: ExecutiveSummary) -> Dict:
    """Executive summary as a dict; unmeasured metrics stay None"""
    return {
        'totalProjects': summary.total_projects,
        'activeUsers': summary.active_users,
        'totalHours': round_hours(summary.total_hours),
        'avgHoursPerProject': round_hours(summary.avg_hours_per_project),
        'mostProductiveDay': summary.most_productive_day,
        'overtimeInstances': summary.overtime_instances,
        'efficiency': summary.efficiency,
        'completionRate': summary.completion_rate,
        'projectBreakdown': [
            {
                'project': p.project,
                'totalHours': round_hours(p.total_hours),
                'worklogEntries': p.worklog_entries,
                'teamMembers': p.team_members,
                'avgDailyHours': round_hours(p.avg_daily_hours)
            }
            for p in sorted(summary.project_breakdown, key=lambda p: p.total_hours, reverse=True)
        ],
        'resourceBreakdown': [
            {
                'resource': r.resource,
                'totalHours': round_hours(r.total_hours),
                'projectsWorked': r.projects_worked,
                'avgDailyHours': round_hours(r.avg_daily_hours),
                'utilizationRate': r.utilization_percent
            }
            for r in sorted(summary.resource_breakdown, key=lambda r: r.total_hours, reverse=True)
        ]
    }
