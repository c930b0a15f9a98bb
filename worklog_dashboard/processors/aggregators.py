"""
Aggregation engines over flattened worklog entries

Every function here is pure: the result depends only on the arguments,
and an empty input yields the empty/zero form of the result.
"""

import math
from collections import OrderedDict, defaultdict
from typing import Callable, Dict, List, Sequence, Tuple

from ..models import (
    DateRange, Issue, WorklogEntry, WorklogReportRow,
    OvertimeRecord, UndertimeRecord, ResourceUtilization, ProjectPerformance,
    ExecutiveSummary, ProjectBreakdown, ResourceBreakdown
)
from ..utils.date_utils import count_working_days
from ..utils.time_format import display_to_hours_fraction
from .worklog_processor import analytics_actor, resolve_actor

ActorFn = Callable[[WorklogEntry], str]

DEFAULT_THRESHOLD = 8.0

SECONDS_PER_DAY = 24 * 60 * 60

# Issue-type buckets, first match wins
ISSUE_TYPE_BUCKETS = ('bug', 'story', 'task')


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def total_hours_by_project(entries: Sequence[WorklogEntry]) -> Dict[str, float]:
    """Sum of fractional hours per project name"""
    totals = defaultdict(float)
    for entry in entries:
        totals[entry.project_name] += entry.hours
    return dict(totals)


def actors_by_project(
    entries: Sequence[WorklogEntry],
    actor: ActorFn = analytics_actor
) -> Dict[str, List[str]]:
    """Distinct actors per project, in first-seen order"""
    actors: Dict[str, List[str]] = OrderedDict()
    for entry in entries:
        names = actors.setdefault(entry.project_name, [])
        name = actor(entry)
        if name not in names:
            names.append(name)
    return dict(actors)


def count_distinct_authors(entries: Sequence[WorklogEntry]) -> int:
    """Distinct named worklog authors; entries without an author are not counted"""
    return len({entry.updated_by for entry in entries if entry.updated_by})


def daily_hours_by_actor(
    entries: Sequence[WorklogEntry],
    actor: ActorFn = analytics_actor
) -> Dict[Tuple[str, str], float]:
    """Fractional hours per (day, actor)"""
    totals: Dict[Tuple[str, str], float] = OrderedDict()
    for entry in entries:
        key = (entry.day, actor(entry))
        totals[key] = totals.get(key, 0.0) + entry.hours
    return totals


def detect_daily_variance(
    entries: Sequence[WorklogEntry],
    threshold: float = DEFAULT_THRESHOLD,
    actor: ActorFn = analytics_actor
) -> Tuple[List[OvertimeRecord], List[UndertimeRecord]]:
    """Split (day, actor) totals into overtime and undertime records

    A day summing to exactly the threshold lands in neither list.
    """
    overtime = []
    undertime = []

    for (day, name), hours in daily_hours_by_actor(entries, actor).items():
        if hours > threshold:
            overtime.append(OvertimeRecord(
                resource=name, date=day,
                overtime_hours=hours - threshold, total_hours=hours
            ))
        elif 0 < hours < threshold:
            undertime.append(UndertimeRecord(
                resource=name, date=day,
                undertime_hours=threshold - hours, total_hours=hours
            ))

    return overtime, undertime


def resource_utilization(
    entries: Sequence[WorklogEntry],
    date_range: DateRange,
    workday_hours: float = DEFAULT_THRESHOLD,
    actor: ActorFn = resolve_actor
) -> List[ResourceUtilization]:
    """Logged hours per actor against working-day capacity"""
    working_days = count_working_days(date_range)
    capacity = working_days * workday_hours

    grouped = OrderedDict()
    for entry in entries:
        name = actor(entry)
        data = grouped.get(name)
        if data is None:
            data = grouped[name] = {
                'hours': 0.0,
                'projects': set(),
                'last_active': None,
                'last_day': None,
                'email': entry.author_email
            }
        data['hours'] += entry.hours
        data['projects'].add(entry.project_name)
        if data['last_active'] is None or entry.logged_at > data['last_active']:
            data['last_active'] = entry.logged_at
            data['last_day'] = entry.day

    results = []
    for name, data in grouped.items():
        percent = round_half_up(data['hours'] / capacity * 100) if capacity > 0 else 0
        results.append(ResourceUtilization(
            employee=name,
            total_hours=data['hours'],
            utilization_percent=max(0, min(100, percent)),
            projects_worked=len(data['projects']),
            avg_hours_per_day=data['hours'] / working_days,
            email=data['email'],
            last_active_date=data['last_day']
        ))

    return results


def _issue_type_bucket(issue_type: str):
    lowered = (issue_type or '').lower()
    for bucket in ISSUE_TYPE_BUCKETS:
        if bucket in lowered:
            return bucket
    return None


def project_performance(
    issues: Sequence[Issue],
    entries: Sequence[WorklogEntry],
    actor: ActorFn = resolve_actor
) -> List[ProjectPerformance]:
    """Per-project issue statistics, in first-seen project order

    Logged hours and resource counts come from the in-range entries.
    Resolution time is kept as a running mean updated per issue.
    """
    hours_by_issue = defaultdict(float)
    actors_by_project_key = defaultdict(set)
    for entry in entries:
        hours_by_issue[entry.issue_key] += entry.hours
        actors_by_project_key[entry.project_id].add(actor(entry))

    projects: Dict[str, ProjectPerformance] = OrderedDict()

    for issue in issues:
        data = projects.get(issue.project_key)
        if data is None:
            data = projects[issue.project_key] = ProjectPerformance(
                project_id=issue.project_key,
                project_name=issue.project_name,
                last_updated=issue.updated.strftime('%Y-%m-%d') if issue.updated else None
            )

        resolution_days = 0
        if issue.created and issue.updated:
            resolution_days = math.floor((issue.updated - issue.created).total_seconds() / SECONDS_PER_DAY)

        data.total_issues += 1
        data.total_hours_spent += hours_by_issue.get(issue.key, 0.0)
        data.avg_resolution_days = (
            (data.avg_resolution_days * (data.total_issues - 1) + resolution_days) / data.total_issues
        )

        if 'done' in (issue.status or '').lower():
            data.completed_issues += 1
        if 'high' in (issue.priority or '').lower():
            data.high_priority_issues += 1

        bucket = _issue_type_bucket(issue.issue_type)
        if bucket == 'bug':
            data.bug_count += 1
        elif bucket == 'story':
            data.story_count += 1
        elif bucket == 'task':
            data.task_count += 1

    for project_key, data in projects.items():
        data.resource_count = len(actors_by_project_key.get(project_key, ()))

    return list(projects.values())


def _row_actor(row: WorklogReportRow) -> str:
    return row.updated_by or row.assignee


def executive_summary(
    rows: Sequence[WorklogReportRow],
    date_range: DateRange,
    threshold: float = DEFAULT_THRESHOLD,
    workday_hours: float = DEFAULT_THRESHOLD
) -> ExecutiveSummary:
    """Organization roll-up over per-entry report rows"""
    if not rows:
        return ExecutiveSummary()

    working_days = count_working_days(date_range)

    project_hours = OrderedDict()
    project_entries = defaultdict(int)
    project_members = defaultdict(set)
    user_hours = OrderedDict()
    user_projects = defaultdict(set)
    daily_hours = OrderedDict()
    total_hours = 0.0
    overtime_instances = 0

    for row in rows:
        hours = display_to_hours_fraction(row.hours)
        name = _row_actor(row)

        total_hours += hours
        project_hours[row.project_name] = project_hours.get(row.project_name, 0.0) + hours
        project_entries[row.project_name] += 1
        project_members[row.project_name].add(name)
        user_hours[name] = user_hours.get(name, 0.0) + hours
        user_projects[name].add(row.project_name)
        daily_hours[row.date] = daily_hours.get(row.date, 0.0) + hours

        if hours > threshold:
            overtime_instances += 1

    most_productive_day = None
    best = None
    for day, hours in daily_hours.items():
        if best is None or hours > best:
            most_productive_day, best = day, hours

    project_breakdown = [
        ProjectBreakdown(
            project=project,
            total_hours=hours,
            worklog_entries=project_entries[project],
            team_members=len(project_members[project]),
            avg_daily_hours=hours / working_days
        )
        for project, hours in project_hours.items()
    ]

    capacity = working_days * workday_hours
    resource_breakdown = [
        ResourceBreakdown(
            resource=name,
            total_hours=hours,
            projects_worked=len(user_projects[name]),
            avg_daily_hours=hours / working_days,
            utilization_percent=max(0, min(100, round_half_up(hours / capacity * 100)))
        )
        for name, hours in user_hours.items()
    ]

    return ExecutiveSummary(
        total_projects=len(project_hours),
        active_users=len(user_hours),
        total_hours=total_hours,
        avg_hours_per_project=total_hours / len(project_hours),
        most_productive_day=most_productive_day,
        overtime_instances=overtime_instances,
        project_breakdown=project_breakdown,
        resource_breakdown=resource_breakdown
    )
