"""
Tests for the aggregation engines
"""

from datetime import date, datetime, timezone

import pytest

from worklog_dashboard.models import DateRange
from worklog_dashboard.processors.aggregators import (
    round_half_up, total_hours_by_project, actors_by_project, count_distinct_authors, detect_daily_variance,
    resource_utilization, project_performance, executive_summary
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestTotalHoursByProject:
    """Test total_hours_by_project"""

    def test_sums_per_project(self, make_entry):
        entries = [
            make_entry(project="Alpha", hours=2.5),
            make_entry(project="Beta", hours=1.0),
            make_entry(project="Alpha", hours=0.25),
        ]

        totals = total_hours_by_project(entries)

        assert totals == {"Alpha": pytest.approx(2.75), "Beta": pytest.approx(1.0)}

    def test_total_matches_entries(self, make_entry):
        entries = [make_entry(project=f"P{i % 4}", hours=0.1 * i + 0.05) for i in range(1, 40)]

        totals = total_hours_by_project(entries)

        assert sum(totals.values()) == pytest.approx(sum(e.hours for e in entries), abs=0.01)

    def test_empty(self):
        assert total_hours_by_project([]) == {}


class TestActorsByProject:
    """Test actors_by_project"""

    def test_distinct_in_first_seen_order(self, make_entry):
        entries = [
            make_entry(project="Alpha", actor="Bob"),
            make_entry(project="Alpha", actor="Alice"),
            make_entry(project="Alpha", actor="Bob"),
            make_entry(project="Beta", actor="Alice"),
        ]

        assert actors_by_project(entries) == {"Alpha": ["Bob", "Alice"], "Beta": ["Alice"]}

    def test_missing_author_is_unknown(self, make_entry):
        entries = [make_entry(project="Alpha", actor=None, assignee="Carol")]

        assert actors_by_project(entries) == {"Alpha": ["Unknown User"]}

    def test_empty(self):
        assert actors_by_project([]) == {}


class TestCountDistinctAuthors:
    """Test count_distinct_authors"""

    def test_entries_without_author_are_not_people(self, make_entry):
        entries = [
            make_entry(actor="Alice"),
            make_entry(actor="Alice", day="2024-01-03"),
            make_entry(actor=None, assignee="Carol"),
        ]

        assert count_distinct_authors(entries) == 1

    def test_empty(self):
        assert count_distinct_authors([]) == 0


class TestDetectDailyVariance:
    """Test overtime/undertime detection"""

    def test_overtime_scenario(self, make_entry):
        entries = [
            make_entry(day="2024-01-02", actor="Alice", hours=9),
            make_entry(day="2024-01-02", actor="Alice", hours=0.5),
        ]

        overtime, undertime = detect_daily_variance(entries, threshold=8)

        assert len(overtime) == 1
        assert overtime[0].resource == "Alice"
        assert overtime[0].date == "2024-01-02"
        assert overtime[0].overtime_hours == pytest.approx(1.5)
        assert overtime[0].total_hours == pytest.approx(9.5)
        assert undertime == []

    def test_exact_threshold_is_neither(self, make_entry):
        entries = [make_entry(hours=5), make_entry(hours=3)]

        assert detect_daily_variance(entries, threshold=8) == ([], [])

    def test_undertime(self, make_entry):
        overtime, undertime = detect_daily_variance([make_entry(actor="Bob", hours=6)])

        assert overtime == []
        assert undertime[0].resource == "Bob"
        assert undertime[0].undertime_hours == pytest.approx(2.0)

    def test_threshold_is_a_parameter(self, make_entry):
        overtime, undertime = detect_daily_variance([make_entry(hours=7)], threshold=6)

        assert len(overtime) == 1
        assert undertime == []

    def test_each_group_lands_once(self, make_entry):
        entries = [
            make_entry(day=f"2024-01-{day:02d}", actor=actor, hours=hours)
            for day in range(1, 8)
            for actor, hours in (("Alice", day * 1.5), ("Bob", 8.0), ("Carol", 10 - day))
        ]

        overtime, undertime = detect_daily_variance(entries)
        over_keys = {(r.date, r.resource) for r in overtime}
        under_keys = {(r.date, r.resource) for r in undertime}

        assert not over_keys & under_keys
        assert len(over_keys) == len(overtime)
        assert len(under_keys) == len(undertime)
        assert all(r.resource != "Bob" for r in overtime + undertime)

    def test_groups_by_day_and_actor(self, make_entry):
        entries = [
            make_entry(day="2024-01-02", actor="Alice", hours=5),
            make_entry(day="2024-01-03", actor="Alice", hours=5),
            make_entry(day="2024-01-02", actor="Bob", hours=5),
        ]

        overtime, undertime = detect_daily_variance(entries)

        assert overtime == []
        assert len(undertime) == 3

    def test_empty(self):
        assert detect_daily_variance([]) == ([], [])


class TestResourceUtilization:
    """Test resource_utilization"""

    def test_week(self, make_entry):
        week = DateRange(date(2024, 1, 1), date(2024, 1, 5))
        entries = [
            make_entry(day="2024-01-02", actor="Alice", hours=12, project="Alpha"),
            make_entry(day="2024-01-04", actor="Alice", hours=8, project="Beta"),
            make_entry(day="2024-01-03", actor="Bob", hours=50, project="Alpha"),
        ]

        records = {r.employee: r for r in resource_utilization(entries, week)}

        alice = records["Alice"]
        assert alice.total_hours == pytest.approx(20)
        assert alice.utilization_percent == 50
        assert alice.projects_worked == 2
        assert alice.avg_hours_per_day == pytest.approx(4.0)
        assert alice.last_active_date == "2024-01-04"

        assert records["Bob"].utilization_percent == 100

    def test_rounds_half_up(self, make_entry):
        one_day = DateRange(date(2024, 1, 2), date(2024, 1, 2))

        records = resource_utilization([make_entry(hours=1)], one_day)

        # 1 / 8 = 12.5%
        assert records[0].utilization_percent == 13

    def test_percent_in_bounds(self, make_entry):
        weekend = DateRange(date(2024, 1, 6), date(2024, 1, 7))
        entries = [make_entry(actor=f"User{i}", hours=i * 3) for i in range(0, 10)]

        for record in resource_utilization(entries, weekend):
            assert 0 <= record.utilization_percent <= 100

    def test_workday_hours_parameter(self, make_entry):
        one_day = DateRange(date(2024, 1, 2), date(2024, 1, 2))

        records = resource_utilization([make_entry(hours=3)], one_day, workday_hours=6)

        assert records[0].utilization_percent == 50

    def test_empty(self, january):
        assert resource_utilization([], january) == []

    def test_round_half_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(12.49) == 12
        assert round_half_up(0.5) == 1


class TestProjectPerformance:
    """Test project_performance"""

    def test_counts_and_classifiers(self, make_issue, make_entry):
        issues = [
            make_issue("ALP-1", status="Done", priority="High", issue_type="Bug",
                       created=utc(2024, 1, 1), updated=utc(2024, 1, 3, 12)),
            make_issue("ALP-2", status="In Progress", priority="Highest", issue_type="Story",
                       created=utc(2024, 1, 1), updated=utc(2024, 1, 2, 6)),
            make_issue("ALP-3", status="DONE (verified)", priority="Low", issue_type="Sub-task"),
            make_issue("ALP-4", status="Open", priority="Medium", issue_type="Epic"),
        ]
        entries = [
            make_entry(issue_key="ALP-1", project_id="ALP", actor="Alice", hours=3),
            make_entry(issue_key="ALP-3", project_id="ALP", actor="Bob", hours=2),
            make_entry(issue_key="ALP-3", project_id="ALP", actor="Alice", hours=1),
        ]

        perf = project_performance(issues, entries)[0]

        assert perf.project_id == "ALP"
        assert perf.total_issues == 4
        assert perf.completed_issues == 2
        assert perf.high_priority_issues == 2
        assert (perf.bug_count, perf.story_count, perf.task_count) == (1, 1, 1)
        assert perf.total_hours_spent == pytest.approx(6.0)
        assert perf.resource_count == 2
        assert perf.last_updated == "2024-01-03"

    def test_first_matching_bucket_wins(self, make_issue):
        perf = project_performance([make_issue(issue_type="Bug story task")], [])[0]

        assert (perf.bug_count, perf.story_count, perf.task_count) == (1, 0, 0)

    def test_incremental_mean_resolution(self, make_issue):
        issues = [
            # floor(2.5) = 2
            make_issue("ALP-1", created=utc(2024, 1, 1), updated=utc(2024, 1, 3, 12)),
            # floor(1.25) = 1
            make_issue("ALP-2", created=utc(2024, 1, 1), updated=utc(2024, 1, 2, 6)),
            # no dates -> 0
            make_issue("ALP-3"),
        ]

        perf = project_performance(issues, [])[0]

        assert perf.avg_resolution_days == pytest.approx(((2 * 1 + 1) / 2 * 2 + 0) / 3)

    def test_projects_in_first_seen_order(self, make_issue):
        issues = [
            make_issue("BET-1", project_key="BET", project_name="Beta"),
            make_issue("ALP-1", project_key="ALP", project_name="Alpha"),
            make_issue("BET-2", project_key="BET", project_name="Beta"),
        ]

        records = project_performance(issues, [])

        assert [r.project_id for r in records] == ["BET", "ALP"]
        assert records[0].total_issues == 2
        assert records[0].total_hours_spent == 0.0
        assert records[0].resource_count == 0

    def test_efficiency_score(self, make_issue, make_entry):
        issues = [
            make_issue("ALP-1", status="Done", issue_type="Bug"),
            make_issue("ALP-2", status="Done", issue_type="Task"),
        ]
        entries = [make_entry(issue_key="ALP-1", hours=4)]

        perf = project_performance(issues, entries)[0]

        assert perf.efficiency_score == pytest.approx((2 / 4) * (1 - 1 / 2))

    def test_empty(self):
        assert project_performance([], []) == []


class TestExecutiveSummary:
    """Test executive_summary"""

    def test_roll_up(self, make_row, january):
        rows = [
            make_row(date="2024-01-02", project="Alpha", hours="9h", updated_by="Alice"),
            make_row(date="2024-01-02", project="Beta", hours="1h 30m", updated_by="Bob"),
            make_row(date="2024-01-03", project="Alpha", hours="2h", updated_by=None, assignee="Carol"),
        ]

        summary = executive_summary(rows, january)

        assert summary.total_hours == pytest.approx(12.5)
        assert summary.total_projects == 2
        assert summary.active_users == 3
        assert summary.avg_hours_per_project == pytest.approx(6.25)
        assert summary.most_productive_day == "2024-01-02"
        assert summary.overtime_instances == 1
        assert summary.efficiency is None
        assert summary.completion_rate is None

    def test_breakdowns_use_working_days(self, make_row, january):
        rows = [
            make_row(project="Alpha", hours="23h", updated_by="Alice"),
            make_row(project="Alpha", hours="23h", updated_by="Bob"),
        ]

        summary = executive_summary(rows, january)

        project = summary.project_breakdown[0]
        assert project.project == "Alpha"
        assert project.worklog_entries == 2
        assert project.team_members == 2
        assert project.avg_daily_hours == pytest.approx(46 / 23)

        alice = summary.resource_breakdown[0]
        assert alice.resource == "Alice"
        assert alice.projects_worked == 1
        assert alice.avg_daily_hours == pytest.approx(1.0)
        assert alice.utilization_percent == round_half_up(23 / (23 * 8) * 100)

    def test_tie_goes_to_first_day(self, make_row, january):
        rows = [
            make_row(date="2024-01-05", hours="4h"),
            make_row(date="2024-01-03", hours="4h"),
        ]

        assert executive_summary(rows, january).most_productive_day == "2024-01-05"

    def test_garbage_hours_count_as_zero(self, make_row, january):
        rows = [make_row(hours="n/a"), make_row(hours="2h")]

        assert executive_summary(rows, january).total_hours == pytest.approx(2.0)

    def test_empty(self, january):
        summary = executive_summary([], january)

        assert summary.total_hours == 0.0
        assert summary.total_projects == 0
        assert summary.most_productive_day is None
        assert summary.project_breakdown == []
