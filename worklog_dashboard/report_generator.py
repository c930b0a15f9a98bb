"""
Report generation pipeline: fetch -> flatten -> aggregate -> assemble
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .config import Config, ExportConfig
from .jira_client import (
    JiraClient, WORKLOG_FIELDS, PERFORMANCE_FIELDS,
    project_scope_jql, user_scope_jql
)
from .models import ALL_PROJECTS, DateRange, Issue, ReportKind, ReportRequest, WorklogEntry
from .processors import WorklogProcessor, analytics_actor, resolve_actor
from .processors import aggregators, report_assembler
from .exporters import CsvExporter, JsonExporter, XlsxExporter
from .utils import normalize_range, PhaseTimer

logger = logging.getLogger(__name__)


@dataclass
class ReportContext:
    """Request-scoped working set handed to a report builder"""
    config: Config
    request: ReportRequest
    date_range: DateRange
    processor: WorklogProcessor
    issues: List[Issue]
    entries: List[WorklogEntry]

    @property
    def workday_hours(self) -> float:
        return self.config.report.workday_hours


def _project_query(request: ReportRequest, date_range: DateRange) -> str:
    return project_scope_jql(date_range, request.project_scope)


def _user_query(request: ReportRequest, date_range: DateRange) -> str:
    if request.project_scope and request.project_scope != ALL_PROJECTS:
        return project_scope_jql(date_range, request.project_scope)
    return user_scope_jql(date_range)


def _scoped_entries(ctx: ReportContext, actor=resolve_actor) -> List[WorklogEntry]:
    return ctx.processor.filter_by_user(ctx.entries, ctx.request.user_scope, actor)


def build_worklog_by_project(ctx: ReportContext) -> List[Dict]:
    rows = ctx.processor.build_worklog_rows(_scoped_entries(ctx))
    return report_assembler.assemble_worklog_rows(rows)


def build_worklog_by_user(ctx: ReportContext) -> List[Dict]:
    rows = ctx.processor.build_worklog_rows(_scoped_entries(ctx), by_user=True)
    return report_assembler.assemble_worklog_rows(rows)


def build_analytics(ctx: ReportContext) -> Dict:
    entries = _scoped_entries(ctx, analytics_actor)
    overtime, undertime = aggregators.detect_daily_variance(
        entries, threshold=ctx.workday_hours, actor=analytics_actor
    )
    report = report_assembler.assemble_analytics(
        project_totals=aggregators.total_hours_by_project(entries),
        project_actors=aggregators.actors_by_project(entries, analytics_actor),
        overtime=overtime,
        undertime=undertime,
        total_users=aggregators.count_distinct_authors(entries),
        overtime_cap=ctx.config.report.overtime_cap
    )
    return report_assembler.analytics_to_dict(report)


def build_resource_utilization(ctx: ReportContext) -> List[Dict]:
    records = aggregators.resource_utilization(
        _scoped_entries(ctx), ctx.date_range, workday_hours=ctx.workday_hours
    )
    return report_assembler.assemble_utilization(records)


def build_project_performance(ctx: ReportContext) -> List[Dict]:
    records = aggregators.project_performance(ctx.issues, ctx.entries)
    return report_assembler.assemble_performance(records)


def build_executive_summary(ctx: ReportContext) -> Dict:
    rows = ctx.processor.build_worklog_rows(_scoped_entries(ctx))
    summary = aggregators.executive_summary(
        rows, ctx.date_range, threshold=ctx.workday_hours, workday_hours=ctx.workday_hours
    )
    return report_assembler.assemble_executive(summary)


class ReportCatalog:
    """Per-kind query shape, field selection and builder"""

    QUERY_MAP = {
        ReportKind.WORKLOG_BY_PROJECT: _project_query,
        ReportKind.WORKLOG_BY_USER: _user_query,
        ReportKind.ANALYTICS: _project_query,
        ReportKind.RESOURCE_UTILIZATION: _project_query,
        ReportKind.PROJECT_PERFORMANCE: _project_query,
        ReportKind.EXECUTIVE_SUMMARY: _project_query,
    }

    FIELDS_MAP = {
        ReportKind.PROJECT_PERFORMANCE: PERFORMANCE_FIELDS,
    }

    BUILDER_MAP = {
        ReportKind.WORKLOG_BY_PROJECT: build_worklog_by_project,
        ReportKind.WORKLOG_BY_USER: build_worklog_by_user,
        ReportKind.ANALYTICS: build_analytics,
        ReportKind.RESOURCE_UTILIZATION: build_resource_utilization,
        ReportKind.PROJECT_PERFORMANCE: build_project_performance,
        ReportKind.EXECUTIVE_SUMMARY: build_executive_summary,
    }

    EXPORTER_MAP = {
        'csv': CsvExporter,
        'excel': XlsxExporter,
        'xlsx': XlsxExporter,
        'json': JsonExporter,
    }

    @classmethod
    def get_query(cls, request: ReportRequest, date_range: DateRange) -> str:
        return cls.QUERY_MAP[request.kind](request, date_range)

    @classmethod
    def get_fields(cls, kind: ReportKind) -> Sequence[str]:
        return cls.FIELDS_MAP.get(kind, WORKLOG_FIELDS)

    @classmethod
    def get_builder(cls, kind: ReportKind) -> Callable[[ReportContext], object]:
        return cls.BUILDER_MAP[kind]

    @classmethod
    def get_exporter_class(cls, fmt: str):
        try:
            return cls.EXPORTER_MAP[fmt.lower()]
        except KeyError:
            raise ValueError(f"Unsupported export format: {fmt}")

    @classmethod
    def get_default_filename(cls, request: ReportRequest, fmt: str = "excel") -> str:
        return ExportConfig(format=fmt).get_filename(request.kind, request.start_date, request.end_date)


def generate_report(
    config: Config,
    request: ReportRequest,
    client: Optional[JiraClient] = None,
    cancel_event: Optional[threading.Event] = None
) -> Dict:
    """Run one report request to completion

    Returns {"kind", "start_date", "end_date", "data"} where data is the
    assembled record list (or mapping for analytics / executive summary).
    Fetch errors propagate; nothing partial is returned.
    """
    kind = request.kind
    date_range = normalize_range(request.start_date, request.end_date, config.report.tz)
    client = client or JiraClient(config.jira)
    processor = WorklogProcessor()

    logger.info(
        f"Generating {kind.value} report for {date_range.start}..{date_range.end} "
        f"(project={request.project_scope}, user={request.user_scope or 'ALL'})"
    )
    timer = PhaseTimer()

    jql = ReportCatalog.get_query(request, date_range)
    issues = client.fetch_issues(jql, fields=ReportCatalog.get_fields(kind), cancel_event=cancel_event)
    timer.mark("fetch")

    entries = processor.flatten_issues(issues, date_range)
    timer.mark("flatten")
    if not entries:
        logger.warning("No worklogs found for the specified period")

    context = ReportContext(
        config=config,
        request=request,
        date_range=date_range,
        processor=processor,
        issues=issues,
        entries=entries
    )
    data = ReportCatalog.get_builder(kind)(context)

    timer.mark("build")
    logger.info(f"Performance: {timer.summary()}")

    return {
        'kind': kind.value,
        'start_date': date_range.start.isoformat(),
        'end_date': date_range.end.isoformat(),
        'data': data
    }


def generate_reports(
    config: Config,
    requests: Sequence[ReportRequest],
    max_workers: Optional[int] = None,
    client_factory: Optional[Callable[[], JiraClient]] = None,
    cancel_event: Optional[threading.Event] = None
) -> List[Dict]:
    """Run independent report requests concurrently

    Each request gets its own client and working set. Results come back in
    request order; if any request failed, the first failure is re-raised
    once every request has settled.
    """
    if max_workers is None:
        max_workers = config.jira.max_workers
    if client_factory is None:
        client_factory = lambda: JiraClient(config.jira)  # noqa: E731

    results: List[Optional[Dict]] = [None] * len(requests)
    errors = []

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_to_index = {
            executor.submit(generate_report, config, request, client_factory(), cancel_event): idx
            for idx, request in enumerate(requests)
        }

        for future in as_completed(future_to_index):
            idx = future_to_index[future]
            try:
                results[idx] = future.result()
                logger.info(f"Progress: {requests[idx].kind.value} completed")
            except Exception as e:
                logger.error(f"Report {requests[idx].kind.value} failed: {e}")
                errors.append((idx, e))

    if errors:
        errors.sort(key=lambda item: item[0])
        raise errors[0][1]

    return results


def export_report(result: Dict, output_path, fmt: str = "excel") -> Path:
    """Write an assembled report with the exporter for fmt"""
    exporter_class = ReportCatalog.get_exporter_class(fmt)
    exporter = exporter_class(Path(output_path))
    path = exporter.export(result)
    logger.info(f"Report exported: {path}")
    return path
