"""
Data formatting utilities for UI display
"""

from collections import OrderedDict
from typing import Dict, List, Tuple

import pandas as pd

from ..exporters import report_tables
from ..models import ReportKind


def tables_to_dataframes(result: Dict) -> "OrderedDict[str, pd.DataFrame]":
    """One DataFrame per report table, keyed by table title

    A total row, when the table has one, is appended as the last row.
    """
    frames = OrderedDict()
    for table in report_tables(result):
        rows = list(table.rows)
        if table.total_row:
            rows.append(table.total_row)
        frames[table.title] = pd.DataFrame(rows, columns=table.headers)
    return frames


def summary_metrics(result: Dict) -> List[Tuple[str, object]]:
    """Headline numbers for the metric tiles above the tables"""
    kind = ReportKind.parse(result['kind'])
    data = result.get('data')

    if kind in (ReportKind.WORKLOG_BY_PROJECT, ReportKind.WORKLOG_BY_USER):
        df = pd.DataFrame(data or [])
        if df.empty:
            return [("Entries", 0), ("Projects", 0), ("People", 0)]
        return [
            ("Entries", len(df)),
            ("Projects", df['projectName'].nunique()),
            ("People", df['updatedBy'].nunique()),
        ]

    if kind == ReportKind.ANALYTICS:
        data = data or {}
        return [
            ("Total Hours", data.get('totalHours', 0)),
            ("Projects", data.get('totalProjects', 0)),
            ("People", data.get('totalUsers', 0)),
        ]

    if kind == ReportKind.RESOURCE_UTILIZATION:
        df = pd.DataFrame(data or [])
        if df.empty:
            return [("People", 0), ("Total Hours", 0.0), ("Avg Utilization", "0%")]
        return [
            ("People", len(df)),
            ("Total Hours", round(float(df['totalHours'].sum()), 2)),
            ("Avg Utilization", f"{round(float(df['utilizationRate'].mean()))}%"),
        ]

    if kind == ReportKind.PROJECT_PERFORMANCE:
        df = pd.DataFrame(data or [])
        if df.empty:
            return [("Projects", 0), ("Issues", 0), ("Total Hours", 0.0)]
        return [
            ("Projects", len(df)),
            ("Issues", int(df['totalIssues'].sum())),
            ("Total Hours", round(float(df['totalHoursSpent'].sum()), 2)),
        ]

    data = data or {}
    return [
        ("Projects", data.get('totalProjects', 0)),
        ("Active Users", data.get('activeUsers', 0)),
        ("Total Hours", data.get('totalHours', 0)),
        ("Most Productive Day", data.get('mostProductiveDay') or "N/A"),
    ]
