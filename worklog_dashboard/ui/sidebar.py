import streamlit as st
from datetime import date
from typing import Optional, Tuple

from ..models import ALL_PROJECTS, ReportKind

REPORT_LABELS = {
    "Worklog by Project": ReportKind.WORKLOG_BY_PROJECT,
    "Worklog by User": ReportKind.WORKLOG_BY_USER,
    "Analytics": ReportKind.ANALYTICS,
    "Resource Utilization": ReportKind.RESOURCE_UTILIZATION,
    "Project Performance": ReportKind.PROJECT_PERFORMANCE,
    "Executive Summary": ReportKind.EXECUTIVE_SUMMARY,
}


def render_sidebar(projects=(), users=()) -> Tuple[ReportKind, date, date, str, Optional[str]]:
    """Render sidebar filters and return (kind, start, end, project, user)"""
    st.sidebar.header(":gear: Filters")

    label = st.sidebar.radio(
        "Report Type",
        options=list(REPORT_LABELS.keys()),
        index=0
    )

    today = date.today()
    start = st.sidebar.date_input("Start Date", value=today.replace(day=1))
    end = st.sidebar.date_input("End Date", value=today)

    project_options = [ALL_PROJECTS] + [p.id for p in projects]
    project_names = {p.id: f"{p.name} ({p.id})" for p in projects}
    project = st.sidebar.selectbox(
        "Project",
        options=project_options,
        format_func=lambda key: project_names.get(key, "All Projects")
    )

    user_options = ["All Resources"] + [u.name for u in users]
    user = st.sidebar.selectbox("User", options=user_options)

    return REPORT_LABELS[label], start, end, project, user
