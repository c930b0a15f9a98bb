#!/usr/bin/env python3
"""
Streamlit web UI for the worklog dashboard
"""

import streamlit as st
import sys
import logging
from pathlib import Path

# Add the project root to path
sys.path.insert(0, str(Path(__file__).parent))

from worklog_dashboard.config import Config
from worklog_dashboard.jira_client import JiraClient, JiraClientError
from worklog_dashboard.models import InvalidFilterError, ReportRequest
from worklog_dashboard.report_generator import ReportCatalog, generate_report, export_report
from worklog_dashboard.ui import show_config_error
from worklog_dashboard.ui.sidebar import render_sidebar
from worklog_dashboard.ui.report_view import display_stored_report
from worklog_dashboard.ui.state_manager import initialize_session_state
from worklog_dashboard.utils import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


# ============================================================================
# Report Generation Logic
# ============================================================================

def handle_report_generation(config: Config, client: JiraClient, params: dict):
    """Validate filters, run the report and keep it in session state"""
    try:
        request = ReportRequest.from_params(params)
    except InvalidFilterError as e:
        st.error(f":x: {e}")
        return

    with st.spinner(f"Generating {request.kind.value} report..."):
        try:
            result = generate_report(config, request, client=client)

            Path("reports").mkdir(exist_ok=True)
            filename = ReportCatalog.get_default_filename(request, "excel")
            xlsx_path = export_report(result, Path("reports") / filename, "excel")

            st.session_state.report_result = result
            st.session_state.report_kind = request.kind
            st.session_state.xlsx_path = str(xlsx_path)

        except JiraClientError as e:
            st.error(f":x: Error fetching worklogs: {e}")
            logger.exception("Report generation failed")


# ============================================================================
# Configuration
# ============================================================================

def load_and_validate_config():
    """Load and validate configuration"""
    try:
        config = Config.from_env()
        config.validate()
        return config

    except ValueError as e:
        show_config_error(str(e))
        return None


def load_directory(client: JiraClient):
    """Projects and users for the sidebar pickers, fetched once per session"""
    if st.session_state.directory is None:
        try:
            st.session_state.directory = (client.get_projects_with_worklogs(), client.get_users())
        except JiraClientError as e:
            st.warning(f":warning: Could not load projects/users: {e}")
            return (), ()
    return st.session_state.directory


# ============================================================================
# Main Application
# ============================================================================

def main():
    """Main application entry point"""
    st.set_page_config(
        page_title="Worklog Dashboard",
        page_icon=":bar_chart:",
        layout="wide"
    )

    st.title(":bar_chart: Worklog Dashboard")
    st.markdown("Worklog reports and analytics from Jira")

    initialize_session_state()

    config = load_and_validate_config()
    if not config:
        return

    client = JiraClient(config.jira)
    projects, users = load_directory(client)

    kind, start, end, project, user = render_sidebar(projects, users)

    st.info(f":link: Connected: {config.jira.url}")
    st.markdown("---")

    if st.button(":rocket: Generate Report", type="primary", use_container_width=True):
        handle_report_generation(config, client, {
            'startDate': start.isoformat(),
            'endDate': end.isoformat(),
            'reportKind': kind.value,
            'project': project,
            'user': user
        })

    # Display report if it exists and matches current selection
    if st.session_state.report_kind == kind:
        display_stored_report()

    st.markdown("---")
    st.markdown("""
    <div style='text-align: center; color: #666; font-size: 0.9em;'>
        Built using Streamlit | Worklog Dashboard v1.0.0
    </div>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
