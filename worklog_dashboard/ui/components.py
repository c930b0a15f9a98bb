"""
Streamlit UI components
"""

import streamlit as st
import logging
from typing import Dict

from .formatters import tables_to_dataframes, summary_metrics

logger = logging.getLogger(__name__)


def show_config_error(error_msg: str):
    """Display configuration error with helpful instructions"""
    st.error(":warning: Missing Configuration")
    st.markdown("""
    Please set these environment variables:
    ```
    JIRA_URL=https://your-company.atlassian.net
    JIRA_USERNAME=your-email@company.com
    JIRA_API_TOKEN=your-api-token
    ```
    """)
    st.error(f"Error details: {error_msg}")
    st.stop()


def display_metrics(result: Dict):
    """Metric tiles for the report's headline numbers"""
    metrics = summary_metrics(result)
    columns = st.columns(len(metrics))
    for column, (label, value) in zip(columns, metrics):
        column.metric(label, value)


def display_report_tables(result: Dict):
    """Render every report table; several tables go into tabs"""
    frames = tables_to_dataframes(result)

    if len(frames) == 1:
        (title, df), = frames.items()
        st.subheader(title)
        if df.empty:
            st.info("No worklogs found for the selected filters")
        st.dataframe(df, use_container_width=True, hide_index=True)
        return

    tabs = st.tabs(list(frames.keys()))
    for tab, df in zip(tabs, frames.values()):
        with tab:
            st.dataframe(df, use_container_width=True, hide_index=True)
