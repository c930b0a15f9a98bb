import streamlit as st
from pathlib import Path

from .components import display_metrics, display_report_tables


def display_download_button(xlsx_path: str):
    """Offer the exported workbook for download"""
    if not xlsx_path or not Path(xlsx_path).exists():
        return

    with open(xlsx_path, 'rb') as f:
        xlsx_data = f.read()

    st.download_button(
        label=":inbox_tray: Download XLSX",
        data=xlsx_data,
        file_name=Path(xlsx_path).name,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        use_container_width=True,
        key="download_xlsx"
    )


def display_stored_report():
    """Display report from session state if available"""
    result = st.session_state.report_result
    if not result:
        return

    st.caption(f"{result['start_date']} to {result['end_date']}")
    display_metrics(result)
    display_download_button(st.session_state.xlsx_path)
    display_report_tables(result)
