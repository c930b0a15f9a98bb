import streamlit as st


def initialize_session_state():
    """Initialize session state variables"""
    if 'report_result' not in st.session_state:
        st.session_state.report_result = None
    if 'report_kind' not in st.session_state:
        st.session_state.report_kind = None
    if 'xlsx_path' not in st.session_state:
        st.session_state.xlsx_path = None
    if 'directory' not in st.session_state:
        st.session_state.directory = None
