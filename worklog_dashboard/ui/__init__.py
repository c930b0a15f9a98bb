"""
UI components for Streamlit interface
"""

from .components import (
    show_config_error,
    display_metrics,
    display_report_tables
)
from .formatters import (
    tables_to_dataframes,
    summary_metrics
)

__all__ = [
    'show_config_error',
    'display_metrics',
    'display_report_tables',
    'tables_to_dataframes',
    'summary_metrics'
]
