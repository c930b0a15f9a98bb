"""
Report exporters for different formats
"""

from .base_exporter import BaseExporter, ReportTable, report_tables
from .csv_exporter import CsvExporter
from .xlsx_exporter import XlsxExporter
from .json_exporter import JsonExporter

__all__ = [
    'BaseExporter',
    'ReportTable',
    'report_tables',
    'CsvExporter',
    'XlsxExporter',
    'JsonExporter'
]
