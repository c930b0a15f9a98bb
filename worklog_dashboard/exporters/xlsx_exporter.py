"""
XLSX exporter - one styled sheet per report table
"""

import logging
from pathlib import Path
from typing import Dict

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .base_exporter import BaseExporter, ReportTable, report_tables

logger = logging.getLogger(__name__)

MAX_SHEET_TITLE = 31
MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 60


class XlsxExporter(BaseExporter):
    """Write a report as an .xlsx workbook"""

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)
    total_fill = PatternFill(start_color="F0F2F6", end_color="F0F2F6", fill_type="solid")
    total_font = Font(bold=True)
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    def export(self, result: Dict) -> Path:
        self._ensure_directory()
        xlsx_path = self.output_path.with_suffix('.xlsx')

        wb = Workbook()
        wb.remove(wb.active)

        for table in report_tables(result):
            ws = wb.create_sheet(title=table.title[:MAX_SHEET_TITLE])
            self._write_table(ws, table)

        wb.save(xlsx_path)
        logger.info(f"XLSX report exported to {xlsx_path}")
        return xlsx_path

    def _write_table(self, ws, table: ReportTable):
        """Header row, data rows and optional bold total row"""
        center_align = Alignment(horizontal='center', vertical='center')

        for col_idx, header in enumerate(table.headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = center_align
            cell.border = self.border

        row_idx = 2
        for row in table.rows:
            for col_idx, value in enumerate(row, start=1):
                ws.cell(row=row_idx, column=col_idx, value=value).border = self.border
            row_idx += 1

        if table.total_row:
            for col_idx, value in enumerate(table.total_row, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.fill = self.total_fill
                cell.font = self.total_font
                cell.border = self.border

        ws.freeze_panes = 'A2'

        all_rows = [table.headers] + table.rows + ([table.total_row] if table.total_row else [])
        for col_idx in range(1, len(table.headers) + 1):
            longest = max(len(str(row[col_idx - 1])) for row in all_rows if len(row) >= col_idx)
            width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col_idx)].width = width
