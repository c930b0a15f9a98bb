"""
CSV exporter
"""

import csv
import logging
from pathlib import Path
from typing import Dict

from .base_exporter import BaseExporter, report_tables

logger = logging.getLogger(__name__)


class CsvExporter(BaseExporter):
    """Write a report as CSV; multi-table reports become titled sections"""

    def export(self, result: Dict) -> Path:
        self._ensure_directory()
        tables = report_tables(result)
        sectioned = len(tables) > 1

        with open(self.output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)

            writer.writerow([self._generated_line(result)])
            writer.writerow([])

            for table in tables:
                if sectioned:
                    writer.writerow([table.title])
                writer.writerow(table.headers)
                writer.writerows(table.rows)
                if table.total_row:
                    writer.writerow(table.total_row)
                if sectioned:
                    writer.writerow([])

        logger.info(f"CSV report exported to {self.output_path}")
        return self.output_path
