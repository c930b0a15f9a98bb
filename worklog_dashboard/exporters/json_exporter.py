"""
JSON exporter
"""

import json
import logging
from pathlib import Path
from typing import Dict

from .base_exporter import BaseExporter

logger = logging.getLogger(__name__)


class JsonExporter(BaseExporter):
    """Dump the assembled report as-is"""

    def export(self, result: Dict) -> Path:
        self._ensure_directory()
        with open(self.output_path, 'w', encoding='utf-8') as f:
            json.dump(result, f, indent=2)
        logger.info(f"JSON report exported to {self.output_path}")
        return self.output_path
