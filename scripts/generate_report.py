#!/usr/bin/env python3
"""
CLI script for generating Jira worklog reports
"""

import sys
from pathlib import Path

# Allow running from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from worklog_dashboard.cli import main


if __name__ == "__main__":
    main()
