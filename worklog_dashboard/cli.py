"""
Command-line entry point for generating worklog reports
"""

import sys
import logging
import argparse
from datetime import date
from pathlib import Path

from .config import Config
from .jira_client import JiraClientError
from .models import ALL_PROJECTS, ReportKind, ReportRequest
from .report_generator import ReportCatalog, generate_reports, export_report
from .utils import setup_logging

logger = logging.getLogger(__name__)

FORMAT_CHOICES = ['excel', 'csv', 'json']


def build_parser() -> argparse.ArgumentParser:
    today = date.today()

    parser = argparse.ArgumentParser(
        description="Generate Jira worklog reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Worklog rows for every project this month
  worklog-report --kind worklog-by-project

  # One user's worklog for January
  worklog-report --kind worklog-by-user --user "Alice Smith" --start 2024-01-01 --end 2024-01-31

  # Analytics and utilization side by side, as CSV
  worklog-report --kind analytics --kind resource-utilization --format csv
        """
    )

    parser.add_argument(
        '--kind',
        action='append',
        choices=[kind.value for kind in ReportKind],
        help='Report kind (repeatable; default: worklog-by-project)'
    )

    parser.add_argument(
        '--start',
        default=today.replace(day=1).isoformat(),
        help='First day, YYYY-MM-DD (default: first of the current month)'
    )

    parser.add_argument(
        '--end',
        default=today.isoformat(),
        help='Last day, YYYY-MM-DD (default: today)'
    )

    parser.add_argument(
        '--project',
        default=ALL_PROJECTS,
        help='Project key (default: ALL)'
    )

    parser.add_argument(
        '--user',
        help='User display name (required for worklog-by-user)'
    )

    parser.add_argument(
        '--format',
        choices=FORMAT_CHOICES,
        default='excel',
        help='Export format (default: excel)'
    )

    parser.add_argument(
        '--output',
        type=str,
        help='Output directory (default: reports/)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def main(argv=None):
    """Main entry point for CLI"""
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose)

    kinds = args.kind or [ReportKind.WORKLOG_BY_PROJECT.value]
    output_dir = Path(args.output or "reports")

    try:
        requests = [
            ReportRequest.from_params({
                'startDate': args.start,
                'endDate': args.end,
                'reportKind': kind,
                'project': args.project,
                'user': args.user
            })
            for kind in kinds
        ]

        config = Config.from_env()
        config.validate()

        results = generate_reports(config, requests)

        for request, result in zip(requests, results):
            filename = ReportCatalog.get_default_filename(request, args.format)
            export_report(result, output_dir / filename, args.format)

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except JiraClientError as e:
        logger.error(f"Jira error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
