"""
Configuration management for the worklog dashboard
"""

import os
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Optional

from dotenv import load_dotenv

from .models import ReportKind
from .utils.date_utils import utc_offset

load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid {name}: {value!r} (expected a number)")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid {name}: {value!r} (expected an integer)")


@dataclass
class JiraConfig:
    """Jira connection configuration

    username + api_token are sent as Basic Auth credentials.
    """
    url: str
    username: str
    api_token: str
    api_version: str = "2"
    page_size: int = 100
    page_delay: float = 0.1  # seconds between search pages
    max_retries: int = 3  # retries on 429/5xx, with backoff
    timeout: float = 30.0
    max_workers: int = 4  # concurrent report requests

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Load configuration from environment variables"""
        url = os.getenv('JIRA_URL') or os.getenv('JIRA_BASE_URL')
        username = os.getenv('JIRA_USERNAME')
        api_token = os.getenv('JIRA_API_TOKEN') or os.getenv('JIRA_TOKEN')

        if not all([url, username, api_token]):
            raise ValueError(
                "Missing required environment variables. "
                "Please set JIRA_URL, JIRA_USERNAME, and JIRA_API_TOKEN"
            )

        return cls(
            url=url.rstrip('/'),
            username=username,
            api_token=api_token,
            api_version=os.getenv('JIRA_API_VERSION', '2'),
            page_size=_env_int('JIRA_PAGE_SIZE', 100),
            page_delay=_env_float('JIRA_PAGE_DELAY', 0.1),
            max_retries=_env_int('JIRA_MAX_RETRIES', 3),
            timeout=_env_float('JIRA_TIMEOUT', 30.0),
            max_workers=_env_int('JIRA_MAX_WORKERS', 4)
        )

    def validate(self) -> bool:
        """Validate configuration"""
        if not self.url.startswith(('http://', 'https://')):
            raise ValueError(f"Invalid JIRA_URL: {self.url}")

        if not self.username:
            raise ValueError(f"Invalid JIRA_USERNAME: {self.username}")

        if not self.api_token or len(self.api_token) < 10:
            raise ValueError("Invalid JIRA_API_TOKEN")

        if self.page_size < 1:
            raise ValueError(f"Invalid JIRA_PAGE_SIZE: {self.page_size}")

        if self.page_delay < 0:
            raise ValueError(f"Invalid JIRA_PAGE_DELAY: {self.page_delay}")

        return True


@dataclass
class ReportConfig:
    """Aggregation settings shared by every report"""
    workday_hours: float = 8.0
    utc_offset_hours: float = 5.5  # zone used for day keys and range boundaries
    overtime_cap: Optional[int] = None  # None keeps every overtime/undertime row

    @classmethod
    def from_env(cls) -> "ReportConfig":
        cap = _env_int('REPORT_OVERTIME_CAP', 0)
        return cls(
            workday_hours=_env_float('REPORT_WORKDAY_HOURS', 8.0),
            utc_offset_hours=_env_float('REPORT_UTC_OFFSET_HOURS', 5.5),
            overtime_cap=cap or None
        )

    @property
    def tz(self) -> tzinfo:
        return utc_offset(self.utc_offset_hours)

    def validate(self) -> bool:
        if self.workday_hours <= 0:
            raise ValueError(f"Invalid REPORT_WORKDAY_HOURS: {self.workday_hours}")
        if not -14 <= self.utc_offset_hours <= 14:
            raise ValueError(f"Invalid REPORT_UTC_OFFSET_HOURS: {self.utc_offset_hours}")
        return True


@dataclass
class ExportConfig:
    """Export format configuration"""
    format: str = "excel"  # csv, excel, json
    filename: Optional[str] = None

    FILENAME_PREFIXES = {
        ReportKind.WORKLOG_BY_PROJECT: "Worklog_Report",
        ReportKind.WORKLOG_BY_USER: "User_Report",
        ReportKind.ANALYTICS: "Analytics_Report",
        ReportKind.RESOURCE_UTILIZATION: "Resource_Utilization",
        ReportKind.PROJECT_PERFORMANCE: "Project_Performance_Report",
        ReportKind.EXECUTIVE_SUMMARY: "Executive_Summary",
    }

    def get_filename(self, kind: ReportKind, start: date, end: date) -> str:
        """Generate filename based on report kind, range and format"""
        if self.filename:
            return self.filename

        extensions = {
            'csv': 'csv',
            'json': 'json',
            'excel': 'xlsx'
        }

        ext = extensions.get(self.format, 'xlsx')
        prefix = self.FILENAME_PREFIXES[kind]
        return f"{prefix}_{start.isoformat()}_to_{end.isoformat()}.{ext}"


class Config:
    """Main configuration container"""

    def __init__(
        self,
        jira: Optional[JiraConfig] = None,
        report: Optional[ReportConfig] = None,
        export: Optional[ExportConfig] = None
    ):
        self.jira = jira or JiraConfig.from_env()
        self.report = report or ReportConfig()
        self.export = export or ExportConfig()

    @classmethod
    def from_env(cls) -> "Config":
        """Load all configuration from environment"""
        return cls(
            jira=JiraConfig.from_env(),
            report=ReportConfig.from_env(),
            export=ExportConfig()
        )

    def validate(self) -> bool:
        """Validate all configuration"""
        return self.jira.validate() and self.report.validate()
