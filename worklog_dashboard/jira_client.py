"""
Jira API client for fetching issues with their worklogs
"""

import logging
import threading
import time
from typing import List, Dict, Optional, Sequence
from datetime import datetime

import requests
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from urllib3.util.retry import Retry

from .config import JiraConfig
from .models import (
    ALL_PROJECTS, UNASSIGNED, DateRange, Issue, Worklog, ProjectInfo, UserInfo
)
from .utils.date_utils import parse_jira_datetime, format_date_for_jql

logger = logging.getLogger(__name__)

WORKLOG_FIELDS = ('worklog', 'summary', 'assignee', 'project', 'key')
PERFORMANCE_FIELDS = WORKLOG_FIELDS + ('status', 'created', 'updated', 'priority', 'issuetype')

# Display-name fragments of integration and bot accounts
SYSTEM_USERS = (
    'atlassian', 'slack', 'trello', 'assistant', 'bot', 'jira', 'automation',
    'system', 'addon', 'integration', 'admin', 'administrator'
)


class JiraClientError(Exception):
    """Base exception for Jira client errors"""
    pass


class UpstreamFetchError(JiraClientError):
    """Jira returned a non-success response (or could not be reached)"""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        prefix = f"JIRA API error: {status}" if status else "JIRA API error"
        super().__init__(f"{prefix} - {message}")


class JiraAuthenticationError(UpstreamFetchError):
    """Authentication failed"""
    pass


class FetchCancelledError(JiraClientError):
    """The caller cancelled the fetch before it completed"""
    pass


def _date_window(date_range: DateRange) -> str:
    start = format_date_for_jql(date_range.start)
    end = format_date_for_jql(date_range.end)
    return f'worklogDate >= "{start}" AND worklogDate <= "{end}"'


def project_scope_jql(date_range: DateRange, project: str = ALL_PROJECTS) -> str:
    """Issues with worklogs in the window, optionally limited to one project"""
    if not project or project == ALL_PROJECTS:
        return _date_window(date_range)
    return f'project = "{project}" AND {_date_window(date_range)}'


def user_scope_jql(date_range: DateRange) -> str:
    """Issues with any logged time in the window (narrowed to a user client-side)"""
    return f'timespent > 0 AND {_date_window(date_range)}'


def unscoped_jql() -> str:
    """Every issue that has logged time"""
    return 'timespent > 0'


def is_system_user(name: Optional[str]) -> bool:
    lowered = (name or '').lower()
    return any(fragment in lowered for fragment in SYSTEM_USERS)


def comment_to_text(comment) -> Optional[str]:
    """Flatten a worklog comment (plain string or Atlassian Document Format)"""
    if comment is None:
        return None
    if isinstance(comment, str):
        return comment

    texts = []

    def walk(node):
        if isinstance(node, dict):
            if node.get('type') == 'text' and isinstance(node.get('text'), str):
                texts.append(node['text'])
            for child in node.get('content') or []:
                walk(child)
        elif isinstance(node, list):
            for child in node:
                walk(child)

    walk(comment)
    text = ' '.join(t.strip() for t in texts if t and t.strip())
    return text or None


class JiraClient:
    """Client for the Jira search API

    Holds no state between calls; every fetch starts from scratch.
    """

    def __init__(self, config: JiraConfig):
        self.config = config
        self.session = requests.Session()
        self.session.auth = HTTPBasicAuth(config.username, config.api_token)
        self.session.headers.update({'Accept': 'application/json'})
        self.base_url = f"{config.url}/rest/api/{config.api_version}"

        retry_strategy = Retry(
            total=config.max_retries,
            backoff_factor=0.5,
            status_forcelist=[429, 502, 503, 504],
            allowed_methods=["GET"],
            respect_retry_after_header=True,
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def _make_request(self, endpoint: str, params: Optional[Dict] = None):
        """GET an API endpoint and decode its JSON body"""
        url = f"{self.base_url}/{endpoint}"

        try:
            logger.debug(f"Making GET request to {url}")
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code
            reason = e.response.reason or str(e)
            if status == 401:
                raise JiraAuthenticationError(status, "Authentication failed. Check your credentials.")
            elif status == 403:
                raise JiraAuthenticationError(status, "Access forbidden. Check your permissions.")
            raise UpstreamFetchError(status, reason)

        except requests.exceptions.JSONDecodeError as e:
            # also a RequestException, so it must be caught first
            raise UpstreamFetchError(None, f"Invalid JSON in response: {e}")

        except requests.exceptions.RequestException as e:
            raise UpstreamFetchError(None, f"Network error: {e}")

    def search_issues(
        self,
        jql: str,
        fields: Sequence[str] = WORKLOG_FIELDS,
        expand: Optional[str] = "worklog",
        cancel_event: Optional[threading.Event] = None
    ) -> List[Dict]:
        """Fetch every issue matching a JQL predicate, page by page

        Stops once the fetched count reaches the reported total or a page
        comes back empty. Without a total, a page shorter than the page
        size is the last one. Any failure aborts the whole fetch.
        """
        params = {
            'jql': jql,
            'fields': ','.join(fields),
            'maxResults': self.config.page_size
        }
        if expand:
            params['expand'] = expand

        issues = []
        start_at = 0

        logger.info(f"Searching issues: {jql}")

        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise FetchCancelledError(f"Fetch cancelled after {len(issues)} issues")

            params['startAt'] = start_at
            response = self._make_request("search", params)

            batch = response.get('issues') or []
            issues.extend(batch)

            # total may be absent; then a short page marks the end
            total = response.get('total')
            logger.debug(f"Fetched {len(issues)}/{total if total is not None else '?'} issues")

            if not batch:
                break
            if total is not None:
                if len(issues) >= total:
                    break
            elif len(batch) < self.config.page_size:
                break

            start_at += len(batch)
            self._pause(cancel_event)

        logger.info(f"Fetched {len(issues)} issues")
        return issues

    def _pause(self, cancel_event: Optional[threading.Event]):
        """Courtesy delay between pages; wakes early if cancelled"""
        delay = self.config.page_delay
        if delay <= 0:
            return
        if cancel_event is not None:
            cancel_event.wait(delay)
        else:
            time.sleep(delay)

    def parse_issue(self, issue_data: Dict) -> Issue:
        """Parse raw issue data into an Issue model"""
        fields = issue_data.get('fields') or {}
        issue_key = issue_data.get('key') or "No issue ID"

        project = fields.get('project') or {}
        assignee = fields.get('assignee') or {}

        worklogs = []
        worklog_list = (fields.get('worklog') or {}).get('worklogs') or []

        for wl in worklog_list:
            started = wl.get('started')
            try:
                started_at = parse_jira_datetime(started)
            except (AttributeError, TypeError, ValueError):
                logger.warning(f"{issue_key}: skipping worklog {wl.get('id')} with invalid start {started!r}")
                continue

            author = wl.get('updateAuthor') or wl.get('author') or {}

            try:
                seconds = max(int(wl.get('timeSpentSeconds') or 0), 0)
            except (TypeError, ValueError):
                seconds = 0

            worklogs.append(Worklog(
                id=str(wl.get('id', '')),
                started=started_at,
                time_spent_seconds=seconds,
                update_author=author.get('displayName'),
                update_author_email=author.get('emailAddress'),
                comment=comment_to_text(wl.get('comment'))
            ))

        return Issue(
            key=issue_key,
            summary=fields.get('summary') or "No title available",
            project_key=project.get('key') or "No project ID",
            project_name=project.get('name') or "No project name",
            assignee=assignee.get('displayName') or UNASSIGNED,
            assignee_email=assignee.get('emailAddress'),
            status=(fields.get('status') or {}).get('name', ''),
            priority=(fields.get('priority') or {}).get('name', ''),
            issue_type=(fields.get('issuetype') or {}).get('name', ''),
            created=self._parse_optional_datetime(fields.get('created')),
            updated=self._parse_optional_datetime(fields.get('updated')),
            worklogs=worklogs
        )

    def _parse_optional_datetime(self, value) -> Optional[datetime]:
        if not value:
            return None
        try:
            return parse_jira_datetime(value)
        except (TypeError, ValueError):
            return None

    def fetch_issues(
        self,
        jql: str,
        fields: Sequence[str] = WORKLOG_FIELDS,
        cancel_event: Optional[threading.Event] = None
    ) -> List[Issue]:
        """Search and parse in one step"""
        raw_issues = self.search_issues(jql, fields=fields, cancel_event=cancel_event)
        return [self.parse_issue(raw) for raw in raw_issues]

    def get_projects_with_worklogs(self) -> List[ProjectInfo]:
        """Distinct projects that have any logged time"""
        raw_issues = self.search_issues(unscoped_jql(), fields=('project',), expand=None)

        projects = {}
        for raw in raw_issues:
            project = (raw.get('fields') or {}).get('project')
            if project and project.get('key') and project['key'] not in projects:
                projects[project['key']] = ProjectInfo(id=project['key'], name=project.get('name', project['key']))

        logger.info(f"Found {len(projects)} projects with worklogs")
        return list(projects.values())

    def get_users(self) -> List[UserInfo]:
        """Active human users, falling back to worklog authors of the past year"""
        users = []
        start_at = 0
        page_size = self.config.page_size

        while True:
            page = self._make_request(
                "user/search",
                params={'query': '', 'startAt': start_at, 'maxResults': page_size}
            ) or []

            for user in page:
                if user.get('active') is False or is_system_user(user.get('displayName')):
                    continue
                users.append(UserInfo(
                    name=user.get('displayName', ''),
                    account_id=user.get('accountId'),
                    email=user.get('emailAddress') or ''
                ))

            if len(page) < page_size:
                break

            start_at += page_size
            self._pause(None)

        if users:
            logger.info(f"Found {len(users)} active users")
            return users

        logger.info("User search returned nobody, falling back to worklog authors")
        raw_issues = self.search_issues('worklogDate >= -365d', fields=('worklog',))
        return self._authors_of(raw_issues, skip_system=True)

    def get_users_by_project(self, date_range: DateRange, project: str = ALL_PROJECTS) -> List[UserInfo]:
        """Distinct worklog authors on a project within the range"""
        raw_issues = self.search_issues(project_scope_jql(date_range, project), fields=('worklog',))
        return self._authors_of(raw_issues, date_range=date_range)

    def _authors_of(
        self,
        raw_issues: List[Dict],
        date_range: Optional[DateRange] = None,
        skip_system: bool = False
    ) -> List[UserInfo]:
        authors = {}

        for raw in raw_issues:
            worklogs = ((raw.get('fields') or {}).get('worklog') or {}).get('worklogs') or []
            for wl in worklogs:
                author = wl.get('updateAuthor')
                if not author or not author.get('displayName'):
                    continue
                if skip_system and is_system_user(author['displayName']):
                    continue
                if date_range is not None:
                    try:
                        if not date_range.contains(parse_jira_datetime(wl.get('started'))):
                            continue
                    except (AttributeError, TypeError, ValueError):
                        continue
                key = author.get('accountId') or author['displayName']
                authors[key] = UserInfo(name=author['displayName'], account_id=author.get('accountId'))

        return list(authors.values())

    def test_connection(self) -> bool:
        """Test connection to Jira"""
        try:
            self._make_request("myself")
            logger.info("Successfully connected to Jira")
            return True
        except JiraClientError as e:
            logger.error(f"Connection test failed: {e}")
            return False
