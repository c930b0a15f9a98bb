"""
Worklog Dashboard - time tracking analytics for Jira worklogs
"""

__version__ = "1.0.0"
