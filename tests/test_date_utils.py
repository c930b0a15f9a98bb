"""
Tests for date range utilities
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from worklog_dashboard.models import DateRange, InvalidFilterError
from worklog_dashboard.utils.date_utils import (
    utc_offset, parse_day, normalize_range, day_key,
    count_working_days, parse_jira_datetime, format_date_for_jql
)

COLOMBO = utc_offset(5.5)


class TestParseDay:
    """Test parse_day"""

    def test_valid_day(self):
        assert parse_day("2024-01-02") == date(2024, 1, 2)

    def test_date_passthrough(self):
        assert parse_day(date(2024, 1, 2)) == date(2024, 1, 2)

    @pytest.mark.parametrize("value", ["2024-13-01", "01/02/2024", "", "yesterday"])
    def test_invalid_day(self, value):
        with pytest.raises(InvalidFilterError):
            parse_day(value)


class TestNormalizeRange:
    """Test normalize_range and DateRange boundaries"""

    def test_end_is_last_millisecond(self):
        date_range = normalize_range("2024-01-01", "2024-01-31", COLOMBO)

        assert date_range.start_instant == datetime(2024, 1, 1, tzinfo=COLOMBO)
        assert date_range.end_instant == datetime(2024, 1, 31, 23, 59, 59, 999000, tzinfo=COLOMBO)

    def test_boundaries_are_inclusive(self):
        date_range = normalize_range("2024-01-01", "2024-01-31", timezone.utc)

        assert date_range.contains(datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc))
        assert date_range.contains(datetime(2024, 1, 31, 23, 59, 59, 999000, tzinfo=timezone.utc))
        assert not date_range.contains(datetime(2024, 2, 1, 0, 0, tzinfo=timezone.utc))
        assert not date_range.contains(datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc))

    def test_boundaries_follow_the_zone(self):
        date_range = normalize_range("2024-01-01", "2024-01-31", COLOMBO)

        # 18:30 UTC on the 31st is already Feb 1 in UTC+05:30
        assert not date_range.contains(datetime(2024, 1, 31, 18, 30, tzinfo=timezone.utc))
        assert date_range.contains(datetime(2023, 12, 31, 18, 30, tzinfo=timezone.utc))

    def test_start_after_end(self):
        with pytest.raises(InvalidFilterError):
            normalize_range("2024-02-01", "2024-01-01")


class TestDayKey:
    """Test day_key"""

    def test_utc(self):
        assert day_key(datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)) == "2024-01-01"

    def test_offset_crosses_midnight(self):
        assert day_key(datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc), COLOMBO) == "2024-01-02"

    def test_naive_is_treated_as_utc(self):
        assert day_key(datetime(2024, 1, 1, 20, 0), COLOMBO) == "2024-01-02"


class TestCountWorkingDays:
    """Test count_working_days"""

    def test_full_week(self):
        assert count_working_days(DateRange(date(2024, 1, 1), date(2024, 1, 7))) == 5

    def test_month(self):
        assert count_working_days(DateRange(date(2024, 1, 1), date(2024, 1, 31))) == 23

    def test_weekend_only_is_one(self):
        assert count_working_days(DateRange(date(2024, 1, 6), date(2024, 1, 7))) == 1

    def test_never_below_one(self):
        start = date(2024, 1, 1)
        for offset in range(14):
            day = start + timedelta(days=offset)
            assert count_working_days(DateRange(day, day)) >= 1


class TestParseJiraDatetime:
    """Test parse_jira_datetime"""

    def test_offset_without_colon(self):
        parsed = parse_jira_datetime("2024-01-02T09:00:00.000+0000")
        assert parsed == datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)

    def test_positive_offset(self):
        parsed = parse_jira_datetime("2024-01-02T09:00:00.000+0530")
        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)

    def test_zulu(self):
        assert parse_jira_datetime("2024-01-02T09:00:00Z") == datetime(2024, 1, 2, 9, tzinfo=timezone.utc)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_jira_datetime("not a date")


class TestHelpers:
    """Test small helpers"""

    def test_format_date_for_jql(self):
        assert format_date_for_jql(datetime(2025, 1, 15, tzinfo=timezone.utc)) == "2025-01-15"

    def test_utc_offset(self):
        assert utc_offset(0) is timezone.utc
        assert utc_offset(5.5).utcoffset(None) == timedelta(hours=5, minutes=30)
        assert utc_offset(-3).utcoffset(None) == timedelta(hours=-3)
