"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta

from budgetledger.utils.date_parser import parse_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_long_form_date():
    assert parse_date("15 January 2024") == date(2024, 1, 15)


def test_parse_today():
    assert parse_date("today") == date.today()


def test_parse_yesterday_and_tomorrow():
    today = date(2024, 3, 1)
    assert parse_date("yesterday", today=today) == date(2024, 2, 29)
    assert parse_date("tomorrow", today=today) == today + timedelta(days=1)


def test_parse_month_starts():
    today = date(2024, 1, 20)
    assert parse_date("this month", today=today) == date(2024, 1, 1)
    assert parse_date("last month", today=today) == date(2023, 12, 1)
    assert parse_date("next month", today=today) == date(2024, 2, 1)


def test_parse_same_day_last_month_clamps_to_month_end():
    """Month arithmetic follows dateutil and clamps to the last valid day."""
    assert parse_date("same day last month", today=date(2024, 3, 31)) == date(2024, 2, 29)
    assert parse_date("same day next month", today=date(2024, 1, 15)) == date(2024, 2, 15)


def test_parse_is_case_insensitive():
    assert parse_date("  Today ") == date.today()


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")
