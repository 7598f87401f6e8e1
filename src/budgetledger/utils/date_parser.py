"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 January 2024") and a few
    relative forms useful when picking a reconciliation date:
    - "today", "yesterday", "tomorrow"
    - "this month" / "next month" / "last month" (first day of that month)
    - "same day last month" / "same day next month"

    Args:
        date_str: Date string
        today: Reference date for relative forms, defaults to today

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "same day last month": today - relativedelta(months=1),
        "same day next month": today + relativedelta(months=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    # Day first is never assumed; ISO dates are the documented format.
    try:
        return date_parser.parse(text, dayfirst=False).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
