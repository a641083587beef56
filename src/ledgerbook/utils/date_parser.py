"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from ledgerbook.domain.errors import ValidationError
from ledgerbook.domain.validation import period_of, validate_period


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}") from None


def parse_period(period_str: str) -> str:
    """Parse a ledger period string into a YYYY-MM token.

    Accepts "YYYY-MM" as well as "this month", "last month" and "next month".

    Raises:
        ValidationError: If the period cannot be parsed
    """
    period_str = period_str.strip().lower()
    today = date.today()

    relative_periods = {
        "this month": today,
        "last month": today - relativedelta(months=1),
        "next month": today + relativedelta(months=1),
    }
    if period_str in relative_periods:
        return period_of(relative_periods[period_str])

    return validate_period(period_str)
