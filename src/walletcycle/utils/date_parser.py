"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from walletcycle.domain.errors import ValidationError

PERIODS = ("this-month", "last-month", "this-week", "last-week", "cycle")

_WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15/01/2024" (day first), "January 15, 2024"
    - Relative dates: "today", "yesterday", "last friday",
      "this month", "last month", "this week", "last week"

    Args:
        date_str: Date string
        today: Reference date for relative dates (defaults to today)

    Returns:
        Date object

    Raises:
        ValidationError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    if text.startswith("last "):
        period = text[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        if period == "week":
            return today - timedelta(days=today.weekday() + 7)
        if period in _WEEKDAYS:
            days_ago = (today.weekday() - _WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)

    elif text.startswith("this "):
        period = text[5:]
        if period == "month":
            return today.replace(day=1)
        if period == "week":
            return today - timedelta(days=today.weekday())

    try:
        # ISO dates are unambiguous; anything else is read day first as in Egypt
        return date_parser.isoparse(text).date()
    except ValueError:
        pass
    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str.strip()}': {e}")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    "cycle" is the current limit cycle: from the first of the month to the
    day before the next reset.

    Args:
        period: One of this-month, last-month, this-week, last-week, cycle
        today: Reference date (defaults to today)

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValidationError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)
    if period == "this-week":
        return today - timedelta(days=today.weekday()), today
    if period == "last-week":
        start = today - timedelta(days=today.weekday() + 7)
        return start, start + timedelta(days=6)
    if period == "cycle":
        start = today.replace(day=1)
        return start, start + relativedelta(months=1) - timedelta(days=1)

    raise ValidationError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
