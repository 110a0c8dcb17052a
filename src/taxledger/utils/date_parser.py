"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO and free-form dates ("2024-01-15", "15 Jan 2024") plus a
    few relative forms: "today", "yesterday", "tomorrow", and
    "start/end of month/year".

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": today.replace(day=1),
        "end of month": today.replace(day=1) + relativedelta(months=1, days=-1),
        "start of year": today.replace(month=1, day=1),
        "end of year": today.replace(month=12, day=31),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _quarter_start(value: date) -> date:
    return value.replace(month=3 * ((value.month - 1) // 3) + 1, day=1)


def get_date_range(period: str) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: this-month, last-month, this-quarter, last-quarter,
            this-year or last-year

    Returns:
        Tuple of (start_date, end_date). Periods are whole calendar
        periods, so "this-month" ends on the last day of the month.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        start_date = today.replace(day=1)
        return start_date, start_date + relativedelta(months=1, days=-1)
    if period == "last-month":
        start_date = today.replace(day=1) - relativedelta(months=1)
        return start_date, today.replace(day=1) - timedelta(days=1)
    if period == "this-quarter":
        start_date = _quarter_start(today)
        return start_date, start_date + relativedelta(months=3, days=-1)
    if period == "last-quarter":
        start_date = _quarter_start(today) - relativedelta(months=3)
        return start_date, _quarter_start(today) - timedelta(days=1)
    if period == "this-year":
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    if period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, last-month, "
        "this-quarter, last-quarter, this-year, last-year"
    )
