"""Date parsing utilities."""

import re
from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_AGO_PATTERN = re.compile(r"^(\d+)\s+(day|week|month|year)s?\s+ago$")

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts ISO and free-form dates ("2024-01-15", "Jan 15 2024") as well as
    "today", "yesterday", "tomorrow", "start of month", "start of year" and
    "<n> days/weeks/months/years ago".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = (date_str or "").strip().lower()
    if not text:
        raise ValueError("Empty date string")
    today = date.today()

    keywords = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": today.replace(day=1),
        "start of quarter": _quarter_start(today),
        "start of year": today.replace(month=1, day=1),
    }
    if text in keywords:
        return keywords[text]

    match = _AGO_PATTERN.match(text)
    if match:
        count, unit = int(match.group(1)), match.group(2)
        return today - relativedelta(**{f"{unit}s": count})

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get the first and last day of a named reporting period.

    Periods starting with "this-" end today; "last-" periods are complete.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return start, today.replace(day=1) - timedelta(days=1)
    if period == "this-quarter":
        return _quarter_start(today), today
    if period == "last-quarter":
        end = _quarter_start(today) - timedelta(days=1)
        return _quarter_start(end), end
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return start, today.replace(month=1, day=1) - timedelta(days=1)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def period_bounds(period_type: str, anchor: date) -> tuple[date, date]:
    """Return the full monthly, quarterly or yearly period containing ``anchor``.

    Raises:
        ValueError: If period type is not one of monthly, quarterly, yearly
    """
    if period_type == "monthly":
        start = anchor.replace(day=1)
        return start, start + relativedelta(months=1) - timedelta(days=1)
    if period_type == "quarterly":
        start = _quarter_start(anchor)
        return start, start + relativedelta(months=3) - timedelta(days=1)
    if period_type == "yearly":
        start = anchor.replace(month=1, day=1)
        return start, start + relativedelta(years=1) - timedelta(days=1)
    raise ValueError(f"Cannot derive bounds for period type '{period_type}'")
