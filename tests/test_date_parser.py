"""Tests for date parser with relative dates and periods."""

import pytest
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from bookkeep.utils.date_parser import get_date_range, parse_date, period_bounds


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("Jan 15 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday_and_tomorrow():
    """Test parsing 'yesterday' and 'tomorrow'."""
    assert parse_date("Yesterday") == date.today() - timedelta(days=1)
    assert parse_date("tomorrow") == date.today() + timedelta(days=1)


def test_parse_start_of_periods():
    """Test parsing 'start of month/quarter/year'."""
    today = date.today()
    assert parse_date("start of month") == today.replace(day=1)
    assert parse_date("start of year") == date(today.year, 1, 1)
    quarter_start = parse_date("start of quarter")
    assert quarter_start.day == 1
    assert quarter_start.month in (1, 4, 7, 10)
    assert quarter_start <= today


def test_parse_ago():
    """Test parsing '<n> units ago'."""
    today = date.today()
    assert parse_date("3 days ago") == today - timedelta(days=3)
    assert parse_date("1 week ago") == today - timedelta(weeks=1)
    assert parse_date("2 months ago") == today - relativedelta(months=2)
    assert parse_date("1 year ago") == today - relativedelta(years=1)


def test_parse_invalid_date():
    """Test that unparseable dates raise ValueError."""
    with pytest.raises(ValueError):
        parse_date("not a date at all")
    with pytest.raises(ValueError):
        parse_date("")


def test_get_date_range_this_month():
    """Test 'this-month' period."""
    start, end = get_date_range("this-month")
    assert start == date.today().replace(day=1)
    assert end == date.today()


def test_get_date_range_last_month():
    """Test 'last-month' period covers the whole previous month."""
    start, end = get_date_range("last-month")
    first_of_month = date.today().replace(day=1)
    assert end == first_of_month - timedelta(days=1)
    assert start == end.replace(day=1)


def test_get_date_range_last_quarter():
    """Test 'last-quarter' spans three whole months."""
    start, end = get_date_range("last-quarter")
    assert start.day == 1
    assert start + relativedelta(months=3) - timedelta(days=1) == end


def test_get_date_range_last_year():
    """Test 'last-year' period."""
    start, end = get_date_range("last-year")
    year = date.today().year - 1
    assert (start, end) == (date(year, 1, 1), date(year, 12, 31))


def test_get_date_range_unknown():
    """Test unknown periods raise ValueError."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")


@pytest.mark.parametrize(
    "period_type, anchor, expected",
    [
        ("monthly", date(2024, 2, 14), (date(2024, 2, 1), date(2024, 2, 29))),
        ("quarterly", date(2024, 5, 20), (date(2024, 4, 1), date(2024, 6, 30))),
        ("yearly", date(2024, 5, 20), (date(2024, 1, 1), date(2024, 12, 31))),
    ],
)
def test_period_bounds(period_type, anchor, expected):
    """Test budget period bounds around an anchor date."""
    assert period_bounds(period_type, anchor) == expected


def test_period_bounds_custom_is_rejected():
    """Custom periods have no derivable bounds."""
    with pytest.raises(ValueError):
        period_bounds("custom", date(2024, 5, 20))
