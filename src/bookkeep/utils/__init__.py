"""Utility functions for bookkeep."""

from bookkeep.utils.date_parser import parse_date, get_date_range, period_bounds
from bookkeep.utils.amount_parser import parse_amount, parse_percentage
from bookkeep.utils.account_resolver import resolve_account

__all__ = [
    "parse_date",
    "get_date_range",
    "period_bounds",
    "parse_amount",
    "parse_percentage",
    "resolve_account",
]
