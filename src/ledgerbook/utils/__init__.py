"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date, parse_period
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.resolver import resolve_account, resolve_category

__all__ = ["parse_date", "parse_period", "parse_amount", "resolve_account", "resolve_category"]
