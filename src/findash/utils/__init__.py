"""Utility functions for findash."""

from findash.utils.date_parser import parse_date, parse_iso_date
from findash.utils.amount_parser import parse_amount, format_ore
from findash.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_iso_date", "parse_amount", "format_ore", "resolve_account"]
