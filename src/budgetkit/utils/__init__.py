"""Utility functions for budgetkit."""

from budgetkit.utils.date_parser import parse_date, normalize_date
from budgetkit.utils.amount_parser import parse_amount, parse_amount_minor_units

__all__ = ["parse_date", "normalize_date", "parse_amount", "parse_amount_minor_units"]
