"""Utility functions for budgetledger."""

from budgetledger.utils.date_parser import parse_date
from budgetledger.utils.amount_parser import parse_amount, parse_balance

__all__ = ["parse_date", "parse_amount", "parse_balance"]
