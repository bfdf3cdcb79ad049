"""Utility functions for walletcycle."""

from walletcycle.utils.amount_parser import parse_amount
from walletcycle.utils.date_parser import parse_date

__all__ = ["parse_date", "parse_amount"]
