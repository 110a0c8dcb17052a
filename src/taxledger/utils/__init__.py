"""Utility functions for taxledger."""

from taxledger.utils.date_parser import parse_date, get_date_range
from taxledger.utils.amount_parser import parse_amount
from taxledger.utils.money import round_money, amounts_equal

__all__ = ["parse_date", "get_date_range", "parse_amount", "round_money", "amounts_equal"]
