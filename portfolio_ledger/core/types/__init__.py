"""
Core types module for financial calculations.

Provides Decimal-based types and helpers so that repeated weighted-average
updates never accumulate floating-point drift.
"""

from .financial import (
    ZERO,
    calculate_notional_value,
    calculate_realized_pnl,
    calculate_weighted_average_cost,
    round_cost,
    round_price,
    round_quantity,
    sign_of,
    to_decimal,
)

__all__ = [
    "ZERO",
    "calculate_notional_value",
    "calculate_realized_pnl",
    "calculate_weighted_average_cost",
    "round_cost",
    "round_price",
    "round_quantity",
    "sign_of",
    "to_decimal",
]
