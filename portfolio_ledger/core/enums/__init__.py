"""
Core enumerations for the portfolio ledger.

This module provides centralized enumerations for domain concepts
like trade sides, trade statuses and alert conditions.
"""

from .alert_conditions import AlertCondition
from .trade_types import TradeSide, TradeStatus

__all__ = ["AlertCondition", "TradeSide", "TradeStatus"]
