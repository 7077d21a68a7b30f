"""
Portfolio ledger: the accounting core of a demo trading platform.

Turns buy/sell trade instructions into consistent positions, weighted-average
cost basis and realized/unrealized P&L per user portfolio.
"""

__version__ = "1.0.0"
