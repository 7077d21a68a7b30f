"""
Core constants and limits.

Defines ledger-wide precision, defaults and resource limits.
"""

# Decimal precision (number of decimal places)
COST_DECIMALS = 8  # Average cost after weighted-average division
PRICE_DECIMALS = 8  # Supplied execution and mark prices
QUANTITY_DECIMALS = 8  # Fractional shares allowed

# Portfolio Defaults
DEFAULT_STARTING_CASH = "10000"
DEFAULT_PORTFOLIO_NAME = "Main Portfolio"

# Watchlist Defaults
DEFAULT_WATCHLIST_NAME = "My Watchlist"
DEFAULT_WATCHLIST_SYMBOLS = ("AAPL", "GOOGL", "MSFT", "TSLA", "NVDA")

# Trade Log Limits
DEFAULT_TRADE_HISTORY_LIMIT = 50
MAX_TRADE_HISTORY_LIMIT = 1000

# Portfolio History Limits
MAX_PORTFOLIO_HISTORY = 5000  # Maximum portfolio snapshots to keep
PORTFOLIO_HISTORY_TRIM_TO = 4000  # Snapshots kept after trimming

# Symbol Rules
MAX_SYMBOL_LENGTH = 15
SYMBOL_PATTERN = r"^[A-Z0-9][A-Z0-9.\-/]*$"

# Price Cache
DEFAULT_PRICE_CACHE_TTL_SECONDS = 300.0
DEFAULT_PRICE_CACHE_SIZE = 1024
