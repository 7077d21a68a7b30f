"""
DataFrame builders for ledger records.

Decimal columns are converted to float: frames are for reporting and export,
never fed back into the ledger.
"""

from collections.abc import Iterable

import pandas as pd

from portfolio_ledger.core.models.portfolio import PortfolioSnapshot
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.models.trade import Trade

POSITION_COLUMNS = [
    "symbol",
    "quantity",
    "average_cost",
    "current_price",
    "market_value",
    "unrealized_pnl",
    "realized_pnl",
    "updated_at",
]
TRADE_COLUMNS = [
    "id",
    "created_at",
    "executed_at",
    "symbol",
    "side",
    "quantity",
    "price",
    "total_amount",
    "status",
]
SNAPSHOT_COLUMNS = [
    "timestamp",
    "cash_balance",
    "market_value",
    "unrealized_pnl",
    "realized_pnl",
    "total_value",
    "positions",
]

_NUMERIC_COLUMNS = {
    "quantity",
    "average_cost",
    "current_price",
    "market_value",
    "unrealized_pnl",
    "realized_pnl",
    "price",
    "total_amount",
    "cash_balance",
    "total_value",
}


def _build_frame(rows: list[dict], columns: list[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=columns)
    for column in columns:
        if column in _NUMERIC_COLUMNS:
            df[column] = df[column].astype(float)
    return df


def positions_to_frame(positions: Iterable[Position]) -> pd.DataFrame:
    """Build a frame with one row per position, ordered by symbol."""
    rows = [position.to_dict() for position in positions]
    df = _build_frame(rows, POSITION_COLUMNS)
    return df.sort_values("symbol", ignore_index=True)


def trades_to_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    """Build a frame with one row per trade, keeping the input order."""
    rows = [trade.to_dict() for trade in trades]
    return _build_frame(rows, TRADE_COLUMNS)


def snapshots_to_frame(snapshots: Iterable[PortfolioSnapshot]) -> pd.DataFrame:
    """Build a time-indexed frame of portfolio valuations."""
    rows = [snapshot.to_dict() for snapshot in snapshots]
    df = _build_frame(rows, SNAPSHOT_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df.set_index("timestamp")
