"""
Reporting infrastructure module.

Converts ledger records into pandas DataFrames for analysis and export.
"""

from .frames import (
    POSITION_COLUMNS,
    SNAPSHOT_COLUMNS,
    TRADE_COLUMNS,
    positions_to_frame,
    snapshots_to_frame,
    trades_to_frame,
)

__all__ = [
    "POSITION_COLUMNS",
    "SNAPSHOT_COLUMNS",
    "TRADE_COLUMNS",
    "positions_to_frame",
    "snapshots_to_frame",
    "trades_to_frame",
]
