"""
FastAPI dependencies.
"""

from fastapi import Request

from portfolio_ledger.core.services.trading_ledger import TradingLedger


def get_ledger(request: Request) -> TradingLedger:
    """Return the ledger bound to the running application."""
    return request.app.state.ledger
