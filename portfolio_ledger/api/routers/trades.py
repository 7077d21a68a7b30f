"""
Trade API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from portfolio_ledger.api.dependencies import get_ledger
from portfolio_ledger.api.schemas.api_models import (
    TradeExecutionResponse,
    TradeRequest,
    TradeResponse,
)
from portfolio_ledger.core.constants import DEFAULT_TRADE_HISTORY_LIMIT, MAX_TRADE_HISTORY_LIMIT
from portfolio_ledger.core.services.trading_ledger import TradingLedger
from portfolio_ledger.infrastructure.reporting import trades_to_frame

router = APIRouter()

LedgerDep = Annotated[TradingLedger, Depends(get_ledger)]
LimitQuery = Annotated[
    int, Query(gt=0, le=MAX_TRADE_HISTORY_LIMIT, description="Maximum trades returned")
]


@router.post("/{external_id}/trades", status_code=201)
def execute_trade(
    external_id: str, request: TradeRequest, ledger: LedgerDep
) -> TradeExecutionResponse:
    """Record a trade instruction and apply it to the user's portfolio."""
    execution = ledger.execute_trade(
        external_id,
        request.symbol,
        request.side,
        request.quantity,
        request.price,
        current_price=request.current_price,
        defaults=request.profile.to_domain() if request.profile else None,
    )
    return TradeExecutionResponse.from_domain(execution)


@router.get("/{external_id}/trades")
def list_trades(
    external_id: str, ledger: LedgerDep, limit: LimitQuery = DEFAULT_TRADE_HISTORY_LIMIT
) -> list[TradeResponse]:
    """Get the user's most recent trades, newest first."""
    return [TradeResponse.from_domain(t) for t in ledger.recent_trades(external_id, limit)]


@router.get("/{external_id}/trades/export")
def export_trades(
    external_id: str, ledger: LedgerDep, limit: LimitQuery = MAX_TRADE_HISTORY_LIMIT
) -> Response:
    """Export the user's trade history as CSV."""
    frame = trades_to_frame(ledger.recent_trades(external_id, limit))
    return Response(content=frame.to_csv(index=False), media_type="text/csv")
