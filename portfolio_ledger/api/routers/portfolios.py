"""
Portfolio API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from portfolio_ledger.api.dependencies import get_ledger
from portfolio_ledger.api.schemas.api_models import (
    MarkPricesRequest,
    PortfolioResponse,
    PositionResponse,
    SnapshotResponse,
)
from portfolio_ledger.core.services.trading_ledger import TradingLedger
from portfolio_ledger.infrastructure.reporting import positions_to_frame, snapshots_to_frame

router = APIRouter()

LedgerDep = Annotated[TradingLedger, Depends(get_ledger)]


@router.get("/{external_id}/portfolio")
def get_portfolio(external_id: str, ledger: LedgerDep) -> PortfolioResponse:
    """Get the user's default portfolio with positions and derived total value."""
    return PortfolioResponse.from_domain(ledger.portfolio_overview(external_id))


@router.get("/{external_id}/portfolio/export")
def export_positions(external_id: str, ledger: LedgerDep) -> Response:
    """Export the user's positions as CSV."""
    frame = positions_to_frame(ledger.portfolio_overview(external_id).positions)
    return Response(content=frame.to_csv(index=False), media_type="text/csv")


@router.post("/{external_id}/portfolio/marks")
def mark_portfolio(
    external_id: str, request: MarkPricesRequest, ledger: LedgerDep
) -> list[PositionResponse]:
    """Re-mark held positions at externally observed prices."""
    marked = ledger.mark_to_market(external_id, request.prices)
    return [PositionResponse.from_domain(p) for p in marked]


@router.post("/{external_id}/portfolio/snapshots", status_code=201)
def record_snapshot(external_id: str, ledger: LedgerDep) -> SnapshotResponse:
    """Record the portfolio's current valuation."""
    return SnapshotResponse.from_snapshot(ledger.record_snapshot(external_id))


@router.get("/{external_id}/portfolio/history")
def get_history(external_id: str, ledger: LedgerDep) -> list[SnapshotResponse]:
    """Get recorded valuation snapshots, oldest first."""
    overview = ledger.portfolio_overview(external_id)
    history = ledger.portfolios.history(overview.portfolio)
    return [SnapshotResponse.from_snapshot(s) for s in history]


@router.get("/{external_id}/portfolio/history/export")
def export_history(external_id: str, ledger: LedgerDep) -> Response:
    """Export recorded valuation snapshots as CSV indexed by timestamp."""
    overview = ledger.portfolio_overview(external_id)
    frame = snapshots_to_frame(ledger.portfolios.history(overview.portfolio))
    return Response(content=frame.to_csv(), media_type="text/csv")
