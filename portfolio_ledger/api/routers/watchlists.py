"""
Watchlist and alert API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from portfolio_ledger.api.dependencies import get_ledger
from portfolio_ledger.api.schemas.api_models import (
    AlertRequest,
    AlertResponse,
    AlertUpdateRequest,
    WatchlistResponse,
    WatchlistSymbolRequest,
)
from portfolio_ledger.core.services.trading_ledger import TradingLedger

router = APIRouter()

LedgerDep = Annotated[TradingLedger, Depends(get_ledger)]


@router.get("/{external_id}/watchlists")
def list_watchlists(external_id: str, ledger: LedgerDep) -> list[WatchlistResponse]:
    """Get the user's watchlists, seeding the default one on first access."""
    profile = ledger.identity.resolve(external_id)
    ledger.watchlists.ensure_default(profile)
    return [WatchlistResponse.from_domain(w) for w in ledger.watchlists.list_watchlists(profile)]


@router.post("/{external_id}/watchlists/{watchlist_id}/symbols")
def add_watchlist_symbol(
    external_id: str, watchlist_id: str, request: WatchlistSymbolRequest, ledger: LedgerDep
) -> WatchlistResponse:
    """Track an additional symbol."""
    profile = ledger.identity.get(external_id)
    watchlist = ledger.watchlists.add_symbol(profile, watchlist_id, request.symbol)
    return WatchlistResponse.from_domain(watchlist)


@router.delete("/{external_id}/watchlists/{watchlist_id}/symbols/{symbol}")
def remove_watchlist_symbol(
    external_id: str, watchlist_id: str, symbol: str, ledger: LedgerDep
) -> WatchlistResponse:
    """Stop tracking a symbol."""
    profile = ledger.identity.get(external_id)
    watchlist = ledger.watchlists.remove_symbol(profile, watchlist_id, symbol)
    return WatchlistResponse.from_domain(watchlist)


@router.post("/{external_id}/alerts", status_code=201)
def create_alert(external_id: str, request: AlertRequest, ledger: LedgerDep) -> AlertResponse:
    """Create an active price alert."""
    profile = ledger.identity.resolve(external_id)
    alert = ledger.watchlists.create_alert(
        profile, request.symbol, request.condition, request.target_price
    )
    return AlertResponse.from_domain(alert)


@router.get("/{external_id}/alerts")
def list_active_alerts(external_id: str, ledger: LedgerDep) -> list[AlertResponse]:
    """Get the user's active alerts."""
    profile = ledger.identity.resolve(external_id)
    return [AlertResponse.from_domain(a) for a in ledger.watchlists.list_active_alerts(profile)]


@router.patch("/{external_id}/alerts/{alert_id}")
def update_alert(
    external_id: str, alert_id: str, request: AlertUpdateRequest, ledger: LedgerDep
) -> AlertResponse:
    """Enable or disable an alert."""
    profile = ledger.identity.get(external_id)
    alert = ledger.watchlists.set_alert_active(profile, alert_id, request.is_active)
    return AlertResponse.from_domain(alert)
