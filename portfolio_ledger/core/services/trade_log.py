"""
Trade log.

Append-only audit trail of trade instructions. Recording a trade never
touches positions; applying the fill is the orchestrator's next step.
"""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from portfolio_ledger.core.constants import DEFAULT_TRADE_HISTORY_LIMIT, MAX_TRADE_HISTORY_LIMIT
from portfolio_ledger.core.enums import TradeSide, TradeStatus
from portfolio_ledger.core.exceptions.ledger import (
    InvalidTradeTransition,
    NotFoundError,
    ValidationError,
)
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.portfolio import Portfolio
from portfolio_ledger.core.models.trade import Trade
from portfolio_ledger.core.utils.identifiers import generate_id
from portfolio_ledger.core.utils.validation import (
    validate_symbol,
    validate_trade_price,
    validate_trade_quantity,
    validate_trade_side,
)


class TradeLog:
    """Records and lists trades per portfolio."""

    def __init__(self, storage: ILedgerStorage) -> None:
        self.storage = storage

    def record(
        self,
        portfolio: Portfolio,
        symbol: str,
        side: TradeSide | str,
        quantity: Any,
        price: Any,
        *,
        status: TradeStatus = TradeStatus.FILLED,
    ) -> Trade:
        """Append a trade instruction to the portfolio's log.

        Fills are synchronous: a trade recorded as filled is stamped with the
        current time as its execution time.

        Args:
            portfolio: Owning portfolio
            symbol: Ticker, normalized to uppercase
            side: Buy or sell, as enum or case-insensitive string
            quantity: Positive quantity
            price: Positive execution price
            status: Initial status; FILLED unless the caller fills later

        Returns:
            The stored Trade

        Raises:
            InvalidTradeParameters: If quantity or price is not positive
            ValidationError: If side is not buy or sell
        """
        quantity = validate_trade_quantity(quantity)
        price = validate_trade_price(price)
        symbol = validate_symbol(symbol)
        side = validate_trade_side(side)
        if status == TradeStatus.CANCELLED:
            raise ValidationError("A trade cannot be recorded as cancelled")

        now = datetime.now(UTC)
        trade = Trade(
            id=generate_id(),
            portfolio_id=portfolio.id,
            symbol=symbol,
            side=side,
            quantity=quantity,
            price=price,
            status=status,
            executed_at=now if status == TradeStatus.FILLED else None,
            created_at=now,
        )

        with self.storage.portfolio_transaction(portfolio.id):
            stored = self.storage.trades.append(trade)

        logger.debug(
            f"Recorded {stored.status} trade {stored.id}: {side} {quantity} {symbol} @ {price}"
        )
        return stored

    def list_by_portfolio(
        self, portfolio: Portfolio, limit: int = DEFAULT_TRADE_HISTORY_LIMIT
    ) -> list[Trade]:
        """Return up to limit trades of the portfolio, newest first."""
        if limit <= 0:
            raise ValidationError(f"limit must be positive, got {limit}")
        return self.storage.trades.list_recent(portfolio.id, min(limit, MAX_TRADE_HISTORY_LIMIT))

    def get(self, portfolio: Portfolio, trade_id: str) -> Trade:
        """Return one trade of the portfolio."""
        trade = self.storage.trades.get(portfolio.id, trade_id)
        if trade is None:
            raise NotFoundError("Trade", trade_id)
        return trade

    def update_status(self, portfolio: Portfolio, trade_id: str, status: TradeStatus) -> Trade:
        """Move a pending trade to filled or cancelled.

        Raises:
            NotFoundError: If the trade is not in the portfolio's log
            InvalidTradeTransition: If the trade is already filled or cancelled
        """
        status = TradeStatus(status)
        with self.storage.portfolio_transaction(portfolio.id):
            trade = self.get(portfolio, trade_id)
            if not trade.status.can_transition_to(status):
                raise InvalidTradeTransition(trade_id, trade.status.value, status.value)

            executed_at = datetime.now(UTC) if status == TradeStatus.FILLED else None
            updated = self.storage.trades.update_status(
                replace(trade, executed_at=executed_at), status
            )

        logger.info(f"Trade {trade_id} moved from {trade.status} to {status}")
        return updated
