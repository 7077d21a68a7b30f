"""
Position ledger.

Applies trade executions to positions using weighted-average cost-basis
accounting, keeping exactly one position per (portfolio, symbol).

Sells are never blended into the average cost: a reduction keeps the cost
basis and realizes P&L against it (see Position.apply_fill).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger

from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import InsufficientSharesError, NotFoundError
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.portfolio import Portfolio
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.protocols import PriceMap
from portfolio_ledger.core.types.financial import ZERO
from portfolio_ledger.core.utils.identifiers import generate_id
from portfolio_ledger.core.utils.validation import (
    validate_symbol,
    validate_trade_price,
    validate_trade_quantity,
    validate_trade_side,
)


@dataclass(frozen=True)
class FillResult:
    """Position after a fill and the P&L the fill realized."""

    position: Position
    realized_pnl: Decimal
    created: bool


class PositionLedger:
    """Owns the positions of every portfolio."""

    def __init__(self, storage: ILedgerStorage, config: LedgerConfig | None = None) -> None:
        self.storage = storage
        self.config = config or LedgerConfig()

    def apply_fill(
        self,
        portfolio: Portfolio,
        symbol: str,
        side: TradeSide | str,
        quantity: Any,
        execution_price: Any,
        current_price: Any,
    ) -> Position:
        """Apply an execution to the portfolio's position in symbol.

        Returns:
            The updated or newly created Position
        """
        return self.fill(
            portfolio, symbol, side, quantity, execution_price, current_price
        ).position

    def fill(
        self,
        portfolio: Portfolio,
        symbol: str,
        side: TradeSide | str,
        quantity: Any,
        execution_price: Any,
        current_price: Any,
    ) -> FillResult:
        """Apply an execution and report the realized P&L alongside the position.

        Raises:
            InsufficientSharesError: If short selling is disabled and the sell
                exceeds the quantity held
        """
        symbol = validate_symbol(symbol)
        side = validate_trade_side(side)
        quantity = validate_trade_quantity(quantity)
        execution_price = validate_trade_price(execution_price, "execution_price")
        current_price = validate_trade_price(current_price, "current_price")
        delta = quantity * side.sign

        with self.storage.portfolio_transaction(portfolio.id):
            existing = self.storage.positions.get(portfolio.id, symbol)
            held = existing.quantity if existing is not None else ZERO

            if side == TradeSide.SELL and not self.config.allow_short_selling and quantity > held:
                raise InsufficientSharesError(symbol, quantity, max(held, ZERO))

            if existing is None:
                position = Position.open(
                    generate_id(), portfolio.id, symbol, delta, execution_price, current_price
                )
                realized = ZERO
            else:
                position = existing
                realized = position.apply_fill(delta, execution_price, current_price)

            self.storage.positions.upsert(position)

        logger.debug(
            f"Applied {side} {quantity} {symbol} @ {execution_price} to portfolio "
            f"{portfolio.id}: qty={position.quantity} avg={position.average_cost} "
            f"realized={realized}"
        )
        return FillResult(position=position, realized_pnl=realized, created=existing is None)

    def list_by_portfolio(self, portfolio: Portfolio, open_only: bool = False) -> list[Position]:
        """List positions ordered by symbol.

        Closed positions (quantity 0) are kept and listed unless open_only.
        """
        positions = self.storage.positions.list_by_portfolio(portfolio.id)
        if open_only:
            return [p for p in positions if p.is_open]
        return positions

    def get(self, portfolio: Portfolio, symbol: str) -> Position:
        """Return the portfolio's position in symbol."""
        symbol = validate_symbol(symbol)
        position = self.storage.positions.get(portfolio.id, symbol)
        if position is None:
            raise NotFoundError("Position", f"{portfolio.id}/{symbol}")
        return position

    def mark_price(self, portfolio: Portfolio, symbol: str, current_price: Any) -> Position:
        """Re-mark one position at a newly observed price."""
        price = validate_trade_price(current_price, "current_price")
        with self.storage.portfolio_transaction(portfolio.id):
            position = self.get(portfolio, symbol)
            position.mark(price)
            self.storage.positions.upsert(position)
            return position

    def mark_to_market(self, portfolio: Portfolio, prices: PriceMap) -> list[Position]:
        """Re-mark every held symbol present in prices.

        Symbols without a position are ignored.

        Returns:
            The positions that were re-marked, ordered by symbol
        """
        normalized = {
            validate_symbol(symbol): validate_trade_price(price, "current_price")
            for symbol, price in prices.items()
        }
        marked = []
        with self.storage.portfolio_transaction(portfolio.id):
            for position in self.storage.positions.list_by_portfolio(portfolio.id):
                price = normalized.get(position.symbol)
                if price is None:
                    continue
                position.mark(price)
                self.storage.positions.upsert(position)
                marked.append(position)

        logger.debug(f"Marked {len(marked)} positions of portfolio {portfolio.id} to market")
        return marked
