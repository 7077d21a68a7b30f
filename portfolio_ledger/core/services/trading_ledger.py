"""
Trading ledger - orchestrates all ledger components.

This module provides the main entry point by composing the focused
components: identity resolution, portfolio store, trade log, position
ledger and watchlists.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger

from portfolio_ledger.core.constants import DEFAULT_TRADE_HISTORY_LIMIT
from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import InsufficientFundsError
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.portfolio import (
    Portfolio,
    PortfolioSnapshot,
    PortfolioValuation,
)
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.models.profile import Profile, ProfileDefaults
from portfolio_ledger.core.models.trade import Trade
from portfolio_ledger.core.protocols import IPriceSource, PriceMap
from portfolio_ledger.core.utils.decorators import log_ledger_operation
from portfolio_ledger.core.utils.validation import (
    validate_symbol,
    validate_trade_price,
    validate_trade_quantity,
    validate_trade_side,
)

from .identity import IdentityResolver
from .portfolio_store import PortfolioStore
from .position_ledger import PositionLedger
from .trade_log import TradeLog
from .watchlists import WatchlistStore


@dataclass(frozen=True)
class TradeExecution:
    """Outcome of an executed trade instruction."""

    trade: Trade
    position: Position
    realized_pnl: Decimal
    valuation: PortfolioValuation


@dataclass(frozen=True)
class PortfolioOverview:
    """A profile's default portfolio with its positions and derived valuation."""

    profile: Profile
    portfolio: Portfolio
    positions: list[Position]
    valuation: PortfolioValuation


class TradingLedger:
    """Main ledger implementation.

    Orchestrates ledger operations by composing focused components:
    - IdentityResolver: external identity -> profile
    - PortfolioStore: portfolios, cash and valuation
    - TradeLog: append-only trade records
    - PositionLedger: cost-basis accounting
    - WatchlistStore: watchlists and alerts

    A trade is recorded, applied and settled inside one portfolio
    transaction, so either all three are visible afterwards or none is.
    """

    def __init__(
        self,
        storage: ILedgerStorage,
        config: LedgerConfig | None = None,
        price_source: IPriceSource | None = None,
    ) -> None:
        """Initialize the ledger with its storage and optional price source."""
        self.storage = storage
        self.config = config or LedgerConfig()
        self.price_source = price_source

        self.identity = IdentityResolver(storage)
        self.portfolios = PortfolioStore(storage, self.config)
        self.trade_log = TradeLog(storage)
        self.positions = PositionLedger(storage, self.config)
        self.watchlists = WatchlistStore(storage, self.config)

    def _default_portfolio(
        self, external_id: str, defaults: ProfileDefaults | None = None
    ) -> tuple[Profile, Portfolio]:
        profile = self.identity.resolve(external_id, defaults)
        return profile, self.portfolios.ensure_default(profile)

    def _resolve_current_price(
        self, symbol: str, current_price: Any, execution_price: Decimal
    ) -> Decimal:
        if current_price is not None:
            return validate_trade_price(current_price, "current_price")
        if self.price_source is not None:
            cached = self.price_source.get(symbol)
            if cached is not None:
                return cached
        return execution_price

    @log_ledger_operation
    def execute_trade(
        self,
        external_id: str,
        symbol: str,
        side: TradeSide | str,
        quantity: Any,
        price: Any,
        current_price: Any | None = None,
        defaults: ProfileDefaults | None = None,
    ) -> TradeExecution:
        """Record and apply a trade instruction for a user.

        Args:
            external_id: User identifier from the identity provider
            symbol: Ticker
            side: "buy" or "sell"
            quantity: Positive quantity
            price: Positive execution price
            current_price: Latest market price; falls back to the price
                source, then to the execution price
            defaults: Profile display fields used on first sight of the user

        Returns:
            TradeExecution with the filled trade, updated position, realized
            P&L of this fill and the post-trade valuation

        Raises:
            InvalidTradeParameters: Non-positive quantity or price
            InsufficientFundsError: Buy exceeds cash while buying power is enforced
            InsufficientSharesError: Sell exceeds holding while shorting is disabled
        """
        quantity = validate_trade_quantity(quantity)
        price = validate_trade_price(price)
        symbol = validate_symbol(symbol)
        side = validate_trade_side(side)
        mark = self._resolve_current_price(symbol, current_price, price)

        profile, portfolio = self._default_portfolio(external_id, defaults)
        total_amount = quantity * price

        with self.storage.portfolio_transaction(portfolio.id):
            if side == TradeSide.BUY and self.config.enforce_buying_power:
                cash = self.portfolios.get(profile, portfolio.id).cash_balance
                if total_amount > cash:
                    raise InsufficientFundsError(
                        required=total_amount,
                        available=cash,
                        operation=f"buying {quantity} {symbol} at {price}",
                    )

            trade = self.trade_log.record(portfolio, symbol, side, quantity, price)
            result = self.positions.fill(portfolio, symbol, side, quantity, price, mark)
            self.portfolios.adjust_cash(portfolio, -total_amount * side.sign)
            valuation = self.portfolios.valuation(portfolio)

        if self.price_source is not None:
            self.price_source.update(symbol, mark)

        logger.info(
            f"Executed {side} {quantity} {symbol} @ {price} for {external_id}: "
            f"position {result.position.quantity} @ {result.position.average_cost}, "
            f"realized {result.realized_pnl}"
        )
        return TradeExecution(
            trade=trade,
            position=result.position,
            realized_pnl=result.realized_pnl,
            valuation=valuation,
        )

    def portfolio_overview(self, external_id: str) -> PortfolioOverview:
        """Return the user's default portfolio, positions and valuation."""
        profile, portfolio = self._default_portfolio(external_id)
        with self.storage.portfolio_transaction(portfolio.id):
            current = self.portfolios.get(profile, portfolio.id)
            positions = self.positions.list_by_portfolio(current)
            valuation = PortfolioValuation.from_positions(current.cash_balance, positions)
        return PortfolioOverview(
            profile=profile, portfolio=current, positions=positions, valuation=valuation
        )

    def recent_trades(
        self, external_id: str, limit: int = DEFAULT_TRADE_HISTORY_LIMIT
    ) -> list[Trade]:
        """Return the user's most recent trades, newest first."""
        _, portfolio = self._default_portfolio(external_id)
        return self.trade_log.list_by_portfolio(portfolio, limit)

    @log_ledger_operation
    def mark_to_market(self, external_id: str, prices: PriceMap) -> list[Position]:
        """Record observed prices and re-mark the user's positions."""
        _, portfolio = self._default_portfolio(external_id)
        # Positions validate the whole map before the cache sees any price
        updated = self.positions.mark_to_market(portfolio, prices)
        if self.price_source is not None:
            self.price_source.update_many(prices)
        return updated

    def record_snapshot(self, external_id: str) -> PortfolioSnapshot:
        """Record the user's current valuation into the portfolio history."""
        _, portfolio = self._default_portfolio(external_id)
        return self.portfolios.record_snapshot(portfolio)
