"""
Unit tests for the position ledger.
Testing fills, one-position-per-symbol and mark-to-market.
"""

from decimal import Decimal

import pytest

from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import (
    InsufficientSharesError,
    InvalidTradeParameters,
    NotFoundError,
    ValidationError,
)
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.portfolio import Portfolio
from portfolio_ledger.core.services.position_ledger import PositionLedger
from portfolio_ledger.infrastructure.storage import InMemoryLedgerStorage


class TestPositionLedger:
    """Tests for PositionLedger."""

    @pytest.fixture
    def storage(self) -> InMemoryLedgerStorage:
        return InMemoryLedgerStorage()

    @pytest.fixture
    def ledger(self, storage: InMemoryLedgerStorage) -> PositionLedger:
        return PositionLedger(storage)

    @pytest.fixture
    def portfolio(self, storage: InMemoryLedgerStorage) -> Portfolio:
        portfolio = Portfolio(id="pf", profile_id="p", name="Main", cash_balance=Decimal("0"))
        storage.portfolios.save(portfolio)
        return portfolio

    def test_should_open_position_on_first_buy(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        result = ledger.fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)

        assert result.created
        assert result.realized_pnl == Decimal("0")
        assert result.position.quantity == Decimal("10")
        assert result.position.average_cost == Decimal("100")

    def test_should_blend_second_buy(self, ledger: PositionLedger, portfolio: Portfolio) -> None:
        """Test buy 10 @ 100, buy 10 @ 120, current 130."""
        # Arrange
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)

        # Act
        position = ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 120, 130)

        # Assert
        assert position.quantity == Decimal("20")
        assert position.average_cost == Decimal("110")
        assert position.market_value == Decimal("2600")
        assert position.unrealized_pnl == Decimal("400")

    def test_should_realize_pnl_on_partial_sell(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        """Test buy 10 @ 100 then sell 4 @ 150."""
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)

        result = ledger.fill(portfolio, "AAPL", TradeSide.SELL, 4, 150, 150)

        assert not result.created
        assert result.position.quantity == Decimal("6")
        assert result.position.average_cost == Decimal("100")
        assert result.realized_pnl == Decimal("200")

    def test_should_keep_one_position_per_symbol(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        """Test repeated fills and symbol case never create duplicates."""
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 1, 100, 100)
        ledger.apply_fill(portfolio, "aapl", TradeSide.BUY, 1, 100, 100)
        ledger.apply_fill(portfolio, " AAPL", TradeSide.SELL, 1, 100, 100)

        positions = ledger.list_by_portfolio(portfolio)

        assert len(positions) == 1
        assert positions[0].quantity == Decimal("1")

    def test_should_keep_closed_position_and_reopen_fresh(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        """Test a closed position is retained and a later buy starts a new cost basis."""
        # Arrange
        first = ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)
        ledger.apply_fill(portfolio, "AAPL", TradeSide.SELL, 10, 120, 120)

        # Act
        closed = ledger.get(portfolio, "AAPL")
        open_positions = ledger.list_by_portfolio(portfolio, open_only=True)
        reopened = ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 5, 90, 90)

        # Assert
        assert closed.quantity == Decimal("0")
        assert closed.average_cost == Decimal("0")
        assert closed.realized_pnl == Decimal("200")
        assert open_positions == []
        assert reopened.id == first.id
        assert reopened.average_cost == Decimal("90")
        assert reopened.quantity == Decimal("5")

    def test_should_reject_sell_beyond_holding(
        self, storage: InMemoryLedgerStorage, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 3, 100, 100)

        with pytest.raises(InsufficientSharesError) as exc_info:
            ledger.apply_fill(portfolio, "AAPL", TradeSide.SELL, 5, 100, 100)

        assert exc_info.value.available == Decimal("3")
        position = storage.positions.get(portfolio.id, "AAPL")
        assert position is not None
        assert position.quantity == Decimal("3")

    def test_should_reject_sell_without_position(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        with pytest.raises(InsufficientSharesError):
            ledger.apply_fill(portfolio, "AAPL", TradeSide.SELL, 1, 100, 100)

        assert ledger.list_by_portfolio(portfolio) == []

    def test_should_open_short_when_allowed(
        self, storage: InMemoryLedgerStorage, portfolio: Portfolio
    ) -> None:
        ledger = PositionLedger(storage, LedgerConfig(allow_short_selling=True))

        position = ledger.apply_fill(portfolio, "TSLA", TradeSide.SELL, 5, 200, 190)

        assert position.quantity == Decimal("-5")
        assert position.average_cost == Decimal("200")
        assert position.unrealized_pnl == Decimal("50")

    def test_should_reject_invalid_prices(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        with pytest.raises(InvalidTradeParameters) as exc_info:
            ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 1, 100, 0)

        assert exc_info.value.field == "current_price"

    def test_should_reject_unknown_side(
        self, storage: InMemoryLedgerStorage, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        with pytest.raises(ValidationError, match="Unsupported trade side"):
            ledger.fill(portfolio, "AAPL", "short", 1, 100, 100)

        assert storage.positions.list_by_portfolio(portfolio.id) == []

    def test_should_mark_single_position(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)

        marked = ledger.mark_price(portfolio, "AAPL", 90)

        assert marked.unrealized_pnl == Decimal("-100")
        assert ledger.get(portfolio, "AAPL").current_price == Decimal("90")

    def test_should_raise_not_found_when_marking_unknown_symbol(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        with pytest.raises(NotFoundError):
            ledger.mark_price(portfolio, "ZZZ", 1)

    def test_should_mark_to_market_ignoring_unheld_symbols(
        self, ledger: PositionLedger, portfolio: Portfolio
    ) -> None:
        # Arrange
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)
        ledger.apply_fill(portfolio, "MSFT", TradeSide.BUY, 1, 300, 300)

        # Act
        marked = ledger.mark_to_market(portfolio, {"aapl": "110", "NVDA": 500})

        # Assert
        assert [p.symbol for p in marked] == ["AAPL"]
        assert ledger.get(portfolio, "AAPL").market_value == Decimal("1100")
        assert ledger.get(portfolio, "MSFT").current_price == Decimal("300")
