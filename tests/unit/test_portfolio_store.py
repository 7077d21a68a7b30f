"""
Unit tests for the portfolio store.
"""

from decimal import Decimal

import pytest

from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import NotFoundError, ValidationError
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.profile import Profile
from portfolio_ledger.core.services.identity import IdentityResolver
from portfolio_ledger.core.services.portfolio_store import PortfolioStore
from portfolio_ledger.core.services.position_ledger import PositionLedger
from portfolio_ledger.infrastructure.storage import InMemoryLedgerStorage


class TestPortfolioStore:
    """Tests for PortfolioStore."""

    @pytest.fixture
    def storage(self) -> InMemoryLedgerStorage:
        return InMemoryLedgerStorage()

    @pytest.fixture
    def store(self, storage: InMemoryLedgerStorage) -> PortfolioStore:
        return PortfolioStore(storage, LedgerConfig(starting_cash=Decimal("5000")))

    @pytest.fixture
    def profile(self, storage: InMemoryLedgerStorage) -> Profile:
        return IdentityResolver(storage).resolve("user-1")

    def test_should_create_default_portfolio_once(
        self, store: PortfolioStore, profile: Profile
    ) -> None:
        """Test default creation with configured starting cash."""
        # Act
        first = store.ensure_default(profile)
        second = store.ensure_default(profile)

        # Assert
        assert first.id == second.id
        assert first.name == "Main Portfolio"
        assert first.cash_balance == Decimal("5000")
        assert len(store.list_portfolios(profile)) == 1

    def test_should_create_additional_portfolio(
        self, store: PortfolioStore, profile: Profile
    ) -> None:
        default = store.ensure_default(profile)

        extra = store.create(profile, "Crypto", Decimal("250"))

        assert [p.id for p in store.list_portfolios(profile)] == [default.id, extra.id]
        assert store.ensure_default(profile).id == default.id

    def test_should_reject_negative_cash_on_create(
        self, store: PortfolioStore, profile: Profile
    ) -> None:
        with pytest.raises(ValidationError):
            store.create(profile, "Bad", Decimal("-1"))

    def test_should_hide_other_profiles_portfolios(
        self, storage: InMemoryLedgerStorage, store: PortfolioStore, profile: Profile
    ) -> None:
        portfolio = store.ensure_default(profile)
        stranger = IdentityResolver(storage).resolve("user-2")

        with pytest.raises(NotFoundError):
            store.get(stranger, portfolio.id)

    def test_should_adjust_cash(self, store: PortfolioStore, profile: Profile) -> None:
        portfolio = store.ensure_default(profile)

        updated = store.adjust_cash(portfolio, Decimal("-1200.50"))

        assert updated.cash_balance == Decimal("3799.50")
        assert store.get(profile, portfolio.id).cash_balance == Decimal("3799.50")

    def test_should_derive_total_value_from_positions(
        self, storage: InMemoryLedgerStorage, store: PortfolioStore, profile: Profile
    ) -> None:
        """Test total value tracks position changes without being stored."""
        # Arrange
        portfolio = store.ensure_default(profile)
        ledger = PositionLedger(storage)
        ledger.apply_fill(portfolio, "AAPL", TradeSide.BUY, 10, 100, 100)

        # Act
        before = store.total_value(portfolio)
        ledger.mark_price(portfolio, "AAPL", 120)
        after = store.total_value(portfolio)

        # Assert
        assert before == Decimal("6000")
        assert after == Decimal("6200")

    def test_should_record_history_oldest_first(
        self, store: PortfolioStore, profile: Profile
    ) -> None:
        portfolio = store.ensure_default(profile)

        first = store.record_snapshot(portfolio)
        store.adjust_cash(portfolio, Decimal("100"))
        second = store.record_snapshot(portfolio)

        history = store.history(portfolio)
        assert history == [first, second]
        assert history[1].valuation.total_value == Decimal("5100")
