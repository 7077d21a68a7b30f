"""
Portfolio store.

Owns portfolio records per profile: default creation, lookup, cash
settlement, derived valuation and valuation history.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from loguru import logger

from portfolio_ledger.core.exceptions.ledger import NotFoundError
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.portfolio import (
    Portfolio,
    PortfolioSnapshot,
    PortfolioValuation,
)
from portfolio_ledger.core.models.profile import Profile
from portfolio_ledger.core.types.financial import to_decimal
from portfolio_ledger.core.utils.identifiers import generate_id
from portfolio_ledger.core.utils.validation import validate_non_negative


class PortfolioStore:
    """Portfolio records owned by profiles."""

    def __init__(self, storage: ILedgerStorage, config: LedgerConfig | None = None) -> None:
        self.storage = storage
        self.config = config or LedgerConfig()

    def ensure_default(self, profile: Profile) -> Portfolio:
        """Return the profile's first portfolio, creating the default one if none exists.

        Creation happens under the profile lock so concurrent first accesses
        produce a single portfolio.
        """
        with self.storage.profile_lock(profile.id):
            existing = self.storage.portfolios.list_by_profile(profile.id)
            if existing:
                return existing[0]
            return self._create(
                profile, self.config.default_portfolio_name, self.config.starting_cash
            )

    def get(self, profile: Profile, portfolio_id: str) -> Portfolio:
        """Return a portfolio owned by profile.

        Raises:
            NotFoundError: If the portfolio is missing or owned by another profile
        """
        portfolio = self.storage.portfolios.get(portfolio_id)
        if portfolio is None or portfolio.profile_id != profile.id:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def list_portfolios(self, profile: Profile) -> list[Portfolio]:
        """List the profile's portfolios in creation order."""
        return self.storage.portfolios.list_by_profile(profile.id)

    def create(self, profile: Profile, name: str, cash_balance: Any | None = None) -> Portfolio:
        """Create an additional portfolio for profile."""
        cash = (
            self.config.starting_cash
            if cash_balance is None
            else validate_non_negative(cash_balance, "cash_balance")
        )
        with self.storage.profile_lock(profile.id):
            return self._create(profile, name, cash)

    def _create(self, profile: Profile, name: str, cash_balance: Decimal) -> Portfolio:
        now = datetime.now(UTC)
        portfolio = Portfolio(
            id=generate_id(),
            profile_id=profile.id,
            name=name,
            cash_balance=cash_balance,
            created_at=now,
            updated_at=now,
        )
        self.storage.portfolios.save(portfolio)
        logger.info(
            f"Created portfolio {portfolio.id} ({name!r}) for profile {profile.id} "
            f"with cash {cash_balance}"
        )
        return portfolio

    def _reload(self, portfolio: Portfolio) -> Portfolio:
        current = self.storage.portfolios.get(portfolio.id)
        if current is None:
            raise NotFoundError("Portfolio", portfolio.id)
        return current

    def adjust_cash(self, portfolio: Portfolio, delta: Any) -> Portfolio:
        """Apply a signed cash movement to the stored balance.

        Buying-power checks are the caller's responsibility; this only
        records the movement.
        """
        amount = to_decimal(delta, "delta")
        with self.storage.portfolio_transaction(portfolio.id):
            current = self._reload(portfolio)
            current.cash_balance += amount
            current.updated_at = datetime.now(UTC)
            self.storage.portfolios.save(current)
            return current

    def valuation(self, portfolio: Portfolio) -> PortfolioValuation:
        """Derive cash, market value and P&L totals from the stored positions."""
        with self.storage.portfolio_transaction(portfolio.id):
            current = self._reload(portfolio)
            positions = self.storage.positions.list_by_portfolio(portfolio.id)
            return PortfolioValuation.from_positions(current.cash_balance, positions)

    def total_value(self, portfolio: Portfolio) -> Decimal:
        """Cash balance plus market value of all positions."""
        return self.valuation(portfolio).total_value

    def record_snapshot(self, portfolio: Portfolio) -> PortfolioSnapshot:
        """Record the current valuation into the portfolio's history."""
        snapshot = PortfolioSnapshot(
            portfolio_id=portfolio.id,
            timestamp=datetime.now(UTC),
            valuation=self.valuation(portfolio),
        )
        self.storage.portfolios.add_snapshot(snapshot)
        return snapshot

    def history(self, portfolio: Portfolio) -> list[PortfolioSnapshot]:
        """Return recorded snapshots oldest first."""
        return self.storage.portfolios.list_snapshots(portfolio.id)
