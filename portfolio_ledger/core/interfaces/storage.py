"""
Storage interfaces for the ledger.

Services depend only on these abstractions so the ledger runs the same
against the in-memory implementation and a transactional database.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from contextlib import AbstractContextManager

from portfolio_ledger.core.enums import TradeStatus
from portfolio_ledger.core.models.portfolio import Portfolio, PortfolioSnapshot
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.models.profile import Profile
from portfolio_ledger.core.models.trade import Trade
from portfolio_ledger.core.models.watchlist import Alert, Watchlist


class IProfileRepository(ABC):
    """Profiles keyed uniquely by external identity."""

    @abstractmethod
    def get_by_external_id(self, external_id: str) -> Profile | None:
        """Look up a profile by its external identity."""

    @abstractmethod
    def get_or_create(
        self, external_id: str, factory: Callable[[], Profile]
    ) -> tuple[Profile, bool]:
        """Atomically return the existing profile or store the one built by factory.

        Returns:
            The profile and whether it was created by this call
        """

    @abstractmethod
    def save(self, profile: Profile) -> None:
        """Persist changes to an existing profile."""


class IPortfolioRepository(ABC):
    """Portfolio records and their valuation history."""

    @abstractmethod
    def get(self, portfolio_id: str) -> Portfolio | None:
        """Fetch a portfolio by id."""

    @abstractmethod
    def list_by_profile(self, profile_id: str) -> list[Portfolio]:
        """List a profile's portfolios in creation order."""

    @abstractmethod
    def save(self, portfolio: Portfolio) -> None:
        """Insert or update a portfolio."""

    @abstractmethod
    def add_snapshot(self, snapshot: PortfolioSnapshot) -> None:
        """Append a valuation snapshot to the portfolio's history."""

    @abstractmethod
    def list_snapshots(self, portfolio_id: str) -> list[PortfolioSnapshot]:
        """List snapshots oldest first."""


class IPositionRepository(ABC):
    """Positions, unique per (portfolio, symbol)."""

    @abstractmethod
    def get(self, portfolio_id: str, symbol: str) -> Position | None:
        """Fetch the position for a symbol."""

    @abstractmethod
    def upsert(self, position: Position) -> None:
        """Insert or replace the position keyed by (portfolio, symbol)."""

    @abstractmethod
    def list_by_portfolio(self, portfolio_id: str) -> list[Position]:
        """List all positions of a portfolio, ordered by symbol."""


class ITradeRepository(ABC):
    """Append-only trade log."""

    @abstractmethod
    def append(self, trade: Trade) -> Trade:
        """Append a trade and return it with its insertion sequence assigned."""

    @abstractmethod
    def get(self, portfolio_id: str, trade_id: str) -> Trade | None:
        """Fetch a trade of a portfolio."""

    @abstractmethod
    def update_status(self, trade: Trade, status: TradeStatus) -> Trade:
        """Persist a status transition (the only permitted mutation)."""

    @abstractmethod
    def list_recent(self, portfolio_id: str, limit: int) -> list[Trade]:
        """List up to limit trades, newest first."""


class IWatchlistRepository(ABC):
    """Watchlists owned by profiles."""

    @abstractmethod
    def get(self, watchlist_id: str) -> Watchlist | None:
        """Fetch a watchlist by id."""

    @abstractmethod
    def list_by_profile(self, profile_id: str) -> list[Watchlist]:
        """List a profile's watchlists in creation order."""

    @abstractmethod
    def save(self, watchlist: Watchlist) -> None:
        """Insert or update a watchlist."""


class IAlertRepository(ABC):
    """Price alerts owned by profiles."""

    @abstractmethod
    def get(self, alert_id: str) -> Alert | None:
        """Fetch an alert by id."""

    @abstractmethod
    def list_by_profile(self, profile_id: str, active_only: bool = False) -> list[Alert]:
        """List a profile's alerts in creation order."""

    @abstractmethod
    def save(self, alert: Alert) -> None:
        """Insert or update an alert."""


class ILedgerStorage(ABC):
    """Aggregate of all repositories plus the locking/transaction boundaries."""

    profiles: IProfileRepository
    portfolios: IPortfolioRepository
    positions: IPositionRepository
    trades: ITradeRepository
    watchlists: IWatchlistRepository
    alerts: IAlertRepository

    @abstractmethod
    def portfolio_transaction(self, portfolio_id: str) -> AbstractContextManager[None]:
        """Serialize and atomically group mutations of one portfolio.

        Reentrant: nested blocks on the same portfolio join the outer one.
        If the outermost block raises, every change made to the portfolio's
        cash, positions and trades inside it is discarded.
        """

    @abstractmethod
    def profile_lock(self, profile_id: str) -> AbstractContextManager[None]:
        """Serialize get-or-create style operations scoped to one profile."""
