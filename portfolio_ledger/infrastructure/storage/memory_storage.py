"""
In-memory ledger storage.

Thread-safe implementation of ILedgerStorage backed by dictionaries. Records
are deep-copied on the way in and out so callers never hold live references
to stored state; the only way to change stored data is through a repository.

Per-portfolio transactions take a reentrant lock for that portfolio, snapshot
its cash, positions and trades on entry, and restore the snapshot if the
outermost block raises.
"""

import copy
import itertools
from collections import defaultdict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import RLock
from typing import TypeVar

from loguru import logger

from portfolio_ledger.core.constants import MAX_PORTFOLIO_HISTORY, PORTFOLIO_HISTORY_TRIM_TO
from portfolio_ledger.core.enums import TradeStatus
from portfolio_ledger.core.exceptions.ledger import StorageError
from portfolio_ledger.core.interfaces.storage import (
    IAlertRepository,
    ILedgerStorage,
    IPortfolioRepository,
    IPositionRepository,
    IProfileRepository,
    ITradeRepository,
    IWatchlistRepository,
)
from portfolio_ledger.core.models.portfolio import Portfolio, PortfolioSnapshot
from portfolio_ledger.core.models.position import Position
from portfolio_ledger.core.models.profile import Profile
from portfolio_ledger.core.models.trade import Trade
from portfolio_ledger.core.models.watchlist import Alert, Watchlist

T = TypeVar("T")


def _copy(record: T) -> T:
    return copy.deepcopy(record)


@dataclass
class _MemoryState:
    """Shared tables of the in-memory store."""

    profiles: dict[str, Profile] = field(default_factory=dict)
    profile_ids_by_external: dict[str, str] = field(default_factory=dict)
    portfolios: dict[str, Portfolio] = field(default_factory=dict)
    snapshots: dict[str, list[PortfolioSnapshot]] = field(default_factory=lambda: defaultdict(list))
    positions: dict[str, dict[str, Position]] = field(default_factory=lambda: defaultdict(dict))
    trades: dict[str, list[Trade]] = field(default_factory=lambda: defaultdict(list))
    watchlists: dict[str, Watchlist] = field(default_factory=dict)
    alerts: dict[str, Alert] = field(default_factory=dict)
    lock: RLock = field(default_factory=RLock)


class InMemoryProfileRepository(IProfileRepository):
    """Profiles with a unique index on external identity."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    def get_by_external_id(self, external_id: str) -> Profile | None:
        with self._state.lock:
            profile_id = self._state.profile_ids_by_external.get(external_id)
            if profile_id is None:
                return None
            return _copy(self._state.profiles[profile_id])

    def get_or_create(
        self, external_id: str, factory: Callable[[], Profile]
    ) -> tuple[Profile, bool]:
        with self._state.lock:
            profile_id = self._state.profile_ids_by_external.get(external_id)
            if profile_id is not None:
                return _copy(self._state.profiles[profile_id]), False

            profile = factory()
            if profile.external_id != external_id:
                raise StorageError(
                    f"Profile factory returned external_id {profile.external_id!r}, "
                    f"expected {external_id!r}"
                )
            self._state.profiles[profile.id] = _copy(profile)
            self._state.profile_ids_by_external[external_id] = profile.id
            return _copy(profile), True

    def save(self, profile: Profile) -> None:
        with self._state.lock:
            existing_id = self._state.profile_ids_by_external.get(profile.external_id)
            if existing_id is not None and existing_id != profile.id:
                raise StorageError(f"Duplicate profile for external_id {profile.external_id!r}")
            self._state.profiles[profile.id] = _copy(profile)
            self._state.profile_ids_by_external[profile.external_id] = profile.id


class InMemoryPortfolioRepository(IPortfolioRepository):
    """Portfolio records and bounded snapshot history."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    def get(self, portfolio_id: str) -> Portfolio | None:
        with self._state.lock:
            portfolio = self._state.portfolios.get(portfolio_id)
            return _copy(portfolio) if portfolio is not None else None

    def list_by_profile(self, profile_id: str) -> list[Portfolio]:
        with self._state.lock:
            owned = [p for p in self._state.portfolios.values() if p.profile_id == profile_id]
            return [_copy(p) for p in sorted(owned, key=lambda p: p.created_at)]

    def save(self, portfolio: Portfolio) -> None:
        with self._state.lock:
            self._state.portfolios[portfolio.id] = _copy(portfolio)

    def add_snapshot(self, snapshot: PortfolioSnapshot) -> None:
        with self._state.lock:
            history = self._state.snapshots[snapshot.portfolio_id]
            history.append(snapshot)

            # Trim history if it exceeds the maximum limit
            if len(history) > MAX_PORTFOLIO_HISTORY:
                del history[: len(history) - PORTFOLIO_HISTORY_TRIM_TO]

    def list_snapshots(self, portfolio_id: str) -> list[PortfolioSnapshot]:
        with self._state.lock:
            return list(self._state.snapshots.get(portfolio_id, []))


class InMemoryPositionRepository(IPositionRepository):
    """Positions indexed by portfolio then symbol, so duplicates cannot exist."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    def get(self, portfolio_id: str, symbol: str) -> Position | None:
        with self._state.lock:
            position = self._state.positions.get(portfolio_id, {}).get(symbol)
            return _copy(position) if position is not None else None

    def upsert(self, position: Position) -> None:
        with self._state.lock:
            held = self._state.positions[position.portfolio_id]
            existing = held.get(position.symbol)
            if existing is not None and existing.id != position.id:
                raise StorageError(
                    f"Position for {position.symbol} already exists in portfolio "
                    f"{position.portfolio_id} with id {existing.id}"
                )
            held[position.symbol] = _copy(position)

    def list_by_portfolio(self, portfolio_id: str) -> list[Position]:
        with self._state.lock:
            held = self._state.positions.get(portfolio_id, {})
            return [_copy(held[symbol]) for symbol in sorted(held)]


class InMemoryTradeRepository(ITradeRepository):
    """Append-only trade lists per portfolio."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state
        self._sequence = itertools.count(1)

    def append(self, trade: Trade) -> Trade:
        with self._state.lock:
            log = self._state.trades[trade.portfolio_id]
            if any(t.id == trade.id for t in log):
                raise StorageError(f"Trade {trade.id} already recorded")
            stored = _copy(trade)
            stored.sequence = next(self._sequence)
            log.append(stored)
            return _copy(stored)

    def get(self, portfolio_id: str, trade_id: str) -> Trade | None:
        with self._state.lock:
            for trade in self._state.trades.get(portfolio_id, []):
                if trade.id == trade_id:
                    return _copy(trade)
            return None

    def update_status(self, trade: Trade, status: TradeStatus) -> Trade:
        with self._state.lock:
            for stored in self._state.trades.get(trade.portfolio_id, []):
                if stored.id == trade.id:
                    stored.status = status
                    stored.executed_at = trade.executed_at
                    return _copy(stored)
            raise StorageError(f"Trade {trade.id} is not recorded")

    def list_recent(self, portfolio_id: str, limit: int) -> list[Trade]:
        with self._state.lock:
            log = self._state.trades.get(portfolio_id, [])
            newest_first = sorted(log, key=lambda t: (t.created_at, t.sequence), reverse=True)
            return [_copy(t) for t in newest_first[:limit]]


class InMemoryWatchlistRepository(IWatchlistRepository):
    """Watchlists keyed by id."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    def get(self, watchlist_id: str) -> Watchlist | None:
        with self._state.lock:
            watchlist = self._state.watchlists.get(watchlist_id)
            return _copy(watchlist) if watchlist is not None else None

    def list_by_profile(self, profile_id: str) -> list[Watchlist]:
        with self._state.lock:
            owned = [w for w in self._state.watchlists.values() if w.profile_id == profile_id]
            return [_copy(w) for w in sorted(owned, key=lambda w: w.created_at)]

    def save(self, watchlist: Watchlist) -> None:
        with self._state.lock:
            self._state.watchlists[watchlist.id] = _copy(watchlist)


class InMemoryAlertRepository(IAlertRepository):
    """Alerts keyed by id."""

    def __init__(self, state: _MemoryState) -> None:
        self._state = state

    def get(self, alert_id: str) -> Alert | None:
        with self._state.lock:
            alert = self._state.alerts.get(alert_id)
            return _copy(alert) if alert is not None else None

    def list_by_profile(self, profile_id: str, active_only: bool = False) -> list[Alert]:
        with self._state.lock:
            owned = [
                a
                for a in self._state.alerts.values()
                if a.profile_id == profile_id and (a.is_active or not active_only)
            ]
            return [_copy(a) for a in sorted(owned, key=lambda a: a.created_at)]

    def save(self, alert: Alert) -> None:
        with self._state.lock:
            self._state.alerts[alert.id] = _copy(alert)


@dataclass
class _PortfolioRollback:
    """State of one portfolio captured when its outermost transaction starts."""

    portfolio: Portfolio | None
    positions: dict[str, Position]
    trades: list[Trade]


class InMemoryLedgerStorage(ILedgerStorage):
    """In-memory ILedgerStorage with per-portfolio locking and rollback.

    Thread Safety:
        Every repository call is atomic under a shared table lock. Mutations
        of one portfolio are additionally serialized by its own RLock inside
        portfolio_transaction, so read-modify-write sequences (fills, cash
        settlement) never interleave. Different portfolios do not block each
        other beyond the short table-lock critical sections.
    """

    def __init__(self) -> None:
        self._state = _MemoryState()
        self.profiles = InMemoryProfileRepository(self._state)
        self.portfolios = InMemoryPortfolioRepository(self._state)
        self.positions = InMemoryPositionRepository(self._state)
        self.trades = InMemoryTradeRepository(self._state)
        self.watchlists = InMemoryWatchlistRepository(self._state)
        self.alerts = InMemoryAlertRepository(self._state)

        self._registry_lock = RLock()
        self._portfolio_locks: dict[str, RLock] = {}
        self._profile_locks: dict[str, RLock] = {}
        self._depth: dict[str, int] = {}

    def _lock_for(self, registry: dict[str, RLock], key: str) -> RLock:
        with self._registry_lock:
            lock = registry.get(key)
            if lock is None:
                lock = registry[key] = RLock()
            return lock

    def _capture(self, portfolio_id: str) -> _PortfolioRollback:
        # Snapshot history is append-only and stays outside the rollback
        with self._state.lock:
            return _PortfolioRollback(
                portfolio=_copy(self._state.portfolios.get(portfolio_id)),
                positions=_copy(dict(self._state.positions.get(portfolio_id, {}))),
                trades=_copy(list(self._state.trades.get(portfolio_id, []))),
            )

    def _restore(self, portfolio_id: str, saved: _PortfolioRollback) -> None:
        with self._state.lock:
            if saved.portfolio is None:
                self._state.portfolios.pop(portfolio_id, None)
            else:
                self._state.portfolios[portfolio_id] = saved.portfolio
            self._state.positions[portfolio_id] = saved.positions
            self._state.trades[portfolio_id] = saved.trades

    @contextmanager
    def portfolio_transaction(self, portfolio_id: str) -> Iterator[None]:
        lock = self._lock_for(self._portfolio_locks, portfolio_id)
        with lock:
            depth = self._depth.get(portfolio_id, 0)
            saved = self._capture(portfolio_id) if depth == 0 else None
            self._depth[portfolio_id] = depth + 1
            try:
                yield
            except BaseException:
                if saved is not None:
                    self._restore(portfolio_id, saved)
                    logger.debug(f"Rolled back portfolio {portfolio_id} transaction")
                raise
            finally:
                self._depth[portfolio_id] = depth

    @contextmanager
    def profile_lock(self, profile_id: str) -> Iterator[None]:
        with self._lock_for(self._profile_locks, profile_id):
            yield
