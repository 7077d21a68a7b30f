"""
Watchlist and alert store.

Per-profile tracked symbols and price-trigger conditions. Evaluating alerts
against live prices is left to an external monitor.
"""

from datetime import UTC, datetime
from typing import Any

from loguru import logger

from portfolio_ledger.core.enums import AlertCondition
from portfolio_ledger.core.exceptions.ledger import NotFoundError, ValidationError
from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.models.profile import Profile
from portfolio_ledger.core.models.watchlist import Alert, Watchlist
from portfolio_ledger.core.utils.identifiers import generate_id
from portfolio_ledger.core.utils.validation import validate_positive, validate_symbol


class WatchlistStore:
    """Watchlists and alerts owned by profiles."""

    def __init__(self, storage: ILedgerStorage, config: LedgerConfig | None = None) -> None:
        self.storage = storage
        self.config = config or LedgerConfig()

    # Watchlists
    def ensure_default(self, profile: Profile) -> Watchlist:
        """Return the profile's first watchlist, seeding the default one if none exists."""
        with self.storage.profile_lock(profile.id):
            existing = self.storage.watchlists.list_by_profile(profile.id)
            if existing:
                return existing[0]

            now = datetime.now(UTC)
            watchlist = Watchlist(
                id=generate_id(),
                profile_id=profile.id,
                name=self.config.default_watchlist_name,
                symbols=list(self.config.default_watchlist_symbols),
                created_at=now,
                updated_at=now,
            )
            self.storage.watchlists.save(watchlist)
            logger.debug(f"Created default watchlist {watchlist.id} for profile {profile.id}")
            return watchlist

    def list_watchlists(self, profile: Profile) -> list[Watchlist]:
        return self.storage.watchlists.list_by_profile(profile.id)

    def get_watchlist(self, profile: Profile, watchlist_id: str) -> Watchlist:
        watchlist = self.storage.watchlists.get(watchlist_id)
        if watchlist is None or watchlist.profile_id != profile.id:
            raise NotFoundError("Watchlist", watchlist_id)
        return watchlist

    def add_symbol(self, profile: Profile, watchlist_id: str, symbol: str) -> Watchlist:
        """Append symbol to the watchlist; already tracked symbols keep their place."""
        symbol = validate_symbol(symbol)
        with self.storage.profile_lock(profile.id):
            watchlist = self.get_watchlist(profile, watchlist_id)
            if watchlist.add_symbol(symbol):
                self.storage.watchlists.save(watchlist)
            return watchlist

    def remove_symbol(self, profile: Profile, watchlist_id: str, symbol: str) -> Watchlist:
        """Remove symbol from the watchlist if present."""
        symbol = validate_symbol(symbol)
        with self.storage.profile_lock(profile.id):
            watchlist = self.get_watchlist(profile, watchlist_id)
            if watchlist.remove_symbol(symbol):
                self.storage.watchlists.save(watchlist)
            return watchlist

    # Alerts
    def create_alert(
        self,
        profile: Profile,
        symbol: str,
        condition: AlertCondition | str,
        target_price: Any,
    ) -> Alert:
        """Create an active price alert."""
        symbol = validate_symbol(symbol)
        try:
            condition = AlertCondition(condition)
        except ValueError as e:
            raise ValidationError(f"Unsupported alert condition: {condition}") from e
        target = validate_positive(target_price, "target_price")

        alert = Alert(
            id=generate_id(),
            profile_id=profile.id,
            symbol=symbol,
            condition=condition,
            target_price=target,
            is_active=True,
        )
        self.storage.alerts.save(alert)
        logger.debug(f"Created alert {alert.id}: {symbol} {condition} {target}")
        return alert

    def list_active_alerts(self, profile: Profile) -> list[Alert]:
        return self.storage.alerts.list_by_profile(profile.id, active_only=True)

    def list_alerts(self, profile: Profile) -> list[Alert]:
        return self.storage.alerts.list_by_profile(profile.id)

    def get_alert(self, profile: Profile, alert_id: str) -> Alert:
        alert = self.storage.alerts.get(alert_id)
        if alert is None or alert.profile_id != profile.id:
            raise NotFoundError("Alert", alert_id)
        return alert

    def set_alert_active(self, profile: Profile, alert_id: str, active: bool) -> Alert:
        """Enable or disable an alert."""
        with self.storage.profile_lock(profile.id):
            alert = self.get_alert(profile, alert_id)
            if alert.is_active != active:
                alert.is_active = active
                self.storage.alerts.save(alert)
            return alert
