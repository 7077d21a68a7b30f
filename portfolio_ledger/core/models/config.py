"""
Ledger configuration model.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from portfolio_ledger.core.constants import (
    DEFAULT_PORTFOLIO_NAME,
    DEFAULT_PRICE_CACHE_SIZE,
    DEFAULT_PRICE_CACHE_TTL_SECONDS,
    DEFAULT_STARTING_CASH,
    DEFAULT_WATCHLIST_NAME,
    DEFAULT_WATCHLIST_SYMBOLS,
)
from portfolio_ledger.core.exceptions.ledger import ConfigurationError, ValidationError
from portfolio_ledger.core.types.financial import ZERO, to_decimal


@dataclass
class LedgerConfig:
    """Configuration for the ledger services."""

    starting_cash: Decimal = field(default_factory=lambda: Decimal(DEFAULT_STARTING_CASH))
    default_portfolio_name: str = DEFAULT_PORTFOLIO_NAME
    default_watchlist_name: str = DEFAULT_WATCHLIST_NAME
    default_watchlist_symbols: tuple[str, ...] = DEFAULT_WATCHLIST_SYMBOLS
    allow_short_selling: bool = False
    enforce_buying_power: bool = True
    price_cache_ttl_seconds: float = DEFAULT_PRICE_CACHE_TTL_SECONDS
    price_cache_size: int = DEFAULT_PRICE_CACHE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        try:
            self.starting_cash = to_decimal(self.starting_cash, "starting_cash")
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        if self.starting_cash < ZERO:
            raise ConfigurationError(
                f"starting_cash must be non-negative, got {self.starting_cash}"
            )
        if not self.default_portfolio_name.strip():
            raise ConfigurationError("default_portfolio_name must not be empty")
        if not self.default_watchlist_name.strip():
            raise ConfigurationError("default_watchlist_name must not be empty")
        if self.price_cache_ttl_seconds <= 0:
            raise ConfigurationError(
                f"price_cache_ttl_seconds must be positive, got {self.price_cache_ttl_seconds}"
            )
        if self.price_cache_size <= 0:
            raise ConfigurationError(
                f"price_cache_size must be positive, got {self.price_cache_size}"
            )

        self.default_watchlist_symbols = tuple(
            s.strip().upper() for s in self.default_watchlist_symbols
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "starting_cash": str(self.starting_cash),
            "default_portfolio_name": self.default_portfolio_name,
            "default_watchlist_name": self.default_watchlist_name,
            "default_watchlist_symbols": list(self.default_watchlist_symbols),
            "allow_short_selling": self.allow_short_selling,
            "enforce_buying_power": self.enforce_buying_power,
            "price_cache_ttl_seconds": self.price_cache_ttl_seconds,
            "price_cache_size": self.price_cache_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerConfig":
        """Create config from a dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "default_watchlist_symbols" in known:
            known["default_watchlist_symbols"] = tuple(known["default_watchlist_symbols"])
        return cls(**known)
