"""
Latest-price cache.

Keeps the most recent price observed for each symbol, as supplied by the
external feed or by executed fills. Entries expire after a TTL so a stale
mark is never mistaken for a current one.
"""

from collections.abc import Mapping
from decimal import Decimal
from threading import RLock
from typing import Any

from cachetools import TTLCache
from loguru import logger

from portfolio_ledger.core.constants import (
    DEFAULT_PRICE_CACHE_SIZE,
    DEFAULT_PRICE_CACHE_TTL_SECONDS,
)
from portfolio_ledger.core.utils.validation import validate_symbol, validate_trade_price


class PriceCache:
    """Thread-safe TTL cache of the latest price per symbol.

    Implements the IPriceSource protocol.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_PRICE_CACHE_TTL_SECONDS,
        max_size: int = DEFAULT_PRICE_CACHE_SIZE,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Seconds before a price is considered stale
            max_size: Maximum number of symbols retained
        """
        self._cache: TTLCache[str, Decimal] = TTLCache(maxsize=max_size, ttl=ttl_seconds)
        self._lock = RLock()
        self.stats = {"hits": 0, "misses": 0, "updates": 0}

    def get(self, symbol: str) -> Decimal | None:
        """Return the latest price for symbol, or None if unknown or expired."""
        key = validate_symbol(symbol)
        with self._lock:
            price = self._cache.get(key)
            if price is None:
                self.stats["misses"] += 1
            else:
                self.stats["hits"] += 1
            return price

    def update(self, symbol: str, price: Any) -> None:
        """Record a newly observed price."""
        key = validate_symbol(symbol)
        value = validate_trade_price(price, "current_price")
        with self._lock:
            self._cache[key] = value
            self.stats["updates"] += 1
        logger.debug(f"Price cache updated: {key}={value}")

    def update_many(self, prices: Mapping[str, Any]) -> dict[str, Decimal]:
        """Record several prices at once and return them normalized."""
        normalized = {
            validate_symbol(symbol): validate_trade_price(price, "current_price")
            for symbol, price in prices.items()
        }
        with self._lock:
            for symbol, price in normalized.items():
                self._cache[symbol] = price
            self.stats["updates"] += len(normalized)
        return normalized

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
