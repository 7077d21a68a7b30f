"""
Wiring of the default ledger implementation.
"""

from portfolio_ledger.core.interfaces.storage import ILedgerStorage
from portfolio_ledger.core.models.config import LedgerConfig
from portfolio_ledger.core.services.trading_ledger import TradingLedger
from portfolio_ledger.infrastructure.pricing import PriceCache
from portfolio_ledger.infrastructure.storage import InMemoryLedgerStorage


def build_trading_ledger(
    config: LedgerConfig | None = None, storage: ILedgerStorage | None = None
) -> TradingLedger:
    """Build a TradingLedger with a price cache and in-memory storage unless one is given."""
    config = config or LedgerConfig()
    price_cache = PriceCache(
        ttl_seconds=config.price_cache_ttl_seconds, max_size=config.price_cache_size
    )
    return TradingLedger(
        storage=storage or InMemoryLedgerStorage(),
        config=config,
        price_source=price_cache,
    )
