"""
Core type definitions and protocols.

This module defines shared types and protocols for collaborators the ledger
consumes but does not own, such as the source of current market prices.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Protocol

# Type aliases for commonly used types
PriceMap = Mapping[str, Decimal | str | int | float]


class IPriceSource(Protocol):
    """Protocol for the latest observed price per symbol.

    Prices are supplied by an external feed; the ledger never fetches them.
    """

    def get(self, symbol: str) -> Decimal | None:
        """Return the latest known price or None."""
        ...

    def update(self, symbol: str, price: Decimal) -> None:
        """Remember a newly observed price."""
        ...

    def update_many(self, prices: PriceMap) -> dict[str, Decimal]:
        """Remember a batch of prices, all or none."""
        ...
