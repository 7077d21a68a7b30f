"""
Pricing infrastructure module.

Holds the latest externally supplied market prices.
"""

from .price_cache import PriceCache

__all__ = ["PriceCache"]
