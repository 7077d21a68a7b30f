"""
Storage infrastructure module.

Provides the in-memory implementation of the ledger storage interfaces.
"""

from .memory_storage import InMemoryLedgerStorage

__all__ = ["InMemoryLedgerStorage"]
