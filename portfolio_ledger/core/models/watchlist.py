"""
Watchlist and alert domain models.

Purely descriptive state: nothing here is derived from trades or positions.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from portfolio_ledger.core.enums import AlertCondition
from portfolio_ledger.core.exceptions.ledger import ValidationError
from portfolio_ledger.core.types.financial import ZERO, to_decimal


@dataclass
class Watchlist:
    """Ordered set of tracked symbols owned by a profile."""

    id: str
    profile_id: str
    name: str
    symbols: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Drop duplicate symbols, keeping first occurrence order."""
        self.symbols = list(dict.fromkeys(self.symbols))

    def add_symbol(self, symbol: str) -> bool:
        """Append symbol if not yet tracked. Returns True if it was added."""
        if symbol in self.symbols:
            return False
        self.symbols.append(symbol)
        self.updated_at = datetime.now(UTC)
        return True

    def remove_symbol(self, symbol: str) -> bool:
        """Remove symbol if tracked. Returns True if it was removed."""
        if symbol not in self.symbols:
            return False
        self.symbols.remove(symbol)
        self.updated_at = datetime.now(UTC)
        return True


@dataclass
class Alert:
    """Price trigger condition on a symbol."""

    id: str
    profile_id: str
    symbol: str
    condition: AlertCondition
    target_price: Decimal
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate alert data after initialization."""
        self.target_price = to_decimal(self.target_price, "target_price")
        if self.target_price <= ZERO:
            raise ValidationError(f"Target price must be positive, got {self.target_price}")
