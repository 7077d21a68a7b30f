"""
Portfolio domain models.

The portfolio record stores cash only. Total value is always derived from
cash and the current positions (see PortfolioValuation) so it cannot go
stale when a position changes.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from portfolio_ledger.core.exceptions.ledger import ValidationError
from portfolio_ledger.core.types.financial import ZERO, to_decimal

if TYPE_CHECKING:
    from portfolio_ledger.core.models.position import Position


@dataclass
class Portfolio:
    """A profile's cash account that owns positions and trades."""

    id: str
    profile_id: str
    name: str
    cash_balance: Decimal
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Normalize cash to Decimal and validate the name."""
        self.cash_balance = to_decimal(self.cash_balance, "cash_balance")
        if not self.name or not self.name.strip():
            raise ValidationError("Portfolio name must not be empty")


@dataclass(frozen=True)
class PortfolioValuation:
    """Point-in-time valuation of a portfolio derived from its positions."""

    cash_balance: Decimal
    market_value: Decimal
    unrealized_pnl: Decimal
    realized_pnl: Decimal
    positions: int

    @property
    def total_value(self) -> Decimal:
        """Cash plus market value of every position."""
        return self.cash_balance + self.market_value

    @classmethod
    def from_positions(
        cls, cash_balance: Decimal, positions: Iterable["Position"]
    ) -> "PortfolioValuation":
        """Build a valuation from cash and the portfolio's positions."""
        market_value = ZERO
        unrealized_pnl = ZERO
        realized_pnl = ZERO
        open_positions = 0

        for position in positions:
            market_value += position.market_value
            unrealized_pnl += position.unrealized_pnl
            realized_pnl += position.realized_pnl
            if position.is_open:
                open_positions += 1

        return cls(
            cash_balance=cash_balance,
            market_value=market_value,
            unrealized_pnl=unrealized_pnl,
            realized_pnl=realized_pnl,
            positions=open_positions,
        )

    def to_dict(self) -> dict:
        """Convert valuation to dictionary."""
        return {
            "cash_balance": self.cash_balance,
            "market_value": self.market_value,
            "unrealized_pnl": self.unrealized_pnl,
            "realized_pnl": self.realized_pnl,
            "total_value": self.total_value,
            "positions": self.positions,
        }


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Valuation of a portfolio recorded at a given time."""

    portfolio_id: str
    timestamp: datetime
    valuation: PortfolioValuation

    def to_dict(self) -> dict:
        """Flatten the snapshot into a single dictionary."""
        return {
            "portfolio_id": self.portfolio_id,
            "timestamp": self.timestamp,
            **self.valuation.to_dict(),
        }
