"""
Position domain model.

Implements weighted-average cost-basis accounting for a single
(portfolio, symbol) holding. Quantity is signed: positive is long,
negative is short.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger

from portfolio_ledger.core.exceptions.ledger import ValidationError
from portfolio_ledger.core.types.financial import (
    ZERO,
    calculate_notional_value,
    calculate_realized_pnl,
    calculate_weighted_average_cost,
    sign_of,
    to_decimal,
)


@dataclass
class Position:
    """Holding of one symbol inside a portfolio.

    Market value and unrealized P&L are properties computed from the stored
    quantity, average cost and current price, so they are never stale.
    """

    id: str
    portfolio_id: str
    symbol: str
    quantity: Decimal
    average_cost: Decimal
    current_price: Decimal
    realized_pnl: Decimal = ZERO
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate and normalize position data after initialization."""
        self.quantity = to_decimal(self.quantity, "quantity")
        self.average_cost = to_decimal(self.average_cost, "average_cost")
        self.current_price = to_decimal(self.current_price, "current_price")
        self.realized_pnl = to_decimal(self.realized_pnl, "realized_pnl")

        if self.average_cost < ZERO:
            raise ValidationError(f"Average cost must be non-negative, got {self.average_cost}")
        if self.current_price <= ZERO:
            raise ValidationError(f"Current price must be positive, got {self.current_price}")

    @property
    def market_value(self) -> Decimal:
        """Quantity × current price (negative for shorts)."""
        return calculate_notional_value(self.quantity, self.current_price)

    @property
    def unrealized_pnl(self) -> Decimal:
        """(current price − average cost) × quantity."""
        return (self.current_price - self.average_cost) * self.quantity

    @property
    def cost_basis(self) -> Decimal:
        """Average cost × quantity."""
        return self.average_cost * self.quantity

    @property
    def direction(self) -> int:
        """1 for long, -1 for short, 0 when closed."""
        return sign_of(self.quantity)

    @property
    def is_open(self) -> bool:
        return self.quantity != ZERO

    @property
    def is_long(self) -> bool:
        return self.quantity > ZERO

    @property
    def is_short(self) -> bool:
        return self.quantity < ZERO

    @classmethod
    def open(
        cls,
        position_id: str,
        portfolio_id: str,
        symbol: str,
        quantity: Decimal,
        execution_price: Decimal,
        current_price: Decimal,
    ) -> "Position":
        """Factory method to create a position from its first fill.

        Args:
            position_id: Identifier for the new record
            portfolio_id: Owning portfolio
            symbol: Normalized ticker
            quantity: Signed quantity of the opening fill
            execution_price: Fill price, used as the initial average cost
            current_price: Latest observed market price

        Returns:
            New Position instance
        """
        now = datetime.now(UTC)
        return cls(
            id=position_id,
            portfolio_id=portfolio_id,
            symbol=symbol,
            quantity=quantity,
            average_cost=execution_price,
            current_price=current_price,
            created_at=now,
            updated_at=now,
        )

    def apply_fill(
        self, delta: Decimal, execution_price: Decimal, current_price: Decimal
    ) -> Decimal:
        """Apply a signed fill to this position.

        - Closed position: reopens with average cost = execution price.
        - Same-direction add: weighted-average cost basis.
        - Reduction: average cost unchanged, P&L realized against it; a full
          close resets average cost to zero.
        - Reversal through zero: the old side is closed at its cost basis and
          the remainder opens at the execution price.

        Args:
            delta: Signed fill quantity (+buy / −sell)
            execution_price: Fill price
            current_price: Latest market price; always becomes the new mark

        Returns:
            P&L realized by this fill
        """
        if delta == ZERO:
            raise ValidationError("Fill quantity must not be zero")

        q0 = self.quantity
        c0 = self.average_cost
        q1 = q0 + delta
        realized = ZERO

        if q0 == ZERO:
            c1 = execution_price
        elif sign_of(delta) == sign_of(q0):
            c1 = calculate_weighted_average_cost(q0, c0, delta, execution_price)
        else:
            closed_quantity = min(abs(delta), abs(q0))
            realized = calculate_realized_pnl(c0, execution_price, closed_quantity, sign_of(q0))

            if q1 == ZERO:
                c1 = ZERO
            elif sign_of(q1) == sign_of(q0):
                c1 = c0
            else:
                c1 = execution_price

            logger.debug(
                f"Reduced {self.symbol} from {q0} to {q1}: realized {realized} "
                f"against cost basis {c0}, average cost now {c1}"
            )

        self.quantity = q1
        self.average_cost = c1
        self.current_price = current_price
        self.realized_pnl += realized
        self.updated_at = datetime.now(UTC)
        return realized

    def mark(self, current_price: Decimal) -> None:
        """Update the mark price without trading."""
        if current_price <= ZERO:
            raise ValidationError(f"Current price must be positive, got {current_price}")
        self.current_price = current_price
        self.updated_at = datetime.now(UTC)

    def to_dict(self) -> dict:
        """Convert position snapshot to dictionary."""
        return {
            "id": self.id,
            "portfolio_id": self.portfolio_id,
            "symbol": self.symbol,
            "quantity": self.quantity,
            "average_cost": self.average_cost,
            "current_price": self.current_price,
            "market_value": self.market_value,
            "unrealized_pnl": self.unrealized_pnl,
            "realized_pnl": self.realized_pnl,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
