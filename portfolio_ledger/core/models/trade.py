"""
Trade domain model.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from portfolio_ledger.core.enums import TradeSide, TradeStatus
from portfolio_ledger.core.exceptions.ledger import InvalidTradeParameters, ValidationError
from portfolio_ledger.core.types.financial import ZERO, calculate_notional_value, to_decimal


@dataclass
class Trade:
    """Represents a recorded trade instruction.

    Everything except ``status`` (and the ``executed_at`` stamp that comes
    with a fill) is fixed once the trade is written.
    """

    id: str
    portfolio_id: str
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    status: TradeStatus = TradeStatus.FILLED
    executed_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    sequence: int = 0

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        self.quantity = to_decimal(self.quantity, "quantity")
        self.price = to_decimal(self.price, "price")

        if self.quantity <= ZERO:
            raise InvalidTradeParameters("quantity", self.quantity)
        if self.price <= ZERO:
            raise InvalidTradeParameters("price", self.price)
        if self.status == TradeStatus.FILLED and self.executed_at is None:
            raise ValidationError("Filled trade must have an execution timestamp")

    @property
    def total_amount(self) -> Decimal:
        """Quantity × price."""
        return calculate_notional_value(self.quantity, self.price)

    @property
    def signed_quantity(self) -> Decimal:
        """Quantity with the side's sign applied."""
        return self.quantity * self.side.sign

    def to_dict(self) -> dict:
        """Convert trade to dictionary."""
        return {
            "id": self.id,
            "portfolio_id": self.portfolio_id,
            "symbol": self.symbol,
            "side": self.side.value,
            "quantity": self.quantity,
            "price": self.price,
            "total_amount": self.total_amount,
            "status": self.status.value,
            "executed_at": self.executed_at,
            "created_at": self.created_at,
        }
