"""
Trade side and status enumerations.

This module defines the allowed trade sides and the trade status lifecycle.
"""

from enum import StrEnum


class TradeSide(StrEnum):
    """
    Allowed trade sides.

    Defines whether a trade adds to or removes from a holding.
    """

    BUY = "buy"
    SELL = "sell"

    @property
    def sign(self) -> int:
        """Direction multiplier applied to the traded quantity."""
        return 1 if self == self.BUY else -1

    @classmethod
    def from_string(cls, value: str) -> "TradeSide":
        """
        Convert string to TradeSide enum, with case-insensitive matching.

        Args:
            value: String representation of the side

        Returns:
            Corresponding TradeSide enum value

        Raises:
            ValueError: If side is not supported
        """
        value_lower = value.strip().lower()
        for side in cls:
            if side.value == value_lower:
                return side

        raise ValueError(
            f"Unsupported trade side: {value}. "
            f"Supported sides: {', '.join([s.value for s in cls])}"
        )


class TradeStatus(StrEnum):
    """
    Trade lifecycle states.

    A trade is pending until it is filled or cancelled; both of those
    states are terminal.
    """

    PENDING = "pending"
    FILLED = "filled"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if no further status transition is allowed."""
        return self in [self.FILLED, self.CANCELLED]

    def can_transition_to(self, target: "TradeStatus") -> bool:
        """Check if moving from this status to target is permitted."""
        return not self.is_terminal and target.is_terminal
