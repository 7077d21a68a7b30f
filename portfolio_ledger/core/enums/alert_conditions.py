"""
Alert condition enumerations.
"""

from decimal import Decimal
from enum import StrEnum


class AlertCondition(StrEnum):
    """Price trigger condition of an alert."""

    ABOVE = "above"
    BELOW = "below"

    def is_met(self, price: Decimal, target_price: Decimal) -> bool:
        """Check whether a price satisfies the condition against a target.

        Evaluation of live prices belongs to an external monitor; this helper
        only states what the condition means.
        """
        if self == self.ABOVE:
            return price > target_price
        return price < target_price
