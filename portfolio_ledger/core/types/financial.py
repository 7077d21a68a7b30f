"""
Financial data types for ledger calculations.

All currency, price and quantity values are ``decimal.Decimal``. Inputs are
converted through ``to_decimal`` which goes via ``str`` for floats, so
``to_decimal(0.1)`` is ``Decimal("0.1")`` and not the binary expansion.

Only divisions are rounded (average cost). Products such as market value and
notional value stay exact so that ``market_value == quantity * price`` holds
without tolerance.
"""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from portfolio_ledger.core.constants import (
    COST_DECIMALS,
    PRICE_DECIMALS,
    QUANTITY_DECIMALS,
)
from portfolio_ledger.core.exceptions.ledger import ValidationError

ZERO = Decimal("0")

_COST_QUANT = Decimal(1).scaleb(-COST_DECIMALS)
_PRICE_QUANT = Decimal(1).scaleb(-PRICE_DECIMALS)
_QUANTITY_QUANT = Decimal(1).scaleb(-QUANTITY_DECIMALS)


def to_decimal(value: Decimal | str | int | float, param_name: str = "value") -> Decimal:
    """Convert various numeric types to Decimal.

    Args:
        value: Numeric value to convert
        param_name: Parameter name for error messages

    Returns:
        Decimal representation of the value

    Raises:
        ValidationError: If the value is not a finite number

    Examples:
        >>> to_decimal(50000)
        Decimal('50000')
        >>> to_decimal(0.1)
        Decimal('0.1')
    """
    if isinstance(value, bool):
        raise ValidationError(f"{param_name} must be numeric, got bool")

    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(f"{param_name} must be numeric, got {value!r}") from e

    if not result.is_finite():
        raise ValidationError(f"{param_name} must be finite, got {value!r}")
    return result


def round_cost(cost: Decimal) -> Decimal:
    """Round an average cost to ledger precision."""
    return cost.quantize(_COST_QUANT, rounding=ROUND_HALF_EVEN)


def round_price(price: Decimal) -> Decimal:
    """Round a price to ledger precision."""
    return price.quantize(_PRICE_QUANT, rounding=ROUND_HALF_EVEN)


def round_quantity(quantity: Decimal) -> Decimal:
    """Round a quantity to ledger precision."""
    return quantity.quantize(_QUANTITY_QUANT, rounding=ROUND_HALF_EVEN)


def sign_of(value: Decimal) -> int:
    """Return -1, 0 or 1 according to the sign of value."""
    if value > ZERO:
        return 1
    if value < ZERO:
        return -1
    return 0


def calculate_notional_value(quantity: Decimal, price: Decimal) -> Decimal:
    """Calculate notional value (quantity × price) exactly.

    Args:
        quantity: Traded or held quantity
        price: Unit price

    Returns:
        Notional value as Decimal
    """
    return quantity * price


def calculate_weighted_average_cost(
    existing_quantity: Decimal,
    existing_cost: Decimal,
    added_quantity: Decimal,
    added_price: Decimal,
) -> Decimal:
    """Blend an add into the existing cost basis.

    Only valid when ``added_quantity`` has the same sign as
    ``existing_quantity`` (the position grows in its own direction).

    Args:
        existing_quantity: Signed quantity held before the fill
        existing_cost: Average cost before the fill
        added_quantity: Signed quantity of the fill
        added_price: Execution price of the fill

    Returns:
        New average cost rounded to COST_DECIMALS
    """
    total_quantity = existing_quantity + added_quantity
    if total_quantity == ZERO:
        raise ValidationError("Weighted average undefined for zero resulting quantity")

    total_cost = (existing_cost * existing_quantity) + (added_price * added_quantity)
    return round_cost(total_cost / total_quantity)


def calculate_realized_pnl(
    average_cost: Decimal,
    exit_price: Decimal,
    closed_quantity: Decimal,
    direction: int,
) -> Decimal:
    """Calculate P&L realized when part of a position is closed.

    Args:
        average_cost: Cost basis of the closed units
        exit_price: Execution price of the reducing fill
        closed_quantity: Absolute number of units closed
        direction: 1 for a long position, -1 for a short one

    Returns:
        Realized P&L as Decimal (positive = profit)
    """
    if direction not in (1, -1):
        raise ValidationError(f"Invalid position direction: {direction}")
    return (exit_price - average_cost) * abs(closed_quantity) * direction
