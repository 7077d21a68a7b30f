"""
Validation utilities for core domain models.

Provides consistent validation across the ledger services.
"""

import re
from decimal import Decimal
from typing import Any

from portfolio_ledger.core.constants import MAX_SYMBOL_LENGTH, SYMBOL_PATTERN
from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import InvalidTradeParameters, ValidationError
from portfolio_ledger.core.types.financial import ZERO, round_price, round_quantity, to_decimal

_SYMBOL_RE = re.compile(SYMBOL_PATTERN)


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate and normalize a ticker symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The stripped, uppercased symbol

    Raises:
        ValidationError: If symbol is not a well-formed ticker
    """
    if not isinstance(symbol, str):
        raise ValidationError(f"{param_name} must be a string, got {type(symbol).__name__}")

    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} must not be empty")
    if len(normalized) > MAX_SYMBOL_LENGTH:
        raise ValidationError(
            f"{param_name} too long: {len(normalized)} > {MAX_SYMBOL_LENGTH} characters"
        )
    if not _SYMBOL_RE.match(normalized):
        raise ValidationError(f"{param_name} contains invalid characters: {symbol!r}")
    return normalized


def validate_identifier(value: Any, param_name: str) -> str:
    """Validate an opaque identifier (non-blank string)."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{param_name} must be a non-empty string")
    return value.strip()


def validate_positive(value: Any, param_name: str) -> Decimal:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value as Decimal

    Raises:
        ValidationError: If value is not positive
    """
    result = to_decimal(value, param_name)
    if result <= ZERO:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return result


def validate_non_negative(value: Any, param_name: str) -> Decimal:
    """Validate that a numeric value is zero or greater."""
    result = to_decimal(value, param_name)
    if result < ZERO:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return result


def validate_trade_quantity(quantity: Any) -> Decimal:
    """Validate a trade quantity, raising InvalidTradeParameters when not positive."""
    try:
        result = round_quantity(to_decimal(quantity, "quantity"))
    except ValidationError as e:
        raise InvalidTradeParameters("quantity", quantity) from e
    if result <= ZERO:
        raise InvalidTradeParameters("quantity", quantity)
    return result


def validate_trade_price(price: Any, param_name: str = "price") -> Decimal:
    """Validate a trade or mark price, raising InvalidTradeParameters when not positive."""
    try:
        result = round_price(to_decimal(price, param_name))
    except ValidationError as e:
        raise InvalidTradeParameters(param_name, price) from e
    if result <= ZERO:
        raise InvalidTradeParameters(param_name, price)
    return result


def validate_trade_side(side: Any) -> TradeSide:
    """Validate a trade side given as enum or case-insensitive string.

    Raises:
        ValidationError: If side is not buy or sell
    """
    if isinstance(side, TradeSide):
        return side
    if not isinstance(side, str):
        raise ValidationError(f"Unsupported trade side: {side!r}")
    try:
        return TradeSide.from_string(side)
    except ValueError as e:
        raise ValidationError(str(e)) from e
