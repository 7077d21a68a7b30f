"""
Custom exception hierarchy for the portfolio ledger.

This module defines domain-specific exceptions for better error handling.
Everything except StorageError is a recoverable precondition failure raised
before any state is mutated.
"""

from decimal import Decimal


class LedgerException(Exception):
    """Base exception for all ledger-related errors."""

    pass


class ValidationError(LedgerException):
    """Raised when input validation fails."""

    pass


class InvalidTradeParameters(ValidationError):
    """Raised when a trade instruction has a non-positive quantity or price."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid trade parameter: {field} must be positive, got {value}")


class InvalidTradeTransition(ValidationError):
    """Raised when a trade status change is not allowed."""

    def __init__(self, trade_id: str, current: str, target: str):
        self.trade_id = trade_id
        self.current = current
        self.target = target
        super().__init__(f"Trade {trade_id} cannot move from {current} to {target}")


class NotFoundError(LedgerException):
    """Raised when a referenced profile, portfolio, position or record does not exist."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class PortfolioError(LedgerException):
    """Raised when portfolio business rules reject an operation."""

    pass


class InsufficientFundsError(PortfolioError):
    """Raised when there are insufficient funds for an operation."""

    def __init__(self, required: Decimal, available: Decimal, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )


class InsufficientSharesError(PortfolioError):
    """Raised when a sell exceeds the quantity held."""

    def __init__(self, symbol: str, requested: Decimal, available: Decimal):
        self.symbol = symbol
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient shares of {symbol}: requested={requested}, available={available}"
        )


class StorageError(LedgerException):
    """Raised when the backing store is unavailable or fails."""

    pass


class ConfigurationError(LedgerException):
    """Raised when configuration is invalid."""

    pass
