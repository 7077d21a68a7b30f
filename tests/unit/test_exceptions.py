"""
Unit tests for custom exceptions.
Testing all exception classes and their attributes.
"""

from decimal import Decimal

from portfolio_ledger.core.exceptions.ledger import (
    ConfigurationError,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidTradeParameters,
    InvalidTradeTransition,
    LedgerException,
    NotFoundError,
    PortfolioError,
    StorageError,
    ValidationError,
)


class TestLedgerException:
    """Tests for LedgerException base class."""

    def test_should_create_base_exception_with_message(self) -> None:
        """Test creating base exception with message."""
        exc = LedgerException("Test error message")
        assert str(exc) == "Test error message"
        assert isinstance(exc, Exception)

    def test_should_derive_every_ledger_error_from_base(self) -> None:
        """Test the hierarchy roots at LedgerException."""
        for exc_type in (
            ValidationError,
            NotFoundError,
            PortfolioError,
            StorageError,
            ConfigurationError,
        ):
            assert issubclass(exc_type, LedgerException)


class TestInvalidTradeParameters:
    """Tests for InvalidTradeParameters."""

    def test_should_carry_field_and_value(self) -> None:
        exc = InvalidTradeParameters("quantity", Decimal("0"))

        assert exc.field == "quantity"
        assert exc.value == Decimal("0")
        assert str(exc) == "Invalid trade parameter: quantity must be positive, got 0"
        assert isinstance(exc, ValidationError)


class TestInvalidTradeTransition:
    """Tests for InvalidTradeTransition."""

    def test_should_describe_rejected_transition(self) -> None:
        exc = InvalidTradeTransition("t-1", "filled", "cancelled")

        assert exc.trade_id == "t-1"
        assert exc.current == "filled"
        assert exc.target == "cancelled"
        assert "cannot move from filled to cancelled" in str(exc)
        assert isinstance(exc, ValidationError)


class TestNotFoundError:
    """Tests for NotFoundError."""

    def test_should_name_entity_and_key(self) -> None:
        exc = NotFoundError("Portfolio", "pf-1")

        assert exc.entity == "Portfolio"
        assert exc.key == "pf-1"
        assert str(exc) == "Portfolio not found: pf-1"


class TestInsufficientFundsError:
    """Tests for InsufficientFundsError."""

    def test_should_create_with_funds_details(self) -> None:
        """Test creating exception with required and available amounts."""
        exc = InsufficientFundsError(
            required=Decimal("1500"), available=Decimal("1000.5"), operation="buying 10 X"
        )

        assert exc.required == Decimal("1500")
        assert exc.available == Decimal("1000.5")
        assert exc.operation == "buying 10 X"
        assert "required=1500.00" in str(exc)
        assert "available=1000.50" in str(exc)
        assert isinstance(exc, PortfolioError)


class TestInsufficientSharesError:
    """Tests for InsufficientSharesError."""

    def test_should_create_with_share_details(self) -> None:
        exc = InsufficientSharesError("AAPL", Decimal("5"), Decimal("2"))

        assert exc.symbol == "AAPL"
        assert exc.requested == Decimal("5")
        assert exc.available == Decimal("2")
        assert "Insufficient shares of AAPL" in str(exc)
        assert isinstance(exc, PortfolioError)
