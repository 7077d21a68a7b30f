"""
Unit tests for validation utilities.
"""

from decimal import Decimal

import pytest

from portfolio_ledger.core.enums import TradeSide
from portfolio_ledger.core.exceptions.ledger import InvalidTradeParameters, ValidationError
from portfolio_ledger.core.utils.validation import (
    validate_identifier,
    validate_non_negative,
    validate_positive,
    validate_symbol,
    validate_trade_price,
    validate_trade_quantity,
    validate_trade_side,
)


class TestValidateSymbol:
    """Tests for symbol validation."""

    def test_should_normalize_to_uppercase(self) -> None:
        assert validate_symbol(" aapl ") == "AAPL"

    @pytest.mark.parametrize("symbol", ["BRK.B", "BTC-USD", "EUR/USD", "7203"])
    def test_should_accept_common_ticker_forms(self, symbol: str) -> None:
        assert validate_symbol(symbol) == symbol

    def test_should_reject_empty_symbol(self) -> None:
        with pytest.raises(ValidationError, match="must not be empty"):
            validate_symbol("   ")

    def test_should_reject_long_symbol(self) -> None:
        with pytest.raises(ValidationError, match="too long"):
            validate_symbol("A" * 16)

    def test_should_reject_invalid_characters(self) -> None:
        with pytest.raises(ValidationError, match="invalid characters"):
            validate_symbol("AA PL")

    def test_should_reject_non_string(self) -> None:
        with pytest.raises(ValidationError, match="must be a string"):
            validate_symbol(123)


class TestValidateNumbers:
    """Tests for numeric validation helpers."""

    def test_should_strip_identifier(self) -> None:
        assert validate_identifier("  user-1 ", "external_id") == "user-1"

    def test_should_reject_blank_identifier(self) -> None:
        with pytest.raises(ValidationError, match="external_id must be a non-empty string"):
            validate_identifier("", "external_id")

    def test_should_accept_positive_value(self) -> None:
        assert validate_positive("2.5", "target_price") == Decimal("2.5")

    def test_should_reject_zero_as_positive(self) -> None:
        with pytest.raises(ValidationError, match="target_price must be positive"):
            validate_positive(0, "target_price")

    def test_should_accept_zero_as_non_negative(self) -> None:
        assert validate_non_negative(0, "cash_balance") == Decimal("0")

    def test_should_reject_negative_as_non_negative(self) -> None:
        with pytest.raises(ValidationError, match="non-negative"):
            validate_non_negative(-1, "cash_balance")


class TestValidateTradeParameters:
    """Tests for trade quantity and price validation."""

    def test_should_round_quantity_to_eight_places(self) -> None:
        assert validate_trade_quantity("1.123456789") == Decimal("1.12345679")

    @pytest.mark.parametrize("quantity", [0, -1, "0.000000001"])
    def test_should_reject_non_positive_quantity(self, quantity: object) -> None:
        """Test that zero, negative and sub-precision quantities are rejected."""
        with pytest.raises(InvalidTradeParameters) as exc_info:
            validate_trade_quantity(quantity)

        assert exc_info.value.field == "quantity"

    def test_should_reject_non_numeric_quantity(self) -> None:
        with pytest.raises(InvalidTradeParameters):
            validate_trade_quantity("ten")

    def test_should_reject_non_positive_price_with_field_name(self) -> None:
        with pytest.raises(InvalidTradeParameters) as exc_info:
            validate_trade_price(-5, "current_price")

        assert exc_info.value.field == "current_price"

    def test_should_accept_positive_price(self) -> None:
        assert validate_trade_price(150.25) == Decimal("150.25")


class TestValidateTradeSide:
    """Tests for trade side validation."""

    def test_should_pass_enum_through(self) -> None:
        assert validate_trade_side(TradeSide.SELL) is TradeSide.SELL

    @pytest.mark.parametrize("side", ["buy", "BUY", " Buy "])
    def test_should_parse_string_case_insensitively(self, side: str) -> None:
        assert validate_trade_side(side) == TradeSide.BUY

    @pytest.mark.parametrize("side", ["hold", "", None, 1])
    def test_should_reject_unsupported_side(self, side: object) -> None:
        """Test every unsupported value raises ValidationError."""
        with pytest.raises(ValidationError, match="Unsupported trade side"):
            validate_trade_side(side)
