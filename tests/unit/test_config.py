"""
Unit tests for ledger configuration.
"""

from decimal import Decimal

import pytest

from portfolio_ledger.core.exceptions.ledger import ConfigurationError
from portfolio_ledger.core.models.config import LedgerConfig


class TestLedgerConfig:
    """Tests for LedgerConfig validation and serialization."""

    def test_should_use_defaults(self) -> None:
        config = LedgerConfig()

        assert config.starting_cash == Decimal("10000")
        assert config.default_portfolio_name == "Main Portfolio"
        assert config.default_watchlist_symbols == ("AAPL", "GOOGL", "MSFT", "TSLA", "NVDA")
        assert not config.allow_short_selling
        assert config.enforce_buying_power

    def test_should_reject_negative_starting_cash(self) -> None:
        with pytest.raises(ConfigurationError, match="starting_cash must be non-negative"):
            LedgerConfig(starting_cash=Decimal("-1"))

    def test_should_wrap_non_numeric_cash_in_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="starting_cash must be numeric"):
            LedgerConfig(starting_cash="lots")  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"default_portfolio_name": " "},
            {"default_watchlist_name": ""},
            {"price_cache_ttl_seconds": 0},
            {"price_cache_size": 0},
        ],
    )
    def test_should_reject_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ConfigurationError):
            LedgerConfig(**overrides)

    def test_should_normalize_watchlist_symbols(self) -> None:
        config = LedgerConfig(default_watchlist_symbols=(" spy", "qqq"))

        assert config.default_watchlist_symbols == ("SPY", "QQQ")

    def test_should_round_trip_through_dict(self) -> None:
        """Test that from_dict(to_dict()) reproduces the config."""
        config = LedgerConfig(starting_cash=Decimal("2500.50"), allow_short_selling=True)

        restored = LedgerConfig.from_dict(config.to_dict())

        assert restored == config

    def test_should_ignore_unknown_keys(self) -> None:
        config = LedgerConfig.from_dict({"starting_cash": "500", "unknown": 1})

        assert config.starting_cash == Decimal("500")
