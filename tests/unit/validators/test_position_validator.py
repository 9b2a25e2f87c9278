"""
Unit Tests for Position Creation Validation

Every violated field is reported, one error per field, first failing rule wins.
"""

from decimal import Decimal

import pytest

from sell_thirds.models import CreatePositionParams, ValidationErrorCode
from sell_thirds.validators import MAX_SHARES, validate_create_position, validate_ticker_format


def params(ticker="AAPL", buy_price=Decimal("150.00"), original_shares=300):
    return CreatePositionParams(ticker=ticker, buy_price=buy_price, original_shares=original_shares)


class TestValidateTickerFormat:
    @pytest.mark.parametrize("ticker", ["A", "AAPL", "GOOGL"])
    def test_valid(self, ticker):
        assert validate_ticker_format(ticker)

    @pytest.mark.parametrize("ticker", ["", "aapl", "TOOLONG", "BRK.B", "AB1", " AAPL", None, 123])
    def test_invalid(self, ticker):
        assert not validate_ticker_format(ticker)


class TestValidateCreatePosition:
    """Test creation rules"""

    def test_valid_params(self):
        result = validate_create_position(params())

        assert result.is_valid
        assert result.errors == []

    def test_every_field_invalid_reports_three_errors(self):
        """ticker=INVALID123, buy_price=-150, shares=0 → exactly one error per field"""
        result = validate_create_position(
            params(ticker="INVALID123", buy_price=-150, original_shares=0)
        )

        assert not result.is_valid
        assert len(result.errors) == 3
        assert {e.field for e in result.errors} == {"ticker", "buy_price", "original_shares"}
        assert result.errors_for("ticker")[0].code == ValidationErrorCode.INVALID_FORMAT
        assert result.errors_for("buy_price")[0].code == ValidationErrorCode.OUT_OF_RANGE
        assert result.errors_for("original_shares")[0].code == ValidationErrorCode.OUT_OF_RANGE

    @pytest.mark.parametrize("ticker", ["", None])
    def test_missing_ticker(self, ticker):
        result = validate_create_position(params(ticker=ticker))

        errors = result.errors_for("ticker")
        assert len(errors) == 1
        assert errors[0].code == ValidationErrorCode.REQUIRED

    def test_duplicate_ticker(self):
        result = validate_create_position(params(), existing_tickers=["MSFT", "AAPL"])

        errors = result.errors_for("ticker")
        assert errors[0].code == ValidationErrorCode.DUPLICATE_TICKER
        assert errors[0].message == "Position with ticker AAPL already exists"

    def test_duplicate_check_is_case_sensitive(self):
        """Lowercase input fails on format, never on duplication"""
        result = validate_create_position(params(ticker="aapl"), existing_tickers=["AAPL"])

        assert result.errors_for("ticker")[0].code == ValidationErrorCode.INVALID_FORMAT

    @pytest.mark.parametrize(
        "buy_price", [None, "abc", float("nan"), float("inf"), float("-inf"), True]
    )
    def test_unusable_buy_price_is_required_error(self, buy_price):
        result = validate_create_position(params(buy_price=buy_price))

        assert result.errors_for("buy_price")[0].code == ValidationErrorCode.REQUIRED

    def test_buy_price_above_maximum(self):
        result = validate_create_position(params(buy_price=Decimal("1000000.00")))

        error = result.errors_for("buy_price")[0]
        assert error.code == ValidationErrorCode.OUT_OF_RANGE
        assert error.message == "Buy price cannot exceed $999,999.99"

    def test_buy_price_at_maximum_is_valid(self):
        assert validate_create_position(params(buy_price=Decimal("999999.99"))).is_valid

    def test_fractional_shares(self):
        result = validate_create_position(params(original_shares=10.5))

        error = result.errors_for("original_shares")[0]
        assert error.code == ValidationErrorCode.INVALID_FORMAT
        assert error.message == "Number of shares must be a whole number"

    def test_shares_above_maximum(self):
        result = validate_create_position(params(original_shares=MAX_SHARES + 1))

        assert result.errors_for("original_shares")[0].code == ValidationErrorCode.OUT_OF_RANGE

    def test_shares_at_maximum_is_valid(self):
        assert validate_create_position(params(original_shares=MAX_SHARES)).is_valid

    def test_integral_float_shares_are_valid(self):
        assert validate_create_position(params(original_shares=300.0)).is_valid
