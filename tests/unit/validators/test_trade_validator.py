"""
Unit Tests for Trade Recording and Price Input Validation
"""

from decimal import Decimal

import pytest

from conftest import make_position
from sell_thirds.models import RecordTradeParams, TradeType, ValidationErrorCode
from sell_thirds.validators import validate_price_input, validate_record_trade


class TestValidateRecordTrade:
    """Test sale rules against the position being sold"""

    def test_valid_sale(self):
        position = make_position()

        result = validate_record_trade(
            RecordTradeParams(position.id, 100, Decimal("225.00")), position
        )

        assert result.is_valid

    def test_selling_all_remaining_is_valid(self):
        position = make_position(remaining_shares=200)

        result = validate_record_trade(
            RecordTradeParams(position.id, 200, Decimal("150.00")), position
        )

        assert result.is_valid

    def test_oversell_reports_insufficient_shares(self):
        """300 against 200 remaining → one INSUFFICIENT_SHARES error on shares_sold"""
        position = make_position(remaining_shares=200)

        result = validate_record_trade(
            RecordTradeParams(position.id, 300, Decimal("225.00")), position
        )

        assert not result.is_valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.field == "shares_sold"
        assert error.code == ValidationErrorCode.INSUFFICIENT_SHARES
        assert error.message == "Cannot sell 300 shares. Only 200 shares remaining."

    def test_missing_position_short_circuits(self):
        result = validate_record_trade(RecordTradeParams("missing", -1, None), None)

        assert len(result.errors) == 1
        assert result.errors[0].field == "position_id"
        assert result.errors[0].code == ValidationErrorCode.REQUIRED

    def test_reports_every_field(self):
        position = make_position()

        result = validate_record_trade(
            RecordTradeParams(position.id, 0, Decimal("-1"), trade_type="bogus"), position
        )

        assert {e.field for e in result.errors} == {"shares_sold", "sell_price", "trade_type"}
        assert result.errors_for("shares_sold")[0].code == ValidationErrorCode.OUT_OF_RANGE
        assert result.errors_for("sell_price")[0].code == ValidationErrorCode.OUT_OF_RANGE
        assert result.errors_for("trade_type")[0].code == ValidationErrorCode.INVALID_FORMAT

    @pytest.mark.parametrize("trade_type", [TradeType.MANUAL, "stop_loss"])
    def test_known_trade_types_accepted(self, trade_type):
        position = make_position()

        result = validate_record_trade(
            RecordTradeParams(position.id, 10, Decimal("130.00"), trade_type), position
        )

        assert result.is_valid

    def test_fractional_shares(self):
        position = make_position()

        result = validate_record_trade(
            RecordTradeParams(position.id, Decimal("1.5"), Decimal("200.00")), position
        )

        assert result.errors_for("shares_sold")[0].code == ValidationErrorCode.INVALID_FORMAT

    def test_sell_price_above_maximum(self):
        position = make_position()

        result = validate_record_trade(
            RecordTradeParams(position.id, 1, Decimal("1000000")), position
        )

        assert result.errors_for("sell_price")[0].code == ValidationErrorCode.OUT_OF_RANGE


class TestValidatePriceInput:
    """Test scenario price rules"""

    def test_valid_price(self):
        assert validate_price_input(Decimal("199.99")).is_valid

    @pytest.mark.parametrize("price", [None, float("nan"), float("inf"), "n/a"])
    def test_missing_or_non_finite(self, price):
        result = validate_price_input(price)

        assert result.errors[0].field == "price"
        assert result.errors[0].code == ValidationErrorCode.REQUIRED

    @pytest.mark.parametrize("price", [0, -10, Decimal("1000000.00")])
    def test_out_of_range(self, price):
        result = validate_price_input(price)

        assert result.errors[0].code == ValidationErrorCode.OUT_OF_RANGE
