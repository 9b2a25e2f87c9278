"""
Trade Recording Validator

Business rules for RecordTradeParams against the position being sold:

- position must exist (otherwise a single position_id error, nothing else checked)
- shares_sold: required finite whole number, > 0, <= position.remaining_shares
- sell_price: required finite number, > 0, <= MAX_PRICE
- trade_type: optional, must name a known TradeType when supplied
"""

from typing import Optional

import structlog

from sell_thirds.models.position import Position
from sell_thirds.models.trade import RecordTradeParams, TradeType
from sell_thirds.models.validation import ValidationErrorCode, ValidationResult
from sell_thirds.validators.base import check_price, check_share_count

logger = structlog.get_logger(__name__)


def _is_trade_type(value: object) -> bool:
    try:
        TradeType(value)
    except ValueError:
        return False
    return True


def validate_record_trade(
    params: RecordTradeParams, position: Optional[Position]
) -> ValidationResult:
    """
    Validate trade recording parameters.

    Args:
        params: Raw trade input
        position: Position looked up by params.position_id (None if not found)

    Returns:
        ValidationResult with every violated field. Selling more than the
        remaining shares reports INSUFFICIENT_SHARES naming both amounts.
    """
    result = ValidationResult()

    if position is None:
        result.add_error("position_id", "Position not found", ValidationErrorCode.REQUIRED)
        return result

    shares_sold = check_share_count(
        result,
        params.shares_sold,
        "shares_sold",
        required_message="Number of shares to sell is required",
        positive_message="Number of shares to sell must be positive",
    )
    if shares_sold is not None and shares_sold > position.remaining_shares:
        result.add_error(
            "shares_sold",
            f"Cannot sell {shares_sold} shares. "
            f"Only {position.remaining_shares} shares remaining.",
            ValidationErrorCode.INSUFFICIENT_SHARES,
        )

    check_price(result, params.sell_price, "sell_price", "Sell price")

    if params.trade_type is not None and not _is_trade_type(params.trade_type):
        result.add_error(
            "trade_type",
            f"Unknown trade type: {params.trade_type}",
            ValidationErrorCode.INVALID_FORMAT,
        )

    if not result.is_valid:
        logger.debug(
            "record_trade_validation_failed",
            position_id=str(position.id),
            remaining_shares=position.remaining_shares,
            fields=[e.field for e in result.errors],
        )
    return result
