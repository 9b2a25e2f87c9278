"""Business-rule validators for position, trade and price inputs."""

from sell_thirds.validators.base import MAX_PRICE, MAX_SHARES
from sell_thirds.validators.position_validator import (
    validate_create_position,
    validate_ticker_format,
)
from sell_thirds.validators.price_validator import validate_price_input
from sell_thirds.validators.trade_validator import validate_record_trade

__all__ = [
    "MAX_PRICE",
    "MAX_SHARES",
    "validate_create_position",
    "validate_price_input",
    "validate_record_trade",
    "validate_ticker_format",
]
