"""Scenario price validator (what-if price input)."""

from sell_thirds.models.validation import ValidationResult
from sell_thirds.validators.base import check_price


def validate_price_input(price: object) -> ValidationResult:
    """
    Validate a scenario price: required, finite, > 0, <= MAX_PRICE.

    NaN and ±Infinity are reported as missing (REQUIRED).
    """
    result = ValidationResult()
    check_price(result, price, "price", "Price")
    return result
