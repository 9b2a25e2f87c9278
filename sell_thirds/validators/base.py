"""
Shared validation helpers for position, trade and price inputs.

Each check_* helper validates one field, appends at most one error to the
result (the first rule that fails), and returns the coerced value when the
field passed, otherwise None. Validators call several helpers in a row so a
single validation reports every violated field.

Numeric Rules:
    - missing, non-numeric, bool, NaN and ±Infinity -> REQUIRED
    - share counts must be whole numbers -> INVALID_FORMAT
    - values <= 0 or above the configured maximum -> OUT_OF_RANGE
"""

from __future__ import annotations

from decimal import Decimal

from sell_thirds.calculations.precision import ZERO, to_decimal
from sell_thirds.models.validation import ValidationErrorCode, ValidationResult

MAX_PRICE = Decimal("999999.99")
MAX_SHARES = 1_000_000


def finite_decimal(value: object) -> Decimal | None:
    """Coerce value to a finite Decimal, or None if it is not a usable number."""
    number = to_decimal(value)
    if number is None or not number.is_finite():
        return None
    return number


def check_price(
    result: ValidationResult,
    value: object,
    field: str,
    label: str,
    max_price: Decimal = MAX_PRICE,
) -> Decimal | None:
    """
    Validate a required positive price no larger than max_price.

    Args:
        result: ValidationResult to append errors to
        value: Raw input value
        field: Field name reported on the error
        label: Human label used in messages ("Buy price", "Sell price", ...)
        max_price: Inclusive upper bound

    Returns:
        The price as Decimal when valid, otherwise None
    """
    price = finite_decimal(value)
    if price is None:
        result.add_error(field, f"{label} is required", ValidationErrorCode.REQUIRED)
        return None
    if price <= ZERO:
        result.add_error(field, f"{label} must be positive", ValidationErrorCode.OUT_OF_RANGE)
        return None
    if price > max_price:
        result.add_error(
            field,
            f"{label} cannot exceed ${max_price:,}",
            ValidationErrorCode.OUT_OF_RANGE,
        )
        return None
    return price


def check_share_count(
    result: ValidationResult,
    value: object,
    field: str,
    required_message: str,
    positive_message: str,
    max_shares: int | None = None,
) -> int | None:
    """
    Validate a required positive whole share count.

    Returns:
        The count as int when valid, otherwise None
    """
    number = finite_decimal(value)
    if number is None:
        result.add_error(field, required_message, ValidationErrorCode.REQUIRED)
        return None
    if number != number.to_integral_value():
        result.add_error(
            field,
            "Number of shares must be a whole number",
            ValidationErrorCode.INVALID_FORMAT,
        )
        return None
    if number <= ZERO:
        result.add_error(field, positive_message, ValidationErrorCode.OUT_OF_RANGE)
        return None
    if max_shares is not None and number > max_shares:
        result.add_error(
            field,
            f"Number of shares cannot exceed {max_shares:,}",
            ValidationErrorCode.OUT_OF_RANGE,
        )
        return None
    return int(number)
