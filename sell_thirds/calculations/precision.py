"""
Fixed-Point Precision Helpers

All monetary and percentage values are Decimal and rounded to cents with
ROUND_HALF_UP (half away from zero) at the point they are computed, so
stored and displayed values are stable and reproducible.

Floats are converted through str() to avoid binary representation noise:
Decimal(str(150.1)) == Decimal("150.1"), Decimal(150.1) is not.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext

from sell_thirds.exceptions import InvalidArgumentError

# Internal precision (high for intermediate calculations)
getcontext().prec = 28

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: object) -> Decimal | None:
    """
    Convert a numeric value to Decimal.

    Returns None for None, booleans and anything that is not a number
    (including numeric-looking strings that fail to parse). NaN and
    Infinity are returned as Decimal NaN/Infinity; callers check
    is_finite() themselves.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


def round2(value: Decimal | int | float) -> Decimal:
    """
    Round to 2 decimal places, half away from zero.

    >>> round2(Decimal("0.125"))
    Decimal('0.13')
    >>> round2(Decimal("-0.125"))
    Decimal('-0.13')
    """
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return decimal_value.quantize(CENT, rounding=ROUND_HALF_UP)


def require_positive_price(value: object, argument: str) -> Decimal:
    """
    Coerce a price argument to a finite, positive Decimal.

    Raises:
        InvalidArgumentError: If value is missing, non-finite or <= 0
    """
    price = to_decimal(value)
    if price is None or not price.is_finite() or price <= ZERO:
        raise InvalidArgumentError(argument, value, f"{argument} must be a positive number")
    return price


def require_positive_int(value: object, argument: str) -> int:
    """
    Coerce a share count argument to a positive int.

    Integral Decimals and floats (e.g. 300.0) are accepted; fractional
    values are rejected rather than truncated.

    Raises:
        InvalidArgumentError: If value is not a positive whole number
    """
    number = to_decimal(value)
    if (
        number is None
        or not number.is_finite()
        or number != number.to_integral_value()
        or number <= ZERO
    ):
        raise InvalidArgumentError(argument, value, f"{argument} must be a positive integer")
    return int(number)
