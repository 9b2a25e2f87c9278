"""
Position Creation Validator

Business rules for CreatePositionParams:

- ticker: required, ^[A-Z]{1,5}$, not already held (exact, case-sensitive)
- buy_price: required finite number, > 0, <= MAX_PRICE
- original_shares: required finite whole number, > 0, <= MAX_SHARES

Every field is checked; the result lists one error per failing field.
"""

import re
from collections.abc import Iterable

import structlog

from sell_thirds.models.position import TICKER_PATTERN, CreatePositionParams
from sell_thirds.models.validation import ValidationErrorCode, ValidationResult
from sell_thirds.validators.base import MAX_SHARES, check_price, check_share_count

logger = structlog.get_logger(__name__)

_TICKER_RE = re.compile(TICKER_PATTERN)


def validate_ticker_format(ticker: object) -> bool:
    """Whether ticker is 1-5 uppercase ASCII letters."""
    return isinstance(ticker, str) and _TICKER_RE.fullmatch(ticker) is not None


def validate_create_position(
    params: CreatePositionParams, existing_tickers: Iterable[str] = ()
) -> ValidationResult:
    """
    Validate position creation parameters.

    Args:
        params: Raw creation input
        existing_tickers: Tickers of positions already stored

    Returns:
        ValidationResult with every violated field

    Example:
        >>> result = validate_create_position(
        ...     CreatePositionParams(ticker="INVALID123", buy_price=-150, original_shares=0)
        ... )
        >>> result.is_valid, len(result.errors)
        (False, 3)
    """
    result = ValidationResult()

    if not params.ticker:
        result.add_error("ticker", "Ticker symbol is required", ValidationErrorCode.REQUIRED)
    elif not validate_ticker_format(params.ticker):
        result.add_error(
            "ticker",
            "Ticker must be 1-5 uppercase letters only",
            ValidationErrorCode.INVALID_FORMAT,
        )
    elif params.ticker in set(existing_tickers):
        result.add_error(
            "ticker",
            f"Position with ticker {params.ticker} already exists",
            ValidationErrorCode.DUPLICATE_TICKER,
        )

    check_price(result, params.buy_price, "buy_price", "Buy price")

    check_share_count(
        result,
        params.original_shares,
        "original_shares",
        required_message="Number of shares is required",
        positive_message="Number of shares must be positive",
        max_shares=MAX_SHARES,
    )

    if not result.is_valid:
        logger.debug(
            "create_position_validation_failed",
            ticker=params.ticker if isinstance(params.ticker, str) else None,
            fields=[e.field for e in result.errors],
        )
    return result
