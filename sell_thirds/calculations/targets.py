"""
Sell Target and Initial Stop Calculator

Purpose:
--------
Computes the fixed sell-in-thirds levels for a new position.

Formulas:
---------
- first_target = round2(buy_price × 1.5)
- second_target = round2(buy_price × 2.0)
- first_target_shares = second_target_shares = floor(original_shares / 3)
- remaining_shares = original_shares - first_target_shares - second_target_shares
- initial stop = round2(buy_price × 0.8)

Usage:
------
>>> from decimal import Decimal
>>> targets = calculate_sell_targets(Decimal("150.00"), 300)
>>> targets.first_target, targets.second_target
(Decimal('225.00'), Decimal('300.00'))
>>> calculate_initial_stop_loss(Decimal("150.00"))
Decimal('120.00')
"""

from decimal import Decimal

import structlog

from sell_thirds.calculations.precision import (
    require_positive_int,
    require_positive_price,
    round2,
)
from sell_thirds.models.position import Position
from sell_thirds.models.sell_targets import SellTargets
from sell_thirds.models.trade import TradeType

logger = structlog.get_logger(__name__)

FIRST_TARGET_MULTIPLIER = Decimal("1.5")
SECOND_TARGET_MULTIPLIER = Decimal("2.0")
INITIAL_STOP_MULTIPLIER = Decimal("0.8")


def calculate_sell_targets(buy_price: Decimal | float | int, original_shares: int) -> SellTargets:
    """
    Calculate sell targets for the sell-in-thirds strategy.

    Parameters:
    -----------
    buy_price : Decimal
        Per-share purchase price (> 0)
    original_shares : int
        Shares purchased (positive integer)

    Returns:
    --------
    SellTargets
        Target prices and share allocation. The three allocations always
        sum to original_shares; the remainder of the division by 3 lands
        in remaining_shares.

    Raises:
    -------
    InvalidArgumentError
        If buy_price <= 0 or original_shares is not a positive integer
    """
    price = require_positive_price(buy_price, "buy_price")
    shares = require_positive_int(original_shares, "original_shares")

    third = shares // 3
    targets = SellTargets(
        first_target=round2(price * FIRST_TARGET_MULTIPLIER),
        second_target=round2(price * SECOND_TARGET_MULTIPLIER),
        first_target_shares=third,
        second_target_shares=third,
        remaining_shares=shares - third - third,
    )

    logger.debug(
        "sell_targets_calculated",
        buy_price=str(price),
        original_shares=shares,
        first_target=str(targets.first_target),
        second_target=str(targets.second_target),
        remaining_shares=targets.remaining_shares,
    )
    return targets


def calculate_initial_stop_loss(buy_price: Decimal | float | int) -> Decimal:
    """
    Calculate the initial stop-loss at -20% of the buy price.

    Raises:
        InvalidArgumentError: If buy_price <= 0
    """
    price = require_positive_price(buy_price, "buy_price")
    return round2(price * INITIAL_STOP_MULTIPLIER)


def infer_trade_type(position: Position, sell_price: Decimal) -> TradeType:
    """
    Classify a sale by the level its price reached.

    Checked in order: second target, first target, stop-loss, else manual.
    """
    if sell_price >= position.sell_targets.second_target:
        return TradeType.SECOND_TARGET
    if sell_price >= position.sell_targets.first_target:
        return TradeType.FIRST_TARGET
    if sell_price <= position.stop_loss.price:
        return TradeType.STOP_LOSS
    return TradeType.MANUAL
