"""
Profit/Loss and Triggered Level Analysis

Purpose:
--------
Evaluates a position at a current (real or simulated) price.

Formulas:
---------
- total_value = remaining_shares × current_price
- total_cost = original_shares × buy_price
- unrealized_profit = (current_price - buy_price) × remaining_shares
- unrealized_profit_percent = (current_price - buy_price) / buy_price × 100
- realized_profit = Σ trade.profit (trades of this position only)
- total_profit = realized_profit + unrealized_profit
- total_profit_percent = total_profit / total_cost × 100

Recommended action priority: stop-loss > second target > first target > hold.
"""

from collections.abc import Iterable
from decimal import Decimal

import structlog

from sell_thirds.calculations.precision import HUNDRED, ZERO, require_positive_price, round2
from sell_thirds.exceptions import InvalidStateError
from sell_thirds.models.metrics import (
    ProfitLossMetrics,
    RecommendedAction,
    TriggeredLevels,
    TriggerPrices,
)
from sell_thirds.models.position import Position
from sell_thirds.models.trade import Trade

logger = structlog.get_logger(__name__)


def trades_for_position(position: Position, trades: Iterable[Trade]) -> list[Trade]:
    """Filter a trade collection down to one position's trades."""
    return [trade for trade in trades if trade.position_id == position.id]


def calculate_profit_loss(
    position: Position,
    current_price: Decimal | float | int,
    completed_trades: Iterable[Trade] = (),
) -> ProfitLossMetrics:
    """
    Calculate profit/loss metrics for a position at a given price.

    Parameters:
    -----------
    position : Position
        Position to evaluate
    current_price : Decimal
        Current market or scenario price (> 0)
    completed_trades : Iterable[Trade]
        Trade history. May contain other positions' trades; only trades
        whose position_id matches are counted.

    Returns:
    --------
    ProfitLossMetrics
        All values rounded to 2 decimal places

    Raises:
    -------
    InvalidArgumentError
        If current_price <= 0
    InvalidStateError
        If the position has zero cost basis
    """
    price = require_positive_price(current_price, "current_price")

    total_cost = position.cost_basis
    if total_cost == ZERO:
        raise InvalidStateError(
            f"Position {position.id} has zero cost basis",
            details={"position_id": str(position.id)},
        )

    total_value = position.remaining_shares * price
    unrealized_profit = round2((price - position.buy_price) * position.remaining_shares)
    unrealized_profit_percent = round2((price - position.buy_price) / position.buy_price * HUNDRED)

    realized_profit = sum(
        (trade.profit for trade in trades_for_position(position, completed_trades)), ZERO
    )

    total_profit = round2(realized_profit + unrealized_profit)
    total_profit_percent = round2(total_profit / total_cost * HUNDRED)

    return ProfitLossMetrics(
        total_value=round2(total_value),
        total_cost=round2(total_cost),
        unrealized_profit=unrealized_profit,
        unrealized_profit_percent=unrealized_profit_percent,
        realized_profit=round2(realized_profit),
        total_profit=total_profit,
        total_profit_percent=total_profit_percent,
    )


def analyze_triggered_levels(
    position: Position, current_price: Decimal | float | int
) -> TriggeredLevels:
    """
    Determine which targets or stop-loss a price has reached.

    The stop-loss check wins over the target checks even when both are
    true, which can only happen when the stop sits above a target.

    Raises:
        InvalidArgumentError: If current_price <= 0
    """
    price = require_positive_price(current_price, "current_price")
    targets = position.sell_targets
    stop_price = position.stop_loss.price

    is_at_first_target = price >= targets.first_target
    is_at_second_target = price >= targets.second_target
    is_at_stop_loss = price <= stop_price

    if is_at_stop_loss:
        action = RecommendedAction.TRIGGER_STOP_LOSS
    elif is_at_second_target:
        action = RecommendedAction.SELL_SECOND_THIRD
    elif is_at_first_target:
        action = RecommendedAction.SELL_FIRST_THIRD
    else:
        action = RecommendedAction.HOLD

    if is_at_stop_loss and (is_at_first_target or is_at_second_target):
        logger.warning(
            "stop_loss_above_target",
            position_id=str(position.id),
            ticker=position.ticker,
            stop_loss=str(stop_price),
            first_target=str(targets.first_target),
            current_price=str(price),
        )

    return TriggeredLevels(
        is_at_first_target=is_at_first_target,
        is_at_second_target=is_at_second_target,
        is_at_stop_loss=is_at_stop_loss,
        recommended_action=action,
        trigger_prices=TriggerPrices(
            first_target=targets.first_target,
            second_target=targets.second_target,
            stop_loss=stop_price,
        ),
    )
