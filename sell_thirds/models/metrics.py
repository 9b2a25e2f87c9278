"""
Position Metrics Models - Profit/Loss and Triggered Level Analysis

Result models returned by the calculation package for a single position
evaluated at a given (real or simulated) price.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecommendedAction(str, Enum):
    """
    Action suggested by the triggered-level analysis.

    Priority (highest first): TRIGGER_STOP_LOSS, SELL_SECOND_THIRD,
    SELL_FIRST_THIRD, HOLD.
    """

    HOLD = "hold"
    SELL_FIRST_THIRD = "sell_first_third"
    SELL_SECOND_THIRD = "sell_second_third"
    TRIGGER_STOP_LOSS = "trigger_stop_loss"


class ProfitLossMetrics(BaseModel):
    """
    Profit/loss for one position at a current price.

    Fields:
    -------
    - total_value: remaining_shares × current_price
    - total_cost: original_shares × buy_price
    - unrealized_profit: (current_price - buy_price) × remaining_shares
    - unrealized_profit_percent: (current_price - buy_price) / buy_price × 100
    - realized_profit: Sum of profit over this position's trades
    - total_profit: realized_profit + unrealized_profit
    - total_profit_percent: total_profit / total_cost × 100

    All values rounded to 2 decimal places.
    """

    total_value: Decimal
    total_cost: Decimal
    unrealized_profit: Decimal
    unrealized_profit_percent: Decimal
    realized_profit: Decimal
    total_profit: Decimal
    total_profit_percent: Decimal

    model_config = ConfigDict(frozen=True)


class TriggerPrices(BaseModel):
    """Reference prices used by the triggered-level analysis."""

    first_target: Decimal
    second_target: Decimal
    stop_loss: Decimal

    model_config = ConfigDict(frozen=True)


class TriggeredLevels(BaseModel):
    """Which price levels a current price has crossed, and what to do about it."""

    is_at_first_target: bool = Field(..., description="current_price >= first_target")
    is_at_second_target: bool = Field(..., description="current_price >= second_target")
    is_at_stop_loss: bool = Field(..., description="current_price <= stop_loss.price")
    recommended_action: RecommendedAction
    trigger_prices: TriggerPrices

    model_config = ConfigDict(frozen=True)
