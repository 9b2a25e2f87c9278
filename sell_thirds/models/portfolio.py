"""
Portfolio Metrics Model

Aggregate profit/loss and trigger counts across every stored position.
"""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PortfolioMetrics(BaseModel):
    """
    Portfolio-level metrics.

    Fields:
    -------
    - total_positions: Number of stored positions
    - total_value: Sum of position values (priced positions only)
    - total_cost: Sum of original cost basis (all positions)
    - total_profit: realized_profit + unrealized_profit
    - total_profit_percent: total_profit / total_cost × 100 (0 when no cost)
    - realized_profit: Sum of trade profits (priced positions only)
    - unrealized_profit: total_value - (total_cost - invested_capital_returned)
    - positions_at_target: Positions at or above the first target
    - positions_at_stop_loss: Positions at or below their stop
    - average_return_percent: total_profit_percent / total_positions
    - calculated_at: When the metrics were computed (UTC)
    """

    total_positions: int = Field(..., ge=0)
    total_value: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_profit_percent: Decimal
    realized_profit: Decimal
    unrealized_profit: Decimal
    positions_at_target: int = Field(..., ge=0)
    positions_at_stop_loss: int = Field(..., ge=0)
    average_return_percent: Decimal
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(frozen=True)
