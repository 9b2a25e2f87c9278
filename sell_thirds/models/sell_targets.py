"""
Sell Target Data Model - Sell-in-Thirds Profit Taking Levels

Purpose:
--------
Holds the two profit-taking price targets and the share allocation for each
third of a position. Computed once when a position is created and never
modified afterwards.

Target Levels:
--------------
- first_target: buy_price × 1.5 (+50%), rounded to cents
- second_target: buy_price × 2.0 (+100%), rounded to cents

Share Allocation:
-----------------
- first_target_shares = floor(original_shares / 3)
- second_target_shares = floor(original_shares / 3)
- remaining_shares = original_shares - first_target_shares - second_target_shares

The remaining bucket absorbs the integer-division remainder, so the three
allocations always sum to original_shares (301 shares → 100 / 100 / 101).
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SellTargets(BaseModel):
    """
    Profit-taking targets and per-third share allocation.

    Example:
    --------
    >>> from decimal import Decimal
    >>> targets = SellTargets(
    ...     first_target=Decimal("225.00"),
    ...     second_target=Decimal("300.00"),
    ...     first_target_shares=100,
    ...     second_target_shares=100,
    ...     remaining_shares=100,
    ... )
    """

    first_target: Decimal = Field(..., ge=Decimal("0"), description="+50% target price")
    second_target: Decimal = Field(..., ge=Decimal("0"), description="+100% target price")
    first_target_shares: int = Field(..., ge=0, description="Shares to sell at first target")
    second_target_shares: int = Field(..., ge=0, description="Shares to sell at second target")
    remaining_shares: int = Field(..., ge=0, description="Shares held after both target sales")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_target_order(self) -> "SellTargets":
        """Second target can never sit below the first (they meet only at sub-cent prices)."""
        if self.second_target < self.first_target:
            raise ValueError(
                f"second_target {self.second_target} is below first_target {self.first_target}"
            )
        return self

    @property
    def total_shares(self) -> int:
        """Sum of the three allocations (equals the position's original_shares)."""
        return self.first_target_shares + self.second_target_shares + self.remaining_shares
