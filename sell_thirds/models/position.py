"""
Position Data Model - Sell-in-Thirds Holding

Purpose:
--------
Provides the Pydantic model for a single stock holding managed under the
sell-in-thirds strategy, plus the creation parameters and the derived
lifecycle status.

Data Model:
-----------
Position: holding with frozen sell targets and a progressing stop-loss
CreatePositionParams: raw creation input (validated by validators package)
PositionStatus: derived from how many shares have been sold

Invariants:
-----------
- ticker matches ^[A-Z]{1,5}$
- 0 <= remaining_shares <= original_shares
- remaining_shares = original_shares - sum(trade.shares_sold) for the position
- current_price is a transient scenario price, excluded from serialization
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sell_thirds.models.sell_targets import SellTargets
from sell_thirds.models.stop_loss import StopLoss

TICKER_PATTERN = r"^[A-Z]{1,5}$"


class PositionStatus(str, Enum):
    """
    Position lifecycle status derived from sold shares.

    Values:
    -------
    - ACTIVE: No sales completed yet
    - PARTIALLY_SOLD: Some shares sold (first third typically)
    - MOSTLY_SOLD: At least 66% of shares sold
    - CLOSED: All shares sold
    """

    ACTIVE = "active"
    PARTIALLY_SOLD = "partially_sold"
    MOSTLY_SOLD = "mostly_sold"
    CLOSED = "closed"


@dataclass
class CreatePositionParams:
    """
    Raw parameters for creating a position.

    Deliberately permissive: values may be missing, non-numeric or out of
    range so validate_create_position() can report every violated field.
    """

    ticker: Optional[str]
    buy_price: Any
    original_shares: Any


class Position(BaseModel):
    """
    A single stock holding under the sell-in-thirds strategy.

    Fields:
    -------
    Core Identification:
    - id: Unique position identifier (UUID, immutable)
    - ticker: 1-5 uppercase letters, unique among stored positions

    Entry Details:
    - buy_price: Per-share purchase price
    - original_shares: Shares purchased (immutable)
    - remaining_shares: Shares still held, decreases as trades are recorded

    Derived State:
    - sell_targets: Computed once at creation (frozen)
    - stop_loss: Current stop price, status and history

    Timestamps:
    - created_at: Creation timestamp (UTC)

    Transient:
    - current_price: Scenario price for what-if views, never persisted

    Example:
    --------
    >>> from decimal import Decimal
    >>> from sell_thirds.calculations import calculate_sell_targets
    >>> position = Position(
    ...     ticker="AAPL",
    ...     buy_price=Decimal("150.00"),
    ...     original_shares=300,
    ...     remaining_shares=300,
    ...     sell_targets=calculate_sell_targets(Decimal("150.00"), 300),
    ...     stop_loss=stop,  # StopLoss at 120.00, INITIAL
    ... )
    """

    id: UUID = Field(default_factory=uuid4, description="Unique position identifier")
    ticker: str = Field(..., pattern=TICKER_PATTERN, description="Stock ticker symbol")
    buy_price: Decimal = Field(..., gt=Decimal("0"), description="Per-share purchase price")
    original_shares: int = Field(..., gt=0, description="Shares originally purchased")
    remaining_shares: int = Field(..., ge=0, description="Shares still held")
    sell_targets: SellTargets = Field(..., description="Profit-taking targets")
    stop_loss: StopLoss = Field(..., description="Current stop-loss and history")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Creation timestamp (UTC)"
    )
    current_price: Decimal | None = Field(
        default=None,
        gt=Decimal("0"),
        exclude=True,
        description="Transient scenario price (not persisted)",
    )

    model_config = ConfigDict(use_enum_values=False)

    @field_validator("created_at", mode="before")
    @classmethod
    def ensure_utc(cls, v: datetime | str) -> datetime:
        """Enforce UTC timezone on created_at (accepts ISO strings from stored JSON)."""
        if isinstance(v, str):
            parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

        if not isinstance(v, datetime):
            raise ValueError(f"expected datetime or ISO-8601 string, got {type(v).__name__}")
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @model_validator(mode="after")
    def validate_remaining_shares(self) -> "Position":
        """remaining_shares can never exceed original_shares."""
        if self.remaining_shares > self.original_shares:
            raise ValueError(
                f"remaining_shares {self.remaining_shares} exceeds "
                f"original_shares {self.original_shares}"
            )
        return self

    @property
    def sold_shares(self) -> int:
        return self.original_shares - self.remaining_shares

    @property
    def cost_basis(self) -> Decimal:
        """Total purchase cost (original_shares × buy_price)."""
        return self.buy_price * self.original_shares
