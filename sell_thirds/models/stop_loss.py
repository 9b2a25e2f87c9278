"""
Stop Loss Data Models - Sell-in-Thirds Stop Progression

Purpose:
--------
Tracks the current stop-loss trigger for a position together with an
append-only history of every status change.

Progression Rules:
------------------
- INITIAL: set at creation, buy_price × 0.8 (-20%)
- BREAKEVEN: buy_price, applied automatically after the first target sale
- CUSTOM: explicit user override, never applied automatically

BREAKEVEN and CUSTOM are terminal for automatic progression.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StopLossStatus(str, Enum):
    """
    Stop-loss progression status.

    Values:
    -------
    - INITIAL: Initial stop at -20% of buy price
    - BREAKEVEN: Stop moved to the buy price after first target sale
    - CUSTOM: User-adjusted stop
    """

    INITIAL = "initial"
    BREAKEVEN = "breakeven"
    CUSTOM = "custom"


class StopLossHistoryEntry(BaseModel):
    """Single recorded stop-loss change."""

    price: Decimal = Field(..., ge=Decimal("0"), description="Stop price at this change")
    status: StopLossStatus = Field(..., description="Status at this change")
    changed_at: datetime = Field(..., description="When the change happened (UTC)")
    reason: str = Field(..., min_length=1, description="Why the stop changed")

    model_config = ConfigDict(frozen=True)

    @field_validator("changed_at", mode="before")
    @classmethod
    def ensure_utc(cls, v: datetime | str) -> datetime:
        """Enforce UTC timezone (accepts ISO strings from stored JSON)."""
        if isinstance(v, str):
            parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

        if not isinstance(v, datetime):
            raise ValueError(f"expected datetime or ISO-8601 string, got {type(v).__name__}")
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class StopLoss(BaseModel):
    """
    Current stop-loss configuration with its progression history.

    Fields:
    -------
    - price: Current stop-loss trigger price
    - status: INITIAL | BREAKEVEN | CUSTOM
    - progression_history: Ordered, append-only list of changes. Seeded with
      one entry at position creation.

    Example:
    --------
    >>> from decimal import Decimal
    >>> from datetime import datetime, UTC
    >>> stop = StopLoss(
    ...     price=Decimal("120.00"),
    ...     status=StopLossStatus.INITIAL,
    ...     progression_history=[
    ...         StopLossHistoryEntry(
    ...             price=Decimal("120.00"),
    ...             status=StopLossStatus.INITIAL,
    ...             changed_at=datetime.now(UTC),
    ...             reason="Initial stop-loss set at -20%",
    ...         )
    ...     ],
    ... )
    """

    price: Decimal = Field(..., ge=Decimal("0"), description="Current stop-loss trigger price")
    status: StopLossStatus = Field(..., description="INITIAL | BREAKEVEN | CUSTOM")
    progression_history: tuple[StopLossHistoryEntry, ...] = Field(
        default_factory=tuple, description="Append-only history of stop-loss changes"
    )

    model_config = ConfigDict(frozen=True)

    def with_change(
        self, price: Decimal, status: StopLossStatus, changed_at: datetime, reason: str
    ) -> "StopLoss":
        """Return a new StopLoss moved to price/status with one history entry appended."""
        entry = StopLossHistoryEntry(
            price=price, status=status, changed_at=changed_at, reason=reason
        )
        return StopLoss(
            price=price,
            status=status,
            progression_history=(*self.progression_history, entry),
        )
