"""
Trade Data Model - Recorded Partial Sales

Purpose:
--------
Provides the immutable record of a completed partial (or full) sale of a
position. Trades reference their position by id; positions do not embed
trades.

Derived Fields:
---------------
- total_value = shares_sold × sell_price
- profit = (sell_price - buy_price) × shares_sold
- profit_percent = (sell_price - buy_price) / buy_price × 100

All derived values are rounded to cents when the trade is recorded.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer


class TradeType(str, Enum):
    """
    Type of sale within the sell-in-thirds strategy.

    Values:
    -------
    - FIRST_TARGET: Sale at the +50% target
    - SECOND_TARGET: Sale at the +100% target
    - STOP_LOSS: Sale triggered by the stop-loss
    - MANUAL: Any other sale
    """

    FIRST_TARGET = "first_target"
    SECOND_TARGET = "second_target"
    STOP_LOSS = "stop_loss"
    MANUAL = "manual"


TARGET_TRADE_TYPES = frozenset({TradeType.FIRST_TARGET, TradeType.SECOND_TARGET})


@dataclass
class RecordTradeParams:
    """
    Raw parameters for recording a trade.

    trade_type is inferred from the sell price when omitted.
    """

    position_id: UUID | str
    shares_sold: Any
    sell_price: Any
    trade_type: Optional[TradeType] = None


class Trade(BaseModel):
    """
    Immutable record of a completed sale.

    Fields:
    -------
    - id: Unique trade identifier
    - position_id: Owning position (weak reference, resolved by lookup)
    - shares_sold: Shares sold (<= position remaining at recording time)
    - sell_price: Per-share sale price
    - total_value: shares_sold × sell_price
    - profit: (sell_price - buy_price) × shares_sold
    - profit_percent: (sell_price - buy_price) / buy_price × 100
    - executed_at: Recording timestamp (UTC), ordering key for progression
    - trade_type: FIRST_TARGET | SECOND_TARGET | STOP_LOSS | MANUAL

    Example:
    --------
    >>> trade = Trade(
    ...     position_id=position.id,
    ...     shares_sold=100,
    ...     sell_price=Decimal("225.00"),
    ...     total_value=Decimal("22500.00"),
    ...     profit=Decimal("7500.00"),
    ...     profit_percent=Decimal("50.00"),
    ...     executed_at=datetime.now(UTC),
    ...     trade_type=TradeType.FIRST_TARGET,
    ... )
    """

    id: UUID = Field(default_factory=uuid4, description="Unique trade identifier")
    position_id: UUID = Field(..., description="Owning position id")
    shares_sold: int = Field(..., gt=0, description="Shares sold in this trade")
    sell_price: Decimal = Field(..., gt=Decimal("0"), description="Per-share sale price")
    total_value: Decimal = Field(..., description="shares_sold × sell_price")
    profit: Decimal = Field(..., description="(sell_price - buy_price) × shares_sold")
    profit_percent: Decimal = Field(..., description="Profit as % of buy price")
    executed_at: datetime = Field(..., description="Execution timestamp (UTC)")
    trade_type: TradeType = Field(..., description="Which target (or stop/manual) was hit")

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    @field_validator("executed_at", mode="before")
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

    @model_serializer
    def serialize_model(self) -> dict[str, Any]:
        """
        Serialize with Decimals and UUIDs as strings.

        Keeps cent precision intact through JSON storage.
        """
        return {
            "id": str(self.id),
            "position_id": str(self.position_id),
            "shares_sold": self.shares_sold,
            "sell_price": str(self.sell_price),
            "total_value": str(self.total_value),
            "profit": str(self.profit),
            "profit_percent": str(self.profit_percent),
            "executed_at": self.executed_at.isoformat(),
            "trade_type": self.trade_type.value,
        }

    @property
    def is_target_trade(self) -> bool:
        return self.trade_type in TARGET_TRADE_TYPES
