"""Models package."""

from sell_thirds.models.metrics import (
    ProfitLossMetrics,
    RecommendedAction,
    TriggeredLevels,
    TriggerPrices,
)
from sell_thirds.models.portfolio import PortfolioMetrics
from sell_thirds.models.position import CreatePositionParams, Position, PositionStatus
from sell_thirds.models.sell_targets import SellTargets
from sell_thirds.models.stop_loss import StopLoss, StopLossHistoryEntry, StopLossStatus
from sell_thirds.models.storage import StorageHealth
from sell_thirds.models.trade import RecordTradeParams, Trade, TradeType
from sell_thirds.models.validation import (
    FieldValidationError,
    ValidationErrorCode,
    ValidationResult,
)

__all__ = [
    "CreatePositionParams",
    "FieldValidationError",
    "PortfolioMetrics",
    "Position",
    "PositionStatus",
    "ProfitLossMetrics",
    "RecommendedAction",
    "RecordTradeParams",
    "SellTargets",
    "StopLoss",
    "StopLossHistoryEntry",
    "StopLossStatus",
    "StorageHealth",
    "Trade",
    "TradeType",
    "TriggerPrices",
    "TriggeredLevels",
    "ValidationErrorCode",
    "ValidationResult",
]
