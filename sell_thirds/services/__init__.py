"""Position lifecycle service and its result types."""

from sell_thirds.services.factory import build_position_service, build_store
from sell_thirds.services.position_service import PositionService
from sell_thirds.services.result import ServiceResult, TradeRecordResult

__all__ = [
    "PositionService",
    "ServiceResult",
    "TradeRecordResult",
    "build_position_service",
    "build_store",
]
