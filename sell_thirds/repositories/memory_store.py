"""
In-Memory Position Store

Process-local store that keeps each collection as a serialized JSON
payload, so loads go through the same parsing and corruption recovery as
the file store and callers never share model instances with the store.
"""

from collections.abc import Sequence
from typing import Optional

import structlog

from sell_thirds.exceptions import StorageQuotaExceededError
from sell_thirds.models.position import Position
from sell_thirds.models.trade import Trade
from sell_thirds.repositories.base import (
    POSITIONS_COLLECTION,
    TRADES_COLLECTION,
    parse_collection,
    serialize_collection,
)

logger = structlog.get_logger(__name__)


class InMemoryPositionStore:
    """
    Store for tests and ephemeral sessions.

    Args:
        quota_bytes: Optional limit on the combined payload size
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._payloads: dict[str, str] = {}

    async def load_positions(self) -> list[Position]:
        return parse_collection(
            self._payloads.get(POSITIONS_COLLECTION), Position, POSITIONS_COLLECTION
        )

    async def save_positions(self, positions: Sequence[Position]) -> None:
        payload = serialize_collection(positions, Position)
        self._write(POSITIONS_COLLECTION, payload, "save positions")
        logger.debug("positions_saved", count=len(positions), backend="memory")

    async def load_trades(self) -> list[Trade]:
        return parse_collection(self._payloads.get(TRADES_COLLECTION), Trade, TRADES_COLLECTION)

    async def save_trades(self, trades: Sequence[Trade]) -> None:
        payload = serialize_collection(trades, Trade)
        self._write(TRADES_COLLECTION, payload, "save trades")
        logger.debug("trades_saved", count=len(trades), backend="memory")

    async def clear_all(self) -> None:
        self._payloads.clear()
        logger.info("storage_cleared", backend="memory")

    def space_used(self) -> int:
        """Bytes currently held across both collections."""
        return sum(len(payload.encode("utf-8")) for payload in self._payloads.values())

    def _write(self, collection: str, payload: str, operation: str) -> None:
        if self.quota_bytes is not None:
            others = sum(
                len(p.encode("utf-8")) for name, p in self._payloads.items() if name != collection
            )
            required = others + len(payload.encode("utf-8"))
            if required > self.quota_bytes:
                raise StorageQuotaExceededError(
                    operation, required_bytes=required, quota_bytes=self.quota_bytes
                )
        self._payloads[collection] = payload
