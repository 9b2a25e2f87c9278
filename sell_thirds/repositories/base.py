"""
Position Store Contract

The lifecycle manager only needs whole-collection load/save of positions
and trades. Implementations must follow two rules:

- Read path is lenient: unparseable stored data is logged and loaded as
  an empty collection (CorruptedDataError is never raised to callers).
- Write path is strict: failures raise StorageUnavailableError or
  StorageQuotaExceededError.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Any, Protocol, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sell_thirds.exceptions import CorruptedDataError
from sell_thirds.models.position import Position
from sell_thirds.models.trade import Trade

logger = structlog.get_logger(__name__)

POSITIONS_COLLECTION = "positions"
TRADES_COLLECTION = "trades"

ModelT = TypeVar("ModelT", bound=BaseModel)


class PositionStore(Protocol):
    """
    Storage collaborator consumed by PositionService.

    Methods:
    --------
    load_positions() -> list[Position]
    save_positions(positions) -> None
    load_trades() -> list[Trade]
    save_trades(trades) -> None
    clear_all() -> None
    """

    async def load_positions(self) -> list[Position]: ...

    async def save_positions(self, positions: Sequence[Position]) -> None: ...

    async def load_trades(self) -> list[Trade]: ...

    async def save_trades(self, trades: Sequence[Trade]) -> None: ...

    async def clear_all(self) -> None: ...


@lru_cache(maxsize=None)
def _collection_adapter(model: type[BaseModel]) -> TypeAdapter[list[Any]]:
    return TypeAdapter(list[model])  # type: ignore[valid-type]


def serialize_collection(items: Sequence[ModelT], model: type[ModelT]) -> str:
    """Serialize models to a JSON array (Decimals as strings, UTC ISO timestamps)."""
    return _collection_adapter(model).dump_json(list(items)).decode("utf-8")


def parse_collection(
    payload: str | None, model: type[ModelT], collection: str
) -> list[ModelT]:
    """
    Parse a stored JSON array into models.

    Missing payloads load as an empty collection. Anything unparseable
    (bad JSON, not an array, records failing model validation) is logged
    as corrupted and also loads as an empty collection.
    """
    if not payload:
        return []

    try:
        return _collection_adapter(model).validate_json(payload)
    except PydanticValidationError as e:
        error = CorruptedDataError(
            collection, f"{e.error_count()} invalid value(s): {e.errors()[0]['msg']}"
        )

    logger.warning(
        "stored_data_corrupted",
        collection=collection,
        reason=error.reason,
        message=f"Failed to load {collection} from storage, starting empty",
    )
    return []
