"""Position/trade store contract and implementations."""

from sell_thirds.repositories.base import PositionStore
from sell_thirds.repositories.json_file_store import JsonFilePositionStore
from sell_thirds.repositories.memory_store import InMemoryPositionStore

__all__ = ["InMemoryPositionStore", "JsonFilePositionStore", "PositionStore"]
