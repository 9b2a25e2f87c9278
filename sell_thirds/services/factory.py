"""
Service wiring.

Builds the configured store and a PositionService around it. Callers own
the returned instances; nothing here is cached at module level.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from sell_thirds.config import Settings, settings
from sell_thirds.repositories.base import PositionStore
from sell_thirds.repositories.json_file_store import JsonFilePositionStore
from sell_thirds.repositories.memory_store import InMemoryPositionStore
from sell_thirds.services.position_service import PositionService

logger = structlog.get_logger(__name__)


def build_store(app_settings: Optional[Settings] = None) -> PositionStore:
    """Create the store selected by settings.storage_backend."""
    app_settings = app_settings or settings

    if app_settings.storage_backend == "memory":
        store: PositionStore = InMemoryPositionStore(quota_bytes=app_settings.storage_quota_bytes)
    else:
        store = JsonFilePositionStore(
            app_settings.storage_dir, quota_bytes=app_settings.storage_quota_bytes
        )

    logger.debug(
        "position_store_built",
        backend=app_settings.storage_backend,
        storage_dir=str(app_settings.storage_dir),
    )
    return store


def build_position_service(
    app_settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
    id_factory: Optional[Callable[[], UUID]] = None,
) -> PositionService:
    """Create a PositionService backed by the configured store."""
    return PositionService(build_store(app_settings), clock=clock, id_factory=id_factory)
