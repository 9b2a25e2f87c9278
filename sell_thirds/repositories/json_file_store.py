"""
JSON File Position Store

Persists positions and trades as two JSON files in one directory:

    <storage_dir>/positions.json
    <storage_dir>/trades.json

Writes go to a temporary file that is atomically renamed over the target,
so a failed write never leaves a half-written collection behind. File I/O
runs in a worker thread to keep the event loop free.

Failure Mapping:
----------------
- Combined size above quota_bytes -> StorageQuotaExceededError
- ENOSPC / EDQUOT from the OS -> StorageQuotaExceededError
- Any other OSError -> StorageUnavailableError
- Unparseable file on load -> logged, empty collection
"""

import asyncio
import contextlib
import errno
import os
from collections.abc import Sequence
from pathlib import Path

import structlog

from sell_thirds.config import DEFAULT_STORAGE_QUOTA_BYTES
from sell_thirds.exceptions import StorageQuotaExceededError, StorageUnavailableError
from sell_thirds.models.position import Position
from sell_thirds.models.storage import StorageHealth
from sell_thirds.models.trade import Trade
from sell_thirds.repositories.base import (
    POSITIONS_COLLECTION,
    TRADES_COLLECTION,
    parse_collection,
    serialize_collection,
)

logger = structlog.get_logger(__name__)

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class JsonFilePositionStore:
    """
    File-backed store for positions and trades.

    Args:
        directory: Directory holding the collection files (created on first write)
        quota_bytes: Maximum combined size of both files
    """

    def __init__(self, directory: Path | str, quota_bytes: int = DEFAULT_STORAGE_QUOTA_BYTES):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes
        self._log = logger.bind(storage_dir=str(self.directory))

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}.json"

    async def load_positions(self) -> list[Position]:
        payload = await self._read(POSITIONS_COLLECTION, "load positions")
        return parse_collection(payload, Position, POSITIONS_COLLECTION)

    async def save_positions(self, positions: Sequence[Position]) -> None:
        payload = serialize_collection(positions, Position)
        await self._write(POSITIONS_COLLECTION, payload, "save positions")
        self._log.debug("positions_saved", count=len(positions))

    async def load_trades(self) -> list[Trade]:
        payload = await self._read(TRADES_COLLECTION, "load trades")
        return parse_collection(payload, Trade, TRADES_COLLECTION)

    async def save_trades(self, trades: Sequence[Trade]) -> None:
        payload = serialize_collection(trades, Trade)
        await self._write(TRADES_COLLECTION, payload, "save trades")
        self._log.debug("trades_saved", count=len(trades))

    async def clear_all(self) -> None:
        """Remove the tracker's collection files. Other files in the directory are untouched."""
        try:
            for collection in (POSITIONS_COLLECTION, TRADES_COLLECTION):
                await asyncio.to_thread(self._path(collection).unlink, missing_ok=True)
        except OSError as e:
            self._log.error("storage_clear_failed", error=str(e))
            raise StorageUnavailableError("clear storage", f"Failed to clear storage data: {e}") from e

        self._log.info("storage_cleared")

    async def check_storage_health(self) -> StorageHealth:
        """
        Report availability and usage of the store.

        Returns:
            StorageHealth; available=False when the directory cannot be
            created or written
        """
        try:
            return await asyncio.to_thread(self._health_sync)
        except OSError as e:
            self._log.warning("storage_health_check_failed", error=str(e))
            return StorageHealth(available=False)

    def _health_sync(self) -> StorageHealth:
        self.directory.mkdir(parents=True, exist_ok=True)
        if not os.access(self.directory, os.W_OK):
            return StorageHealth(available=False)

        used = self._space_used_sync()
        return StorageHealth(
            available=True,
            space_used=used,
            space_remaining=max(0, self.quota_bytes - used),
            quota_exceeded=used >= self.quota_bytes,
        )

    def _space_used_sync(self, exclude: str | None = None) -> int:
        total = 0
        for collection in (POSITIONS_COLLECTION, TRADES_COLLECTION):
            if collection == exclude:
                continue
            path = self._path(collection)
            if path.exists():
                total += path.stat().st_size
        return total

    async def _read(self, collection: str, operation: str) -> str | None:
        path = self._path(collection)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            self._log.warning("stored_data_undecodable", collection=collection, error=str(e))
            return None
        except OSError as e:
            self._log.error("storage_read_failed", collection=collection, error=str(e))
            raise StorageUnavailableError(operation) from e

    async def _write(self, collection: str, payload: str, operation: str) -> None:
        data = payload.encode("utf-8")
        try:
            await asyncio.to_thread(self._write_sync, collection, data, operation)
        except StorageQuotaExceededError:
            self._log.warning("storage_quota_exceeded", collection=collection, bytes=len(data))
            raise
        except OSError as e:
            if e.errno in _QUOTA_ERRNOS:
                self._log.warning("storage_disk_full", collection=collection, error=str(e))
                raise StorageQuotaExceededError(operation) from e
            self._log.error("storage_write_failed", collection=collection, error=str(e))
            raise StorageUnavailableError(operation, f"Failed to {operation}: {e}") from e

    def _write_sync(self, collection: str, data: bytes, operation: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

        required = self._space_used_sync(exclude=collection) + len(data)
        if required > self.quota_bytes:
            raise StorageQuotaExceededError(
                operation, required_bytes=required, quota_bytes=self.quota_bytes
            )

        target = self._path(collection)
        tmp = target.with_suffix(".json.tmp")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, target)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise
