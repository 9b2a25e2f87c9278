"""
Unit Tests for JsonFilePositionStore

Uses pytest's tmp_path for an isolated storage directory per test.
"""

import errno
import json

import pytest

from conftest import make_position, make_trade
from sell_thirds.exceptions import StorageQuotaExceededError, StorageUnavailableError
from sell_thirds.repositories import JsonFilePositionStore
from sell_thirds.repositories import json_file_store


@pytest.fixture
def file_store(tmp_path):
    return JsonFilePositionStore(tmp_path / "tracker", quota_bytes=1024 * 1024)


class TestJsonFilePersistence:
    """Test file layout and round trips"""

    @pytest.mark.asyncio
    async def test_missing_files_load_empty(self, file_store):
        assert await file_store.load_positions() == []
        assert await file_store.load_trades() == []

    @pytest.mark.asyncio
    async def test_round_trip_through_files(self, file_store):
        position = make_position()
        trade = make_trade(position)

        await file_store.save_positions([position])
        await file_store.save_trades([trade])

        assert await file_store.load_positions() == [position]
        assert await file_store.load_trades() == [trade]

    @pytest.mark.asyncio
    async def test_writes_json_arrays_with_string_decimals(self, file_store):
        await file_store.save_positions([make_position()])

        raw = json.loads((file_store.directory / "positions.json").read_text(encoding="utf-8"))

        assert isinstance(raw, list)
        assert raw[0]["ticker"] == "AAPL"
        assert raw[0]["buy_price"] == "150.00"
        assert "current_price" not in raw[0]

    @pytest.mark.asyncio
    async def test_no_temp_file_left_behind(self, file_store):
        await file_store.save_positions([make_position()])

        assert sorted(p.name for p in file_store.directory.iterdir()) == ["positions.json"]

    @pytest.mark.asyncio
    async def test_corrupted_file_loads_empty(self, file_store):
        file_store.directory.mkdir(parents=True)
        (file_store.directory / "trades.json").write_text("[{broken", encoding="utf-8")

        assert await file_store.load_trades() == []

    @pytest.mark.asyncio
    async def test_undecodable_file_loads_empty(self, file_store):
        file_store.directory.mkdir(parents=True)
        (file_store.directory / "positions.json").write_bytes(b"\xff\xfe\x00garbage")

        assert await file_store.load_positions() == []

    @pytest.mark.asyncio
    async def test_clear_all_removes_only_tracker_files(self, file_store):
        await file_store.save_positions([make_position()])
        await file_store.save_trades([])
        other = file_store.directory / "notes.txt"
        other.write_text("keep me", encoding="utf-8")

        await file_store.clear_all()

        assert await file_store.load_positions() == []
        assert other.exists()


class TestJsonFileFailures:
    """Test write-path failure mapping"""

    @pytest.mark.asyncio
    async def test_quota_exceeded(self, tmp_path):
        store = JsonFilePositionStore(tmp_path, quota_bytes=64)

        with pytest.raises(StorageQuotaExceededError) as exc_info:
            await store.save_positions([make_position()])

        assert exc_info.value.quota_bytes == 64
        assert not (tmp_path / "positions.json").exists()

    @pytest.mark.asyncio
    async def test_quota_counts_both_collections(self, tmp_path):
        position = make_position()
        store = JsonFilePositionStore(tmp_path, quota_bytes=1024 * 1024)
        await store.save_positions([position])
        positions_size = (tmp_path / "positions.json").stat().st_size

        store.quota_bytes = positions_size + 10
        with pytest.raises(StorageQuotaExceededError):
            await store.save_trades([make_trade(position)])

    @pytest.mark.asyncio
    async def test_disk_full_maps_to_quota_error(self, file_store, monkeypatch):
        def disk_full(*args, **kwargs):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(file_store, "_write_sync", disk_full)

        with pytest.raises(StorageQuotaExceededError):
            await file_store.save_positions([make_position()])

    @pytest.mark.asyncio
    async def test_failed_rename_removes_temp_file(self, file_store, monkeypatch):
        position = make_position()
        await file_store.save_positions([position])

        def disk_full(*args, **kwargs):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(json_file_store.os, "replace", disk_full)

        with pytest.raises(StorageQuotaExceededError):
            await file_store.save_positions([position, make_position("MSFT")])

        assert not (file_store.directory / "positions.json.tmp").exists()
        assert await file_store.load_positions() == [position]

    @pytest.mark.asyncio
    async def test_other_os_error_maps_to_unavailable(self, file_store, monkeypatch):
        def read_only(*args, **kwargs):
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(file_store, "_write_sync", read_only)

        with pytest.raises(StorageUnavailableError):
            await file_store.save_trades([])


class TestStorageHealth:
    @pytest.mark.asyncio
    async def test_reports_usage(self, file_store):
        await file_store.save_positions([make_position()])
        used = (file_store.directory / "positions.json").stat().st_size

        health = await file_store.check_storage_health()

        assert health.available
        assert health.space_used == used
        assert health.space_remaining == file_store.quota_bytes - used
        assert not health.quota_exceeded

    @pytest.mark.asyncio
    async def test_unwritable_location_is_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory", encoding="utf-8")
        store = JsonFilePositionStore(blocker / "tracker")

        health = await store.check_storage_health()

        assert not health.available
