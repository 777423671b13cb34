"""Tests for key-value storage backends (memory, file, quota)."""

from pathlib import Path
from unittest.mock import patch

import pytest

from reportdesk.config import StorageConfig
from reportdesk.services.store import (
    FileStorage,
    MemoryStorage,
    StorageError,
    create_storage,
)


class TestMemoryStorage:
    """MemoryStorage get/set/remove/keys."""

    def test_get_missing_returns_none(self) -> None:
        """get_item returns None for an unknown key."""
        assert MemoryStorage().get_item("reports") is None

    def test_set_get_remove(self) -> None:
        """Values round-trip and remove_item deletes them."""
        storage = MemoryStorage()
        storage.set_item("reports", "[]")
        assert storage.get_item("reports") == "[]"
        assert storage.keys() == ["reports"]
        storage.remove_item("reports")
        assert storage.get_item("reports") is None
        storage.remove_item("reports")

    def test_initial_items(self) -> None:
        """initial seeds the store."""
        storage = MemoryStorage(initial={"lastReportId": "RPT1000"})
        assert storage.get_item("lastReportId") == "RPT1000"

    def test_quota_rejects_write_and_keeps_old_value(self) -> None:
        """A write past the quota raises and leaves the previous value."""
        storage = MemoryStorage(quota_bytes=10)
        storage.set_item("a", "12345")
        with pytest.raises(StorageError, match="quota exceeded"):
            storage.set_item("b", "123456")
        assert storage.get_item("b") is None
        storage.set_item("a", "1234567890")
        assert storage.get_item("a") == "1234567890"
        with pytest.raises(StorageError):
            storage.set_item("a", "12345678901")
        assert storage.get_item("a") == "1234567890"

    def test_zero_quota_is_unlimited(self) -> None:
        """quota_bytes=0 disables the check."""
        storage = MemoryStorage(quota_bytes=0)
        storage.set_item("reports", "x" * 100_000)
        assert len(storage.get_item("reports") or "") == 100_000


class TestFileStorage:
    """FileStorage keeps one file per key."""

    def test_set_creates_dir_and_file(self, tmp_path: Path) -> None:
        """set_item writes data_dir/key."""
        data_dir = tmp_path / "store"
        storage = FileStorage(data_dir)
        storage.set_item("reports", '[{"x": 1}]')
        assert (data_dir / "reports").read_text(encoding="utf-8") == '[{"x": 1}]'
        assert storage.get_item("reports") == '[{"x": 1}]'

    def test_get_missing_and_empty_dir(self, tmp_path: Path) -> None:
        """Missing dir and missing key read as None / no keys."""
        storage = FileStorage(tmp_path / "nope")
        assert storage.get_item("reports") is None
        assert storage.keys() == []

    def test_remove_item(self, tmp_path: Path) -> None:
        """remove_item deletes the file and ignores missing keys."""
        storage = FileStorage(tmp_path)
        storage.set_item("lastReportId", "RPT1234")
        storage.remove_item("lastReportId")
        assert not (tmp_path / "lastReportId").exists()
        storage.remove_item("lastReportId")

    def test_keys_skips_hidden_files(self, tmp_path: Path) -> None:
        """keys() lists stored keys, not temp or hidden files."""
        storage = FileStorage(tmp_path)
        storage.set_item("reports", "[]")
        storage.set_item("lastReportId", "RPT1000")
        (tmp_path / ".tmp-leftover").write_text("x", encoding="utf-8")
        assert storage.keys() == ["lastReportId", "reports"]

    def test_invalid_key_raises(self, tmp_path: Path) -> None:
        """Keys that would escape data_dir are rejected."""
        storage = FileStorage(tmp_path)
        for key in ("", "../x", "a/b", ".hidden"):
            with pytest.raises(StorageError):
                storage.set_item(key, "v")

    def test_failed_write_keeps_previous_value(self, tmp_path: Path) -> None:
        """If the final move fails the old file stays and no temp file is left."""
        storage = FileStorage(tmp_path)
        storage.set_item("reports", "old")
        with patch("reportdesk.services.store.backends.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="cannot write"):
                storage.set_item("reports", "new")
        assert storage.get_item("reports") == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["reports"]

    def test_unreadable_file_raises_storage_error(self, tmp_path: Path) -> None:
        """Undecodable bytes surface as StorageError."""
        (tmp_path / "reports").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(StorageError):
            FileStorage(tmp_path).get_item("reports")

    def test_quota_counts_existing_files(self, tmp_path: Path) -> None:
        """Quota covers bytes of all stored keys."""
        storage = FileStorage(tmp_path, quota_bytes=8)
        storage.set_item("lastReportId", "RPT1234")
        with pytest.raises(StorageError, match="quota exceeded"):
            storage.set_item("reports", "[]")
        assert storage.get_item("reports") is None

    def test_unlistable_dir_raises_storage_error(self, tmp_path: Path) -> None:
        """A directory listing error surfaces as StorageError, also via the quota check."""
        storage = FileStorage(tmp_path, quota_bytes=1024)
        with patch.object(Path, "iterdir", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(StorageError, match="cannot list"):
                storage.keys()
            with pytest.raises(StorageError):
                storage.set_item("reports", "[]")

    def test_stat_failure_on_read_raises_storage_error(self, tmp_path: Path) -> None:
        """is_file() errors on get_item become StorageError."""
        storage = FileStorage(tmp_path)
        with patch.object(Path, "is_file", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(StorageError, match="cannot read"):
                storage.get_item("reports")


class TestCreateStorage:
    """create_storage picks the backend from StorageConfig."""

    def test_memory_backend(self) -> None:
        """backend=memory builds MemoryStorage with the quota."""
        storage = create_storage(StorageConfig(backend="memory", quota_bytes=42))
        assert isinstance(storage, MemoryStorage)
        assert storage.quota_bytes == 42

    def test_file_backend(self, tmp_path: Path) -> None:
        """backend=file builds FileStorage in data_dir."""
        storage = create_storage(StorageConfig(backend="file", data_dir=tmp_path))
        assert isinstance(storage, FileStorage)
        assert storage.data_dir == tmp_path
