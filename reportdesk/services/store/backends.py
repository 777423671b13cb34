"""Key-value storage backends (the browser localStorage boundary).

Values are text. Backends raise StorageError on any failure; the report
store absorbs it. A non-zero quota caps the total bytes held across keys,
the same way a browser rejects writes past its storage quota.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from reportdesk.config import StorageConfig

LOG = logging.getLogger("reportdesk.services.store.backends")


class StorageError(Exception):
    """Raised when the key-value backend cannot read or write."""

    pass


class KeyValueStorage(ABC):
    """Abstract text key-value storage."""

    def __init__(self, quota_bytes: int = 0) -> None:
        self.quota_bytes = quota_bytes

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return stored text for key, or None when absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete key. Missing keys are ignored."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored."""
        ...

    def _check_quota(self, key: str, value: str) -> None:
        """Raise StorageError if writing value under key would exceed the quota."""
        if not self.quota_bytes:
            return
        used = 0
        for other in self.keys():
            if other == key:
                continue
            used += len((self.get_item(other) or "").encode("utf-8"))
        needed = used + len(value.encode("utf-8"))
        if needed > self.quota_bytes:
            raise StorageError(f"quota exceeded writing {key!r}: {needed} > {self.quota_bytes} bytes")


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage; lives as long as the instance."""

    def __init__(self, quota_bytes: int = 0, initial: dict[str, str] | None = None) -> None:
        super().__init__(quota_bytes)
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_quota(key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class FileStorage(KeyValueStorage):
    """One file per key under data_dir.

    Writes land in a temp file first and are moved into place, so a failed
    write keeps the previous value.
    """

    def __init__(self, data_dir: Path, quota_bytes: int = 0) -> None:
        super().__init__(quota_bytes)
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"invalid storage key: {key!r}")
        return self.data_dir / key

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            if not path.is_file():
                return None
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self._check_quota(key, value)
        tmp_name = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp-", text=True)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"cannot write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
        LOG.debug("Wrote %s (%s bytes)", path, len(value.encode("utf-8")))

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"cannot remove {path}: {e}") from e

    def keys(self) -> list[str]:
        try:
            if not self.data_dir.is_dir():
                return []
            return sorted(f.name for f in self.data_dir.iterdir() if f.is_file() and not f.name.startswith("."))
        except OSError as e:
            raise StorageError(f"cannot list {self.data_dir}: {e}") from e


def create_storage(config: StorageConfig) -> KeyValueStorage:
    """Build the backend selected by storage.backend."""
    if config.backend == "memory":
        return MemoryStorage(quota_bytes=config.quota_bytes)
    return FileStorage(config.data_dir, quota_bytes=config.quota_bytes)
