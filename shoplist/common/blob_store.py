"""
Blob Store - key/value persistence for cart states

Minimal contract: get/set/delete bytes by string key, no cross-key
transactions. Writes to the same key apply in call order (last write wins).

Implementations:
- MemoryBlobStore: process-local dict (tests, ephemeral sessions)
- FileBlobStore: one file per key under a directory
"""
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import quote

import structlog

from shoplist.common.config import Settings, get_settings

logger = structlog.get_logger()


class BlobStore(ABC):
    """Abstract key/value store for serialized blobs."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Stored bytes for key, or None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; deleting a missing key is not an error."""
        pass


class MemoryBlobStore(BlobStore):
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return sorted(self._data)


class FileBlobStore(BlobStore):
    """
    One file per key. Keys are percent-escaped into safe file names and
    written atomically (temp file + rename).
    """

    SUFFIX = ".json"

    def __init__(self, root: str):
        self.root = Path(root).expanduser()
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / (quote(key, safe="-_.") + self.SUFFIX)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def create_blob_store(settings: Optional[Settings] = None) -> BlobStore:
    """Blob store selected by settings.storage_backend."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryBlobStore()
    logger.debug("file_blob_store_selected", path=settings.storage_path)
    return FileBlobStore(settings.storage_path)
