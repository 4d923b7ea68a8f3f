"""
Snapshot persistence for the tenant collection.

Three named snapshots are kept, each written as a full replacement:
- <prefix>stores: the list of stores
- <prefix>active_id: the active store id
- <prefix>stripe_config: the global Stripe platform keys

Loading never fails: a missing or unreadable snapshot falls back to its
empty default. Saving never raises to the caller: failures are logged.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter

from shopgenie.config import Settings, get_settings
from shopgenie.models.store import PlatformCredentials, Store, TenantCollection

logger = logging.getLogger(__name__)

_stores_adapter = TypeAdapter(List[Store])


class StorageError(Exception):
    """Raised by a storage backend when it cannot read or write a key."""
    pass


class StorageBackend(ABC):
    """Durable string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key was never written."""
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        """Replace the value stored under key."""
        pass


class MemoryStorage(StorageBackend):
    """Process-local storage, mainly for tests and previews."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value


class JsonFileStorage(StorageBackend):
    """One file per key under a directory; writes are atomic replaces."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str):
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e


class RedisStorage(StorageBackend):
    """Snapshots stored as plain Redis string keys."""

    def __init__(self, client=None, url: Optional[str] = None):
        if client is None:
            from shopgenie.redis import get_redis_client
            client = get_redis_client(url)
        self.client = client

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except Exception as e:
            raise StorageError(f"Redis GET {key} failed: {e}") from e

    def set(self, key: str, value: str):
        try:
            self.client.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis SET {key} failed: {e}") from e


def build_storage(settings: Optional[Settings] = None) -> StorageBackend:
    """Storage backend selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "file":
        return JsonFileStorage(settings.STORAGE_DIR or ".shopgenie")
    if backend == "redis":
        return RedisStorage(url=settings.REDIS_URL)
    return MemoryStorage()


class SnapshotStore:
    """Loads and saves the three tenant-collection snapshots."""

    def __init__(self, backend: StorageBackend, prefix: str = "shopgenie_"):
        self.backend = backend
        self.stores_key = f"{prefix}stores"
        self.active_id_key = f"{prefix}active_id"
        self.credentials_key = f"{prefix}stripe_config"

    # =========================================================================
    # LOAD
    # =========================================================================

    def load(self) -> TenantCollection:
        """Rebuild the collection; each unreadable slice falls back to its default."""
        return TenantCollection(
            stores=self._load_stores(),
            active_id=self._load_active_id(),
            platform_credentials=self._load_credentials(),
        )

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.backend.get(key)
        except StorageError as e:
            logger.error(f"Snapshot read failed for {key}: {e}")
            return None

    def _load_stores(self) -> List[Store]:
        raw = self._read(self.stores_key)
        if not raw:
            return []
        try:
            return _stores_adapter.validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable store snapshot {self.stores_key}: {e}")
            return []

    def _load_active_id(self) -> str:
        return self._read(self.active_id_key) or ""

    def _load_credentials(self) -> PlatformCredentials:
        raw = self._read(self.credentials_key)
        if not raw:
            return PlatformCredentials()
        try:
            return PlatformCredentials.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable credential snapshot {self.credentials_key}: {e}")
            return PlatformCredentials()

    # =========================================================================
    # SAVE
    # =========================================================================

    def _write(self, key: str, value: str):
        try:
            self.backend.set(key, value)
        except StorageError as e:
            logger.error(f"Snapshot write failed for {key}: {e}")

    def save_stores(self, stores: List[Store]):
        self._write(self.stores_key, json.dumps([store.to_snapshot() for store in stores]))

    def save_active_id(self, active_id: str):
        self._write(self.active_id_key, active_id)

    def save_credentials(self, credentials: PlatformCredentials):
        self._write(self.credentials_key, json.dumps(credentials.to_snapshot()))

    def save(self, previous: TenantCollection, current: TenantCollection):
        """Write every slice that changed between two collection values."""
        if current.stores is not previous.stores:
            self.save_stores(current.stores)
        if current.active_id != previous.active_id:
            self.save_active_id(current.active_id)
        if current.platform_credentials != previous.platform_credentials:
            self.save_credentials(current.platform_credentials)
