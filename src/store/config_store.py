"""Cached, lock-guarded access to one versioned config file.

This module wraps the stateless codec for callers that read one config
from several threads. The store caches the last record per shape and
drops the cache on every successful save or clear.
"""

from __future__ import annotations

import os
from pathlib import Path
import threading
from typing import Any, TypeVar

from core.config import VConfigSettings
from core.errors import VConfigIOError
from core.logging_config import get_logger
from core.record_validation import record_shape
from store.version_peek import peek_version
from store.versioned_codec import load_config, save_config

RecordT = TypeVar("RecordT")

logger = get_logger(__name__)


class VersionedConfigStore:
    """Filesystem-backed config store with an in-memory record cache."""

    def __init__(
        self,
        path: str | os.PathLike[str],
        settings: VConfigSettings | None = None,
    ) -> None:
        self._path = Path(path)
        self._settings = settings
        self._lock = threading.RLock()
        self._cache: dict[type[Any], Any] = {}

    @property
    def path(self) -> Path:
        """Config file location."""
        return self._path

    def exists(self) -> bool:
        """Return whether the config file is present."""
        return self._path.exists()

    def peek_version(self) -> str:
        """Return the stored Version value without a full decode."""
        with self._lock:
            return peek_version(self._path)

    def load(self, shape: type[RecordT]) -> RecordT:
        """Load the stored record as ``shape``, reusing the cached value.

        Args:
            shape: Target dataclass type declaring ``Version: str``.

        Returns:
            Cached or freshly decoded record.
        """
        with self._lock:
            cached = self._cache.get(shape)
            if cached is not None:
                return cached
            record = load_config(shape, self._path)
            self._cache[shape] = record
            return record

    def save(self, record: Any) -> None:
        """Write a record and make it the only cached value.

        Args:
            record: Dataclass record with a textual Version field.
        """
        with self._lock:
            save_config(record, self._path, self._settings)
            self._cache = {record_shape(record): record}
            logger.info(
                "config_cache_replaced",
                path=str(self._path),
                record_type=type(record).__name__,
            )

    def invalidate(self) -> None:
        """Drop every cached record."""
        with self._lock:
            self._cache.clear()

    def clear(self) -> None:
        """Remove the config file and drop the cache.

        Raises:
            VConfigIOError: If the file exists but cannot be removed.
        """
        with self._lock:
            self._cache.clear()
            try:
                self._path.unlink(missing_ok=True)
            except OSError as error:
                raise VConfigIOError(
                    f"Failed to remove config file {self._path}: {error}."
                ) from error
            logger.info("config_cleared", path=str(self._path))
