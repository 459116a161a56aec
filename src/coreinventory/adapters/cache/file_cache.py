"""File-based version cache implementing VersionCachePort."""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
import threading
from pathlib import Path

from coreinventory.core.exceptions import CacheCorruptError
from coreinventory.core.models import CacheEntry


class FileVersionCache:
    """Version cache backed by one JSON document per core id.

    Each ``{core_id}.json`` holds the last processed version and the record
    serialized for it. Writes replace the whole document atomically so the
    version and the record can never drift apart on disk.

    Attributes:
        cache_dir: Directory where cache documents are stored.
    """

    def __init__(self, cache_dir: Path) -> None:
        """Initialize the cache with a directory path.

        Args:
            cache_dir: Directory where cache documents will be stored.
        """
        self.cache_dir = cache_dir
        self._lock = threading.Lock()

    def _entry_path(self, key: str) -> Path:
        """Get the path for a cache document."""
        return self.cache_dir / f"{key}.json"

    def get(self, key: str) -> CacheEntry | None:
        """Get the cached entry for a core id, or None if not cached.

        Args:
            key: Core id.

        Returns:
            The cached entry, or None when nothing is stored for the key.

        Raises:
            CacheCorruptError: If the document is unreadable, lacks a record,
                or its stored version disagrees with the record's version.
        """
        path = self._entry_path(key)
        if not path.exists():
            return None

        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CacheCorruptError(
                f"Cache entry corrupt for '{key}'", key=key, path=path, cause=e
            ) from e

        version = data.get("version") if isinstance(data, dict) else None
        record = data.get("core") if isinstance(data, dict) else None
        if not isinstance(version, str) or not isinstance(record, dict):
            raise CacheCorruptError(
                f"Cache entry for '{key}' is missing its version or record",
                key=key,
                path=path,
            )

        try:
            return CacheEntry(version=version, record=record)
        except ValueError as e:
            raise CacheCorruptError(str(e), key=key, path=path, cause=e) from e

    def put(self, key: str, entry: CacheEntry) -> None:
        """Store or overwrite the entry for a core id.

        Args:
            key: Core id.
            entry: The version and record to store.
        """
        path = self._entry_path(key)
        document = {"version": entry.version, "core": entry.record}

        with self._lock:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_dir, prefix=f".{key}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp_name, path)
            finally:
                # Clean up temporary file if the replace did not happen
                Path(tmp_name).unlink(missing_ok=True)

    def invalidate(self, key: str) -> None:
        """Remove the entry for a core id.

        Args:
            key: Core id to invalidate.
        """
        with self._lock:
            self._entry_path(key).unlink(missing_ok=True)

    def list_all_keys(self) -> list[str]:
        """List all cached core ids.

        Returns:
            Sorted list of core ids currently in the cache.
        """
        if not self.cache_dir.exists():
            return []
        return sorted(
            path.stem
            for path in self.cache_dir.glob("*.json")
            if not path.name.startswith(".")
        )

    def statistics(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with 'total_size' (bytes) and 'entry_count'.
        """
        total_size = 0
        entry_count = 0

        for key in self.list_all_keys():
            with contextlib.suppress(OSError):
                total_size += self._entry_path(key).stat().st_size
                entry_count += 1

        return {"total_size": total_size, "entry_count": entry_count}
