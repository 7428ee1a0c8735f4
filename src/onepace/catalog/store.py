"""Durable single-slot cache for the catalog and its version marker.

The cache directory holds exactly two files:

- catalog.json: the last fetched catalog, in the remote document shape
- version.txt: the integer version marker of that catalog

Both are written atomically (temp file + rename) so a crash mid-write never
leaves a truncated file that would later parse as valid.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from onepace.catalog.errors import CatalogDecodeError
from onepace.catalog.models import Catalog
from onepace.catalog.schema import catalog_from_json, catalog_to_dict

logger = logging.getLogger(__name__)

CATALOG_FILE_NAME = "catalog.json"
VERSION_FILE_NAME = "version.txt"


def _atomic_write(path: Path, content: str) -> None:
    """Write text to path via a temp file in the same directory.

    Raises:
        OSError: If the directory cannot be created or the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path_str = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=path.parent,
        text=True,
    )
    temp_path = Path(temp_path_str)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)  # Atomic on POSIX
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


class CatalogCacheStore:
    """File-backed holder of one catalog blob plus one version marker."""

    def __init__(
        self, cache_dir: Path, clock: Callable[[], float] = time.time
    ) -> None:
        """Initialize the store.

        Args:
            cache_dir: Directory owned by the host for this cache. Created on
                first write.
            clock: Wall-clock source compared against file mtimes.
        """
        self.cache_dir = cache_dir
        self._clock = clock
        self.catalog_path = cache_dir / CATALOG_FILE_NAME
        self.version_path = cache_dir / VERSION_FILE_NAME

    def age(self) -> timedelta | None:
        """Return the age of the cached blob by modification time.

        Returns:
            Age of catalog.json, or None if it does not exist.
        """
        try:
            mtime = self.catalog_path.stat().st_mtime
        except FileNotFoundError:
            return None
        return timedelta(seconds=max(0.0, self._clock() - mtime))

    def load(self, max_age: timedelta | None = None) -> Catalog | None:
        """Load the cached catalog.

        A stale or unreadable blob is a cache miss, not an error.

        Args:
            max_age: Reject the blob if its mtime is older than this. None
                loads it regardless of age.

        Returns:
            Cached Catalog, or None on miss.
        """
        age = self.age()
        if age is None:
            logger.debug("Catalog cache file does not exist: %s", self.catalog_path)
            return None
        if max_age is not None and age >= max_age:
            logger.debug("Catalog cache expired (age %s)", age)
            return None

        try:
            payload = self.catalog_path.read_bytes()
            catalog = catalog_from_json(payload)
        except CatalogDecodeError as e:
            logger.warning("Ignoring corrupt catalog cache %s: %s", self.catalog_path, e)
            return None
        except OSError as e:
            logger.warning("Failed to read catalog cache %s: %s", self.catalog_path, e)
            return None

        logger.debug("Loaded catalog cache from %s", self.catalog_path)
        return catalog

    def save(self, catalog: Catalog) -> None:
        """Persist a catalog, replacing the previous blob atomically.

        Raises:
            OSError: If the cache cannot be written.
        """
        content = json.dumps(catalog_to_dict(catalog), ensure_ascii=False)
        _atomic_write(self.catalog_path, content)
        logger.debug("Saved catalog cache to %s", self.catalog_path)

    def read_version(self) -> int:
        """Read the persisted version marker.

        Returns:
            Stored version, or 0 when absent or unparsable. 0 means the
            version is unknown and a full fetch is required.
        """
        try:
            text = self.version_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning("Failed to read version marker %s: %s", self.version_path, e)
            return 0
        try:
            return int(text)
        except ValueError:
            logger.warning("Invalid version marker in %s: %r", self.version_path, text)
            return 0

    def write_version(self, version: int) -> None:
        """Persist the version marker atomically.

        Raises:
            OSError: If the marker cannot be written.
        """
        _atomic_write(self.version_path, str(int(version)))
        logger.debug("Saved version marker %d", version)

    def clear(self) -> int:
        """Delete the cached blob and version marker.

        Returns:
            Number of files removed.
        """
        removed = 0
        for path in (self.catalog_path, self.version_path):
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
        if removed:
            logger.info("Cleared catalog cache in %s", self.cache_dir)
        return removed
