"""Catalog resolution with layered caching and version checks.

MetadataResolver owns the single current-catalog slot. Every call runs the
whole "check memory -> check disk -> probe version -> maybe fetch -> write
back" sequence under one lock, so concurrent callers never start more than
one download.

Freshness policy (skipped entirely when force_refresh is set):

1. In-memory catalog younger than the cache duration.
2. On-disk catalog whose mtime is younger than the cache duration.
3. Remote version not newer than the local version marker, and a local
   catalog (memory, or disk of any age) exists.
4. Full fetch, replace memory slot, persist blob and version marker.

After a failed fetch that fell back to a local catalog, that catalog is
served without probing or downloading until the failure backoff elapses.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from onepace.catalog.errors import CatalogCancelledError, CatalogError
from onepace.catalog.fetcher import CatalogFetcher
from onepace.catalog.models import Catalog
from onepace.catalog.store import CatalogCacheStore
from onepace.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION = timedelta(hours=24)
DEFAULT_FAILURE_BACKOFF = timedelta(minutes=5)

# Seconds between cancellation checks while waiting for the lock
LOCK_POLL_INTERVAL = 0.1


class MetadataResolver:
    """Serves the current catalog from memory, disk or the network."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        store: CatalogCacheStore,
        cache_duration: timedelta = DEFAULT_CACHE_DURATION,
        failure_backoff: timedelta = DEFAULT_FAILURE_BACKOFF,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the resolver.

        Args:
            fetcher: Network collaborator for version probe and download.
            store: Durable single-slot cache.
            cache_duration: How long a catalog is served without checking
                the remote version.
            failure_backoff: After a failed download with a fallback, how
                long the fallback is served before the network is tried again.
            clock: Wall-clock source (seconds since epoch). Must agree with
                the clock the store compares file mtimes against.
        """
        self._fetcher = fetcher
        self._store = store
        self._cache_duration = cache_duration
        self._failure_backoff = failure_backoff
        self._clock = clock
        self._lock = threading.Lock()
        self._catalog: Catalog | None = None
        self._refreshed_at: float | None = None
        self._retry_after: float | None = None

    @property
    def store(self) -> CatalogCacheStore:
        return self._store

    @property
    def current(self) -> Catalog | None:
        """The catalog currently held in memory, if any."""
        return self._catalog

    @property
    def last_refreshed(self) -> datetime | None:
        """When the in-memory catalog was last adopted or confirmed."""
        if self._refreshed_at is None:
            return None
        return datetime.fromtimestamp(self._refreshed_at, tz=timezone.utc)

    def resolve(
        self,
        force_refresh: bool = False,
        cancel: CancellationToken | None = None,
    ) -> Catalog:
        """Return the current catalog, refreshing it if needed.

        Args:
            force_refresh: Skip all cache checks and download immediately.
            cancel: Optional cancellation token.

        Returns:
            The freshest catalog available. After a failed download this
            may be an older catalog (degraded success).

        Raises:
            CatalogError: Only when the download failed and no catalog is
                held in memory or on disk.
        """
        self._acquire(cancel)
        try:
            return self._resolve_locked(force_refresh, cancel)
        finally:
            self._lock.release()

    def invalidate(self) -> int:
        """Drop the in-memory catalog and delete the disk cache.

        Returns:
            Number of cache files removed.
        """
        with self._lock:
            self._catalog = None
            self._refreshed_at = None
            self._retry_after = None
            return self._store.clear()

    def _acquire(self, cancel: CancellationToken | None) -> None:
        if cancel is None:
            self._lock.acquire()
            return
        while not self._lock.acquire(timeout=LOCK_POLL_INTERVAL):
            if cancel.cancelled:
                raise CatalogCancelledError(
                    "Cancelled while waiting for catalog refresh"
                )

    def _resolve_locked(
        self, force_refresh: bool, cancel: CancellationToken | None
    ) -> Catalog:
        if force_refresh:
            logger.info("Forced catalog refresh requested")
            return self._refresh(cancel)

        if self._catalog is not None and self._is_fresh():
            logger.debug("Returning in-memory catalog")
            return self._catalog

        if self._catalog is not None and self._backing_off():
            logger.debug("Refresh failed recently, returning in-memory catalog")
            return self._catalog

        cached = self._store.load(max_age=self._cache_duration)
        if cached is not None:
            self._adopt(cached)
            logger.info("Loaded catalog version %d from file cache", cached.version)
            return cached

        local = self._catalog if self._catalog is not None else self._store.load()
        if local is not None and not self._remote_is_newer(cancel):
            if self._catalog is None:
                logger.info("Using cached catalog version %d", local.version)
            self._adopt(local)
            return local

        return self._refresh(cancel)

    def _is_fresh(self) -> bool:
        if self._refreshed_at is None:
            return False
        age = self._clock() - self._refreshed_at
        return age < self._cache_duration.total_seconds()

    def _adopt(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._refreshed_at = self._clock()
        self._retry_after = None

    def _backing_off(self) -> bool:
        return self._retry_after is not None and self._clock() < self._retry_after

    def _remote_is_newer(self, cancel: CancellationToken | None) -> bool:
        """Compare the remote version with the persisted marker.

        A missing or zero local marker always counts as newer. A failed probe
        counts as not newer so the local catalog keeps being served.
        """
        local_version = self._store.read_version()
        if local_version == 0:
            logger.debug("No local version marker, full fetch required")
            return True

        try:
            status = self._fetcher.fetch_version(cancel)
        except CatalogError as e:
            logger.warning("Failed to check catalog version: %s", e)
            return False

        if status.version > local_version:
            logger.info(
                "New catalog version available: %d (current: %d)",
                status.version,
                local_version,
            )
            return True

        logger.debug("Catalog version %d is up to date", local_version)
        return False

    def _refresh(self, cancel: CancellationToken | None) -> Catalog:
        try:
            catalog = self._fetcher.fetch_catalog(cancel)
        except CatalogError as e:
            fallback = self._catalog
            if fallback is None:
                fallback = self._store.load()
                if fallback is not None:
                    self._catalog = fallback
            if fallback is None:
                logger.error("Catalog unavailable: %s", e)
                raise
            logger.warning(
                "Catalog refresh failed (%s); serving cached version %d",
                e,
                fallback.version,
            )
            if not isinstance(e, CatalogCancelledError):
                backoff = self._failure_backoff.total_seconds()
                self._retry_after = self._clock() + backoff
            return fallback

        self._adopt(catalog)
        self._persist(catalog)
        return catalog

    def _persist(self, catalog: Catalog) -> None:
        # Blob first so the marker never claims a catalog that is not on disk
        try:
            self._store.save(catalog)
            self._store.write_version(catalog.version)
        except OSError as e:
            logger.warning("Failed to persist catalog cache: %s", e)
