"""Host-facing metadata service.

MetadataService is constructed explicitly by the host (usually through
from_config) and handed to every provider. It owns the resolver and fetcher;
matching and poster resolution are pure functions applied to the snapshot
the caller passes in.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from onepace.catalog.errors import CatalogError
from onepace.catalog.fetcher import CatalogFetcher
from onepace.catalog.models import Catalog
from onepace.catalog.resolver import MetadataResolver
from onepace.catalog.store import CatalogCacheStore
from onepace.config.models import ImagesConfig, MatchingConfig, OnePaceConfig
from onepace.core.cancellation import CancellationToken
from onepace.matching.episodes import EpisodeMatch, FileCandidate, match_episode
from onepace.matching.images import SeasonHint, resolve_arc_poster

logger = logging.getLogger(__name__)


class MetadataService:
    """Facade over catalog resolution, episode matching and posters."""

    def __init__(
        self,
        resolver: MetadataResolver,
        fetcher: CatalogFetcher,
        matching: MatchingConfig | None = None,
        images: ImagesConfig | None = None,
    ) -> None:
        self.resolver = resolver
        self.fetcher = fetcher
        self.matching = matching or MatchingConfig()
        self.images = images or ImagesConfig()

    @classmethod
    def from_config(cls, config: OnePaceConfig) -> MetadataService:
        """Build the service and its collaborators from configuration."""
        fetcher = CatalogFetcher(
            data_url=config.catalog.data_url,
            status_url=config.catalog.status_url,
            version_timeout=config.catalog.version_timeout_seconds,
            catalog_timeout=config.catalog.catalog_timeout_seconds,
        )
        store = CatalogCacheStore(config.cache_dir)
        resolver = MetadataResolver(
            fetcher,
            store,
            cache_duration=timedelta(hours=config.catalog.cache_duration_hours),
            failure_backoff=timedelta(minutes=config.catalog.retry_backoff_minutes),
        )
        return cls(resolver, fetcher, config.matching, config.images)

    def get_catalog(
        self,
        force_refresh: bool = False,
        cancel: CancellationToken | None = None,
    ) -> Catalog | None:
        """Return the current catalog, or None if none can be obtained.

        Failures are logged; the host treats None as "no metadata".
        """
        try:
            return self.resolver.resolve(force_refresh=force_refresh, cancel=cancel)
        except CatalogError as e:
            logger.error("Failed to get catalog: %s", e)
            return None

    def match_episode(
        self,
        candidate: FileCandidate,
        catalog: Catalog,
        prefer_checksum: bool | None = None,
    ) -> EpisodeMatch | None:
        """Match a file, defaulting prefer_checksum to the configured value."""
        if prefer_checksum is None:
            prefer_checksum = self.matching.prefer_checksum_matching
        return match_episode(candidate, catalog, prefer_checksum)

    def resolve_poster(self, hint: SeasonHint, catalog: Catalog) -> str | None:
        return resolve_arc_poster(hint, catalog)

    def close(self) -> None:
        """Release the HTTP client."""
        self.fetcher.close()
