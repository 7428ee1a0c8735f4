"""Catalog model, remote fetcher, durable cache and resolver.

- models: immutable Catalog/Series/Arc/Episode dataclasses
- schema: JSON wire validation and (de)serialization
- fetcher: HTTP client for status.json and data.json
- store: single-slot file cache with version marker
- resolver: freshness policy tying the above together
"""

from onepace.catalog.details import EpisodeDetails, parse_episode_details
from onepace.catalog.errors import (
    CatalogCancelledError,
    CatalogDecodeError,
    CatalogError,
    CatalogNetworkError,
)
from onepace.catalog.fetcher import CatalogFetcher
from onepace.catalog.models import (
    Arc,
    Catalog,
    Episode,
    Series,
    SeriesStatus,
    VersionStatus,
)
from onepace.catalog.resolver import MetadataResolver
from onepace.catalog.schema import (
    catalog_from_dict,
    catalog_from_json,
    catalog_to_dict,
    version_from_json,
)
from onepace.catalog.store import CatalogCacheStore

__all__ = [
    # Models
    "Arc",
    "Catalog",
    "Episode",
    "EpisodeDetails",
    "Series",
    "SeriesStatus",
    "VersionStatus",
    # Errors
    "CatalogCancelledError",
    "CatalogDecodeError",
    "CatalogError",
    "CatalogNetworkError",
    # Services
    "CatalogCacheStore",
    "CatalogFetcher",
    "MetadataResolver",
    # Serialization
    "catalog_from_dict",
    "catalog_from_json",
    "catalog_to_dict",
    "parse_episode_details",
    "version_from_json",
]
