"""Series metadata provider."""

from __future__ import annotations

import logging

from onepace.catalog.models import Catalog
from onepace.core.cancellation import CancellationToken
from onepace.logging.context import item_context
from onepace.providers.models import PROVIDER_NAME, SeriesMetadata
from onepace.service import MetadataService

logger = logging.getLogger(__name__)


def is_onepace_name(name: str | None) -> bool:
    """Check whether a series name refers to One Pace.

    Spaces and hyphens are ignored, so "One Pace", "one-pace" and
    "[One Pace] Romance Dawn" all qualify.
    """
    if not name or not name.strip():
        return False
    normalized = name.lower().replace(" ", "").replace("-", "")
    return "onepace" in normalized


def _series_metadata(catalog: Catalog) -> SeriesMetadata:
    show = catalog.show
    return SeriesMetadata(
        name=PROVIDER_NAME,
        original_title=show.original_title,
        sort_name=show.sort_title,
        overview=show.plot,
        premiere_date=show.premiere_date,
        production_year=show.production_year,
        official_rating=show.content_rating,
        status=show.status,
        genres=show.genres,
    )


class SeriesProvider:
    """Provides series-level metadata for One Pace."""

    name: str = PROVIDER_NAME

    def __init__(self, service: MetadataService) -> None:
        self._service = service

    def get_metadata(
        self, name: str | None, cancel: CancellationToken | None = None
    ) -> SeriesMetadata | None:
        """Return series metadata if name refers to One Pace.

        Returns:
            SeriesMetadata, or None for other series or when no catalog is
            available.
        """
        if not is_onepace_name(name):
            logger.debug("Series name %r does not match One Pace", name)
            return None

        with item_context(name, "series"):
            catalog = self._service.get_catalog(cancel=cancel)
            if catalog is None:
                logger.warning("Failed to fetch One Pace metadata")
                return None

            logger.info("Provided metadata for One Pace series")
            return _series_metadata(catalog)

    def search(
        self, name: str | None, cancel: CancellationToken | None = None
    ) -> list[SeriesMetadata]:
        """Search results for a series name (at most one)."""
        result = self.get_metadata(name, cancel)
        return [result] if result is not None else []
