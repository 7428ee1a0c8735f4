"""Arc poster image provider."""

from __future__ import annotations

import logging

from onepace.catalog.errors import CatalogError
from onepace.core.cancellation import CancellationToken
from onepace.logging.context import item_context
from onepace.matching.images import SeasonHint
from onepace.providers.models import PROVIDER_NAME, RemoteImage
from onepace.providers.series import is_onepace_name
from onepace.service import MetadataService

logger = logging.getLogger(__name__)


class ImageProvider:
    """Offers arc posters and downloads them on request."""

    name: str = PROVIDER_NAME

    def __init__(self, service: MetadataService) -> None:
        self._service = service

    def supports(self, hint: SeasonHint) -> bool:
        """Only seasons of a series named One Pace get posters."""
        return is_onepace_name(hint.series_name)

    def get_images(
        self, hint: SeasonHint, cancel: CancellationToken | None = None
    ) -> list[RemoteImage]:
        """List the poster for a season, if any.

        Returns:
            A single primary image, or an empty list when the season's
            series is not One Pace, poster download is disabled, no catalog
            is available or the arc has no poster.
        """
        if not self.supports(hint):
            logger.debug("Season of series %r is not supported", hint.series_name)
            return []
        if not self._service.images.enable_poster_download:
            logger.debug("Poster download disabled")
            return []

        with item_context(hint.name or hint.index, "image"):
            catalog = self._service.get_catalog(cancel=cancel)
            if catalog is None:
                return []

            url = self._service.resolve_poster(hint, catalog)
            if url is None:
                return []
            return [RemoteImage(url=url)]

    def fetch_image(
        self, url: str, cancel: CancellationToken | None = None
    ) -> bytes | None:
        """Download image bytes.

        Returns:
            Image content, or None if the download failed or was cancelled.
        """
        try:
            return self._service.fetcher.download(url, cancel)
        except CatalogError as e:
            logger.warning("Failed to download image %s: %s", url, e)
            return None
