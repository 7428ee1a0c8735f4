"""Season (arc) metadata provider."""

from __future__ import annotations

import logging

from onepace.catalog.models import Arc, Catalog
from onepace.core.cancellation import CancellationToken
from onepace.logging.context import item_context
from onepace.matching.episodes import find_arc_by_part, find_arc_by_title
from onepace.matching.images import SeasonHint
from onepace.providers.models import PROVIDER_NAME, SeasonMetadata
from onepace.service import MetadataService

logger = logging.getLogger(__name__)


def _find_arc(catalog: Catalog, hint: SeasonHint) -> Arc | None:
    arc = None
    if hint.index is not None:
        arc = find_arc_by_part(catalog, hint.index)
    if arc is None and hint.name:
        arc = find_arc_by_title(catalog, hint.name)
    return arc


class SeasonProvider:
    """Maps a host season to a catalog arc.

    The arc is looked up by part number first and by title second.
    """

    name: str = PROVIDER_NAME

    def __init__(self, service: MetadataService) -> None:
        self._service = service

    def get_metadata(
        self, hint: SeasonHint, cancel: CancellationToken | None = None
    ) -> SeasonMetadata | None:
        with item_context(hint.name or hint.index, "season"):
            catalog = self._service.get_catalog(cancel=cancel)
            if catalog is None:
                logger.warning("Failed to fetch One Pace metadata")
                return None

            arc = _find_arc(catalog, hint)
            if arc is None:
                logger.debug(
                    "No matching arc for season %r (index %s)", hint.name, hint.index
                )
                return None

            return SeasonMetadata(
                name=arc.title, index=arc.part, overview=arc.description
            )

    def search(
        self, hint: SeasonHint, cancel: CancellationToken | None = None
    ) -> list[SeasonMetadata]:
        """Search results for a season (at most one arc)."""
        logger.debug("Searching for season %r (index %s)", hint.name, hint.index)
        result = self.get_metadata(hint, cancel)
        return [result] if result is not None else []
