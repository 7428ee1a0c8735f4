"""Arc poster URL resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from onepace.catalog.models import Catalog
from onepace.matching.episodes import find_arc_by_part, find_arc_by_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeasonHint:
    """Host-supplied identity of a season (arc)."""

    index: int | None = None
    name: str | None = None
    series_name: str | None = None  # Name of the owning series, if known


def resolve_arc_poster(hint: SeasonHint, catalog: Catalog) -> str | None:
    """Resolve the absolute poster URL for an arc.

    The arc is looked up by part number when an index is given, otherwise
    by case-insensitive title. Nothing is downloaded.

    Returns:
        Absolute poster URL, or None if there is no such arc, the arc has
        no poster, or the catalog has no base URL.
    """
    if hint.index is not None:
        arc = find_arc_by_part(catalog, hint.index)
    elif hint.name:
        arc = find_arc_by_title(catalog, hint.name)
    else:
        arc = None

    if arc is None:
        logger.debug("No arc for season hint %s", hint)
        return None
    if not arc.has_poster:
        logger.debug("Arc %d (%s) has no poster", arc.part, arc.title)
        return None
    if not catalog.base_url:
        logger.debug("Catalog has no base URL, cannot resolve poster")
        return None

    return catalog.base_url.rstrip("/") + "/" + arc.poster.strip().lstrip("/")
