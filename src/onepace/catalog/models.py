"""In-memory catalog model.

This module defines the immutable dataclasses a fetched catalog is parsed
into. A Catalog is never mutated after construction; refreshing the catalog
produces a new instance that replaces the old one wholesale.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType

logger = logging.getLogger(__name__)


class SeriesStatus(Enum):
    """Airing status of the series."""

    CONTINUING = "continuing"
    ENDED = "ended"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> SeriesStatus:
        """Parse a status string case-insensitively.

        Args:
            value: Raw status such as "Continuing".

        Returns:
            Matching status, or UNKNOWN for empty or unrecognised values.
        """
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().casefold())
        except ValueError:
            return cls.UNKNOWN


def parse_iso_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD string, returning None if it does not parse."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        logger.debug("Ignoring unparsable date: %r", value)
        return None


@dataclass(frozen=True)
class Episode:
    """One episode inside an arc.

    Episodes carry no description of their own; the arc description is
    reused for every episode.
    """

    length: str = ""  # MM:SS
    crc32: str = ""
    crc32_extended: str = ""
    tracker_id: str = ""
    tracker_id_extended: str = ""
    length_extended: str = ""

    def has_checksum(self, checksum: str) -> bool:
        """Check a checksum against the primary and extended encodes.

        Args:
            checksum: 8-hex-digit checksum, any case.

        Returns:
            True if either stored checksum equals it case-insensitively.
        """
        wanted = checksum.casefold()
        if self.crc32 and self.crc32.casefold() == wanted:
            return True
        return bool(self.crc32_extended) and self.crc32_extended.casefold() == wanted


@dataclass(frozen=True)
class Arc:
    """A season-equivalent grouping of episodes."""

    part: int
    title: str
    saga: str = ""
    original_title: str = ""
    description: str = ""
    poster: str = ""  # Relative path, empty if no poster
    episodes: Mapping[str, Episode] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # Freeze the episode mapping so the arc cannot be mutated through it
        if not isinstance(self.episodes, MappingProxyType):
            object.__setattr__(self, "episodes", MappingProxyType(dict(self.episodes)))

    @property
    def has_poster(self) -> bool:
        return bool(self.poster and self.poster.strip())


@dataclass(frozen=True)
class Series:
    """Show-level attributes."""

    title: str = ""
    original_title: str = ""
    sort_title: str = ""
    genres: tuple[str, ...] = ()
    premiered: str = ""  # YYYY-MM-DD
    release_date: str = ""  # YYYY-MM-DD
    year: str = ""
    status: SeriesStatus = SeriesStatus.UNKNOWN
    plot: str = ""
    content_rating: str = ""

    @property
    def premiere_date(self) -> date | None:
        """Premiere date, or None if absent or unparsable."""
        return parse_iso_date(self.premiered)

    @property
    def production_year(self) -> int | None:
        """Year as an integer, or None if absent or not numeric."""
        try:
            return int(self.year)
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class Catalog:
    """Full parsed snapshot of the remote catalog."""

    last_update: str
    last_update_ts: float  # Authoritative version marker
    base_url: str
    show: Series
    arcs: tuple[Arc, ...] = ()

    @property
    def version(self) -> int:
        """Integer version marker derived from last_update_ts."""
        return int(self.last_update_ts)

    @property
    def episode_count(self) -> int:
        return sum(len(arc.episodes) for arc in self.arcs)


@dataclass(frozen=True)
class VersionStatus:
    """Remote version document."""

    version: int
    last_update: str = ""
