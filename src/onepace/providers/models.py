"""Result types handed back to the host by the providers.

All results are frozen dataclasses; the host copies what it needs into its
own library records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from onepace.catalog.models import SeriesStatus

PROVIDER_NAME = "One Pace"
PROVIDER_ID = "onepace"


@dataclass(frozen=True)
class SeriesMetadata:
    """Series-level metadata."""

    name: str
    original_title: str = ""
    sort_name: str = ""
    overview: str = ""
    premiere_date: date | None = None
    production_year: int | None = None
    official_rating: str = ""
    status: SeriesStatus = SeriesStatus.UNKNOWN
    genres: tuple[str, ...] = ()
    provider_id: str = PROVIDER_ID


@dataclass(frozen=True)
class SeasonMetadata:
    """Season (arc) metadata."""

    name: str
    index: int
    overview: str = ""


@dataclass(frozen=True)
class EpisodeMetadata:
    """Episode metadata.

    Attributes:
        name: Display name, "<arc title> - Episode <key>".
        index: Episode number within the arc.
        parent_index: Arc part number (season number).
        overview: Arc description; episodes have none of their own.
        runtime_minutes: Parsed from the episode length, if available.
    """

    name: str
    index: int
    parent_index: int
    overview: str = ""
    runtime_minutes: float | None = None


@dataclass(frozen=True)
class RemoteImage:
    """An image the host may download."""

    url: str
    type: str = "primary"
    provider_name: str = PROVIDER_NAME
