"""Host adapters turning catalog records into library metadata."""

from onepace.providers.episode import EpisodeProvider
from onepace.providers.images import ImageProvider
from onepace.providers.models import (
    PROVIDER_ID,
    PROVIDER_NAME,
    EpisodeMetadata,
    RemoteImage,
    SeasonMetadata,
    SeriesMetadata,
)
from onepace.providers.season import SeasonProvider
from onepace.providers.series import SeriesProvider, is_onepace_name

__all__ = [
    "PROVIDER_ID",
    "PROVIDER_NAME",
    "EpisodeMetadata",
    "EpisodeProvider",
    "ImageProvider",
    "RemoteImage",
    "SeasonMetadata",
    "SeasonProvider",
    "SeriesMetadata",
    "SeriesProvider",
    "is_onepace_name",
]
