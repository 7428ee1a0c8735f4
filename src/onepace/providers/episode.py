"""Episode metadata provider."""

from __future__ import annotations

import logging

from onepace.core.cancellation import CancellationToken
from onepace.logging.context import item_context
from onepace.matching.episodes import FileCandidate, parse_runtime
from onepace.providers.models import PROVIDER_NAME, EpisodeMetadata
from onepace.service import MetadataService

logger = logging.getLogger(__name__)


class EpisodeProvider:
    """Identifies media files and returns their episode metadata."""

    name: str = PROVIDER_NAME

    def __init__(self, service: MetadataService) -> None:
        self._service = service

    def get_metadata(
        self, candidate: FileCandidate, cancel: CancellationToken | None = None
    ) -> EpisodeMetadata | None:
        """Match a file against the catalog.

        Returns:
            EpisodeMetadata, or None when the file does not match or no
            catalog is available.
        """
        with item_context(candidate.file_path, "episode"):
            catalog = self._service.get_catalog(cancel=cancel)
            if catalog is None:
                logger.warning("Failed to fetch One Pace metadata")
                return None

            match = self._service.match_episode(candidate, catalog)
            if match is None:
                logger.debug("No episode match for %s", candidate.file_path)
                return None

            try:
                index = int(match.episode_key)
            except ValueError:
                logger.warning(
                    "Episode key %r in arc %d is not a number",
                    match.episode_key,
                    match.arc.part,
                )
                return None

            logger.info(
                "Matched %s to %s episode %s (%s)",
                candidate.file_path,
                match.arc.title,
                match.episode_key,
                match.tier.value,
            )
            return EpisodeMetadata(
                name=f"{match.arc.title} - Episode {match.episode_key}",
                index=index,
                parent_index=match.arc.part,
                overview=match.arc.description,
                runtime_minutes=parse_runtime(match.episode.length),
            )

    def search(
        self, candidate: FileCandidate, cancel: CancellationToken | None = None
    ) -> list[EpisodeMetadata]:
        """Search results for a file (at most one episode)."""
        logger.debug(
            "Searching for episode %s (season %s, episode %s)",
            candidate.file_path,
            candidate.hinted_season,
            candidate.hinted_episode,
        )
        result = self.get_metadata(candidate, cancel)
        return [result] if result is not None else []
