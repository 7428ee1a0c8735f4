"""Episode matching against the catalog.

A media file is mapped to a canonical (arc, episode) record using three
strategies tried in strict priority order. The first strategy that finds a
record wins; strategies are never combined.

1. Checksum: an 8-hex-digit token in square brackets in the file name, as
   release groups embed it (e.g. "[One Pace][1-7] Romance Dawn 01 [1080p][D767799C].mkv").
2. Season/episode hints supplied by the host's own filename parser.
3. Path structure: the parent directory named after the arc, plus the
   episode hint.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from onepace.catalog.models import Arc, Catalog, Episode

logger = logging.getLogger(__name__)

# First bracketed 8-hex token wins, e.g. "[A1B2C3D4]"
CHECKSUM_PATTERN = re.compile(r"\[([0-9A-Fa-f]{8})\]")


class MatchTier(Enum):
    """Strategy that produced a match (diagnostics only)."""

    CHECKSUM = "checksum"
    SEASON_EPISODE = "season_episode"
    PATH_STRUCTURE = "path_structure"


@dataclass(frozen=True)
class FileCandidate:
    """A media file the host wants identified."""

    file_path: str
    hinted_season: int | None = None
    hinted_episode: int | None = None


@dataclass(frozen=True)
class EpisodeMatch:
    """Result of a successful match."""

    arc: Arc
    episode_key: str  # Key verbatim as stored in the catalog
    episode: Episode
    tier: MatchTier


def extract_checksum(file_path: str) -> str | None:
    """Extract the bracketed checksum token from a file name.

    Only the file name stem is searched, so directory names and the
    extension never contribute a token.

    Args:
        file_path: Path of the media file.

    Returns:
        Uppercased 8-hex-digit checksum, or None if absent.
    """
    stem = Path(file_path).stem
    match = CHECKSUM_PATTERN.search(stem)
    if match is None:
        return None
    return match.group(1).upper()


def find_arc_by_part(catalog: Catalog, part: int) -> Arc | None:
    """Return the first arc with the given part number."""
    for arc in catalog.arcs:
        if arc.part == part:
            return arc
    return None


def find_arc_by_title(catalog: Catalog, title: str) -> Arc | None:
    """Return the first arc whose title equals title case-insensitively."""
    wanted = title.strip().casefold()
    if not wanted:
        return None
    for arc in catalog.arcs:
        if arc.title.casefold() == wanted:
            return arc
    return None


def lookup_episode(arc: Arc, number: int) -> tuple[str, Episode] | None:
    """Look up an episode by number.

    Catalog keys are not normalised, so the two-digit zero-padded key is
    tried first and the unpadded key second.

    Returns:
        (key, episode) tuple, or None if neither key exists.
    """
    for key in (f"{number:02d}", str(number)):
        episode = arc.episodes.get(key)
        if episode is not None:
            return key, episode
    return None


def _match_checksum(checksum: str, catalog: Catalog) -> EpisodeMatch | None:
    for arc in catalog.arcs:
        for key, episode in arc.episodes.items():
            if episode.has_checksum(checksum):
                return EpisodeMatch(arc, key, episode, MatchTier.CHECKSUM)
    return None


def _match_hints(
    season: int, episode_number: int, catalog: Catalog
) -> EpisodeMatch | None:
    arc = find_arc_by_part(catalog, season)
    if arc is None:
        return None
    found = lookup_episode(arc, episode_number)
    if found is None:
        return None
    key, episode = found
    return EpisodeMatch(arc, key, episode, MatchTier.SEASON_EPISODE)


def _match_path(
    file_path: str, episode_number: int, catalog: Catalog
) -> EpisodeMatch | None:
    folder = Path(file_path).parent.name.casefold()
    if not folder:
        return None
    for arc in catalog.arcs:
        if arc.title and arc.title.casefold() in folder:
            found = lookup_episode(arc, episode_number)
            if found is None:
                return None
            key, episode = found
            return EpisodeMatch(arc, key, episode, MatchTier.PATH_STRUCTURE)
    return None


def match_episode(
    candidate: FileCandidate,
    catalog: Catalog,
    prefer_checksum: bool = True,
) -> EpisodeMatch | None:
    """Identify a media file against a catalog snapshot.

    Args:
        candidate: File path plus optional season/episode hints.
        catalog: Catalog snapshot to search. Not retained.
        prefer_checksum: Whether to try the checksum strategy first.

    Returns:
        EpisodeMatch, or None if no strategy found a record.
    """
    if prefer_checksum:
        checksum = extract_checksum(candidate.file_path)
        if checksum is not None:
            result = _match_checksum(checksum, catalog)
            if result is not None:
                logger.debug(
                    "Matched %s by checksum %s", candidate.file_path, checksum
                )
                return result
            logger.debug("No catalog episode with checksum %s", checksum)

    if candidate.hinted_season is not None and candidate.hinted_episode is not None:
        result = _match_hints(
            candidate.hinted_season, candidate.hinted_episode, catalog
        )
        if result is not None:
            logger.debug(
                "Matched %s by season %d episode %d",
                candidate.file_path,
                candidate.hinted_season,
                candidate.hinted_episode,
            )
            return result

    if candidate.hinted_episode is not None:
        result = _match_path(candidate.file_path, candidate.hinted_episode, catalog)
        if result is not None:
            logger.debug(
                "Matched %s by arc folder %r",
                candidate.file_path,
                result.arc.title,
            )
            return result

    logger.debug("No match for %s", candidate.file_path)
    return None


def parse_runtime(length: str | None) -> float | None:
    """Parse an MM:SS length into minutes.

    Args:
        length: Length string such as "24:30".

    Returns:
        Minutes as a float (24.5 for "24:30"), or None if the value is
        empty or not in MM:SS form.
    """
    if not length:
        return None
    parts = length.strip().split(":")
    if len(parts) != 2:
        return None
    try:
        minutes = int(parts[0])
        seconds = int(parts[1])
    except ValueError:
        return None
    return minutes + seconds / 60
