"""Pure matching of media files and season hints against a catalog."""

from onepace.matching.episodes import (
    EpisodeMatch,
    FileCandidate,
    MatchTier,
    extract_checksum,
    find_arc_by_part,
    find_arc_by_title,
    lookup_episode,
    match_episode,
    parse_runtime,
)
from onepace.matching.images import SeasonHint, resolve_arc_poster

__all__ = [
    "EpisodeMatch",
    "FileCandidate",
    "MatchTier",
    "SeasonHint",
    "extract_checksum",
    "find_arc_by_part",
    "find_arc_by_title",
    "lookup_episode",
    "match_episode",
    "parse_runtime",
    "resolve_arc_poster",
]
