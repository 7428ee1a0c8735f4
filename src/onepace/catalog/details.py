"""Per-episode detail documents.

Some catalog mirrors publish one YAML document per episode with fields the
main catalog lacks (episode title, manga chapters, source anime episodes).
They are parsed with a real YAML parser and validated like the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from onepace.catalog.errors import CatalogDecodeError
from onepace.catalog.schema import ScalarText, Text


class EpisodeDetailsModel(BaseModel):
    """Pydantic model for an episode detail document."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    arc: int
    episode: int
    title: Text = ""
    originaltitle: Text = ""
    description: Text = ""
    chapters: ScalarText = ""
    episodes: ScalarText = ""
    released: ScalarText = ""


@dataclass(frozen=True)
class EpisodeDetails:
    """Detailed metadata for a single episode."""

    arc: int
    episode: int
    title: str = ""
    original_title: str = ""
    description: str = ""
    chapters: str = ""  # Manga chapters, e.g. "1-7"
    anime_episodes: str = ""  # Source anime episodes, e.g. "1-3"
    released: str = ""  # YYYY-MM-DD


def parse_episode_details(text: str) -> EpisodeDetails:
    """Parse one YAML episode detail document.

    Args:
        text: YAML document text.

    Returns:
        EpisodeDetails.

    Raises:
        CatalogDecodeError: If the text is not valid YAML, not a mapping, or
            misses the arc/episode numbers.
    """
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogDecodeError(f"Invalid YAML in episode details: {e}") from e

    if not isinstance(data, dict):
        raise CatalogDecodeError("Episode details must be a YAML mapping")

    # YAML parses unquoted dates; keep them in their ISO string form
    released = data.get("released")
    if hasattr(released, "isoformat"):
        data = {**data, "released": released.isoformat()}

    try:
        model = EpisodeDetailsModel.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first.get("loc", ()))
        raise CatalogDecodeError(
            f"Invalid episode details: {loc}: {first.get('msg')}"
        ) from e

    return EpisodeDetails(
        arc=model.arc,
        episode=model.episode,
        title=model.title,
        original_title=model.originaltitle,
        description=model.description,
        chapters=model.chapters,
        anime_episodes=model.episodes,
        released=model.released,
    )
