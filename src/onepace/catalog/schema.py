"""Wire schema for the remote catalog documents.

Raw JSON is validated against these Pydantic models before it is converted
into the immutable dataclasses in onepace.catalog.models. Any shape or type
mismatch surfaces as CatalogDecodeError; a partially populated Catalog is
never returned.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from onepace.catalog.errors import CatalogDecodeError
from onepace.catalog.models import (
    Arc,
    Catalog,
    Episode,
    Series,
    SeriesStatus,
    VersionStatus,
)


def _none_to_empty(v: Any) -> Any:
    """Treat JSON null as an empty string for optional text fields."""
    return "" if v is None else v


def _scalar_to_str(v: Any) -> Any:
    """Accept numeric identifiers and years where the catalog uses strings."""
    if v is None:
        return ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# JSON null becomes ""
Text = Annotated[str, BeforeValidator(_none_to_empty)]
# Numbers are rendered as strings, null becomes ""
ScalarText = Annotated[str, BeforeValidator(_scalar_to_str)]


class EpisodeModel(BaseModel):
    """Pydantic model for one episode entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    length: Text = ""
    crc32: Text = ""
    crc32_extended: Text = ""
    tid: ScalarText = ""
    tid_extended: ScalarText = ""
    length_extended: Text = ""


class ArcModel(BaseModel):
    """Pydantic model for one arc entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    part: int
    saga: Text = ""
    title: Text = ""
    originaltitle: Text = ""
    description: Text = ""
    poster: Text = ""
    episodes: dict[str, EpisodeModel] = Field(default_factory=dict)

    @field_validator("episodes", mode="before")
    @classmethod
    def null_episodes(cls, v: Any) -> Any:
        """An arc without episodes may be serialised as null."""
        return {} if v is None else v


class TvShowModel(BaseModel):
    """Pydantic model for the tvshow block."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: Text = ""
    sorttitle: Text = ""
    originaltitle: Text = ""
    genre: list[str] = Field(default_factory=list)
    premiered: Text = ""
    releasedate: Text = ""
    year: ScalarText = ""
    status: Text = ""
    customrating: Text = ""
    plot: Text = ""

    @field_validator("genre", mode="before")
    @classmethod
    def null_genre(cls, v: Any) -> Any:
        return [] if v is None else v


class CatalogModel(BaseModel):
    """Pydantic model for data.json."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    last_update: Text = ""
    last_update_ts: Annotated[float, Field(allow_inf_nan=False)] = 0.0
    base_url: Text = ""
    tvshow: TvShowModel = Field(default_factory=TvShowModel)
    arcs: list[ArcModel] = Field(default_factory=list)


class VersionModel(BaseModel):
    """Pydantic model for status.json."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    version: int
    last_update: Text = ""


def _format_validation_error(e: ValidationError) -> str:
    """Render the first validation error with its location."""
    first = e.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    count = e.error_count()
    suffix = f" (+{count - 1} more)" if count > 1 else ""
    return f"{loc or '<root>'}: {first.get('msg', 'invalid value')}{suffix}"


def _load_json(payload: bytes | str, what: str) -> Any:
    try:
        return json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogDecodeError(f"Invalid JSON in {what}: {e}") from e


def _to_catalog(model: CatalogModel) -> Catalog:
    show = model.tvshow
    series = Series(
        title=show.title,
        original_title=show.originaltitle,
        sort_title=show.sorttitle,
        genres=tuple(show.genre),
        premiered=show.premiered,
        release_date=show.releasedate,
        year=show.year,
        status=SeriesStatus.parse(show.status),
        plot=show.plot,
        content_rating=show.customrating,
    )
    arcs = tuple(
        Arc(
            part=arc.part,
            title=arc.title,
            saga=arc.saga,
            original_title=arc.originaltitle,
            description=arc.description,
            poster=arc.poster,
            episodes={
                key: Episode(
                    length=ep.length,
                    crc32=ep.crc32,
                    crc32_extended=ep.crc32_extended,
                    tracker_id=ep.tid,
                    tracker_id_extended=ep.tid_extended,
                    length_extended=ep.length_extended,
                )
                for key, ep in arc.episodes.items()
            },
        )
        for arc in model.arcs
    )
    return Catalog(
        last_update=model.last_update,
        last_update_ts=model.last_update_ts,
        base_url=model.base_url,
        show=series,
        arcs=arcs,
    )


def catalog_from_dict(data: Any) -> Catalog:
    """Validate a decoded catalog document and build a Catalog.

    Args:
        data: Decoded JSON value (expected to be a mapping).

    Returns:
        Immutable Catalog.

    Raises:
        CatalogDecodeError: If the document does not match the schema.
    """
    if not isinstance(data, dict):
        raise CatalogDecodeError(
            f"Catalog document must be a JSON object, got {type(data).__name__}"
        )
    try:
        model = CatalogModel.model_validate(data)
    except ValidationError as e:
        raise CatalogDecodeError(
            f"Invalid catalog document: {_format_validation_error(e)}"
        ) from e
    return _to_catalog(model)


def catalog_from_json(payload: bytes | str) -> Catalog:
    """Decode and validate a catalog JSON payload.

    Raises:
        CatalogDecodeError: If the payload is not valid JSON or not a catalog.
    """
    return catalog_from_dict(_load_json(payload, "catalog document"))


def catalog_to_dict(catalog: Catalog) -> dict[str, Any]:
    """Serialize a Catalog back to the remote document shape.

    The output is accepted by catalog_from_dict and reproduces an equal
    Catalog.
    """
    show = catalog.show
    return {
        "last_update": catalog.last_update,
        "last_update_ts": catalog.last_update_ts,
        "base_url": catalog.base_url,
        "tvshow": {
            "title": show.title,
            "sorttitle": show.sort_title,
            "originaltitle": show.original_title,
            "genre": list(show.genres),
            "premiered": show.premiered,
            "releasedate": show.release_date,
            "year": show.year,
            "status": show.status.value,
            "customrating": show.content_rating,
            "plot": show.plot,
        },
        "arcs": [
            {
                "part": arc.part,
                "saga": arc.saga,
                "title": arc.title,
                "originaltitle": arc.original_title,
                "description": arc.description,
                "poster": arc.poster,
                "episodes": {
                    key: {
                        "length": ep.length,
                        "crc32": ep.crc32,
                        "crc32_extended": ep.crc32_extended,
                        "tid": ep.tracker_id,
                        "tid_extended": ep.tracker_id_extended,
                        "length_extended": ep.length_extended,
                    }
                    for key, ep in arc.episodes.items()
                },
            }
            for arc in catalog.arcs
        ],
    }


def version_from_json(payload: bytes | str) -> VersionStatus:
    """Decode and validate a status.json payload.

    Raises:
        CatalogDecodeError: If the payload is malformed.
    """
    data = _load_json(payload, "version document")
    if not isinstance(data, dict):
        raise CatalogDecodeError(
            f"Version document must be a JSON object, got {type(data).__name__}"
        )
    try:
        model = VersionModel.model_validate(data)
    except ValidationError as e:
        raise CatalogDecodeError(
            f"Invalid version document: {_format_validation_error(e)}"
        ) from e
    return VersionStatus(version=model.version, last_update=model.last_update)
