"""Lookup commands: match a file, resolve a poster, show the series."""

from __future__ import annotations

import json
from pathlib import Path

import click

from onepace.catalog.errors import CatalogError
from onepace.catalog.models import Catalog
from onepace.cli import get_service
from onepace.cli.exit_codes import ExitCode
from onepace.matching.episodes import FileCandidate, parse_runtime
from onepace.matching.images import SeasonHint
from onepace.providers.models import PROVIDER_NAME
from onepace.providers.series import SeriesProvider


def _require_catalog(ctx: click.Context) -> Catalog:
    catalog = get_service(ctx).get_catalog()
    if catalog is None:
        click.echo("Error: Catalog unavailable (see log for details)", err=True)
        ctx.exit(ExitCode.CATALOG_UNAVAILABLE)
    return catalog


@click.command("match")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--season", type=int, default=None, help="Hinted season (arc part).")
@click.option("--episode", type=int, default=None, help="Hinted episode number.")
@click.option(
    "--no-checksum",
    is_flag=True,
    help="Skip matching by the checksum in the file name.",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def match_command(
    ctx: click.Context,
    path: Path,
    season: int | None,
    episode: int | None,
    no_checksum: bool,
    json_output: bool,
) -> None:
    """Identify the One Pace episode for PATH.

    The file does not need to exist; only its name and parent directory
    are used.
    """
    service = get_service(ctx)
    catalog = _require_catalog(ctx)

    candidate = FileCandidate(
        file_path=str(path), hinted_season=season, hinted_episode=episode
    )
    match = service.match_episode(
        candidate, catalog, prefer_checksum=False if no_checksum else None
    )
    if match is None:
        if json_output:
            click.echo(json.dumps({"matched": False, "path": str(path)}))
        else:
            click.echo(f"No match for {path}")
        ctx.exit(ExitCode.NO_MATCH)

    runtime = parse_runtime(match.episode.length)
    if json_output:
        click.echo(
            json.dumps(
                {
                    "matched": True,
                    "path": str(path),
                    "arc": match.arc.part,
                    "arc_title": match.arc.title,
                    "episode": match.episode_key,
                    "tier": match.tier.value,
                    "runtime_minutes": runtime,
                    "crc32": match.episode.crc32 or None,
                },
                indent=2,
            )
        )
        return

    click.echo(f"Arc:      {match.arc.part} - {match.arc.title}")
    click.echo(f"Episode:  {match.episode_key}")
    click.echo(f"Matched:  {match.tier.value}")
    if runtime is not None:
        click.echo(f"Runtime:  {runtime:.1f} min")


@click.command("poster")
@click.option("--season", type=int, default=None, help="Arc part number.")
@click.option("--name", default=None, help="Arc title.")
@click.option(
    "--download",
    "dest",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Save the poster to this file.",
)
@click.pass_context
def poster_command(
    ctx: click.Context, season: int | None, name: str | None, dest: Path | None
) -> None:
    """Print (and optionally download) an arc poster URL."""
    if season is None and not name:
        click.echo("Error: Provide --season or --name", err=True)
        ctx.exit(ExitCode.INVALID_ARGUMENTS)

    service = get_service(ctx)
    catalog = _require_catalog(ctx)

    url = service.resolve_poster(SeasonHint(index=season, name=name), catalog)
    if url is None:
        click.echo("No poster available.")
        ctx.exit(ExitCode.NO_IMAGE)

    click.echo(url)
    if dest is None:
        return

    try:
        content = service.fetcher.download(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(content)
    except (CatalogError, OSError) as e:
        click.echo(f"Error: Failed to download poster: {e}", err=True)
        ctx.exit(ExitCode.DOWNLOAD_FAILED)
    click.echo(f"Saved {len(content)} bytes to {dest}")


@click.command("series")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def series_command(ctx: click.Context, json_output: bool) -> None:
    """Show series-level metadata."""
    metadata = SeriesProvider(get_service(ctx)).get_metadata(PROVIDER_NAME)
    if metadata is None:
        click.echo("Error: Catalog unavailable (see log for details)", err=True)
        ctx.exit(ExitCode.CATALOG_UNAVAILABLE)

    if json_output:
        click.echo(
            json.dumps(
                {
                    "name": metadata.name,
                    "original_title": metadata.original_title,
                    "overview": metadata.overview,
                    "premiere_date": (
                        metadata.premiere_date.isoformat()
                        if metadata.premiere_date
                        else None
                    ),
                    "production_year": metadata.production_year,
                    "official_rating": metadata.official_rating,
                    "status": metadata.status.value,
                    "genres": list(metadata.genres),
                },
                indent=2,
            )
        )
        return

    click.echo(metadata.name)
    if metadata.original_title:
        click.echo(f"Original title: {metadata.original_title}")
    if metadata.production_year:
        click.echo(f"Year:           {metadata.production_year}")
    click.echo(f"Status:         {metadata.status.value}")
    if metadata.genres:
        click.echo(f"Genres:         {', '.join(metadata.genres)}")
    if metadata.overview:
        click.echo("")
        click.echo(metadata.overview)
