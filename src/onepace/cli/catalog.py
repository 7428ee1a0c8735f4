"""Catalog cache commands: status, refresh and clear."""

from __future__ import annotations

import json

import click

from onepace.cli import get_service
from onepace.cli.exit_codes import ExitCode


def _format_age(seconds: float) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes = remainder // 60
    if hours >= 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


@click.group("catalog")
def catalog_group() -> None:
    """Inspect and manage the cached catalog."""


@catalog_group.command("status")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def status_command(ctx: click.Context, json_output: bool) -> None:
    """Show the cached catalog without touching the network."""
    store = get_service(ctx).resolver.store
    age = store.age()
    version = store.read_version()
    catalog = store.load()

    info = {
        "cache_dir": str(store.cache_dir),
        "cached": catalog is not None,
        "version": version,
        "age_seconds": age.total_seconds() if age is not None else None,
        "last_update": catalog.last_update if catalog else None,
        "arcs": len(catalog.arcs) if catalog else 0,
        "episodes": catalog.episode_count if catalog else 0,
    }

    if json_output:
        click.echo(json.dumps(info, indent=2))
        return

    click.echo(f"Cache directory: {info['cache_dir']}")
    if catalog is None:
        click.echo("No cached catalog.")
        return
    click.echo(f"Version:         {version}")
    click.echo(f"Last update:     {catalog.last_update or '-'}")
    if age is not None:
        click.echo(f"Cache age:       {_format_age(age.total_seconds())}")
    click.echo(f"Arcs:            {info['arcs']}")
    click.echo(f"Episodes:        {info['episodes']}")


@catalog_group.command("refresh")
@click.option(
    "--force",
    is_flag=True,
    help="Download the catalog even if the cache is fresh.",
)
@click.pass_context
def refresh_command(ctx: click.Context, force: bool) -> None:
    """Bring the cached catalog up to date."""
    catalog = get_service(ctx).get_catalog(force_refresh=force)
    if catalog is None:
        click.echo("Error: Catalog unavailable (see log for details)", err=True)
        ctx.exit(ExitCode.CATALOG_UNAVAILABLE)

    click.echo(
        f"Catalog version {catalog.version}: "
        f"{len(catalog.arcs)} arcs, {catalog.episode_count} episodes"
    )


@catalog_group.command("clear")
@click.pass_context
def clear_command(ctx: click.Context) -> None:
    """Delete the cached catalog and version marker."""
    removed = get_service(ctx).resolver.invalidate()
    click.echo(f"Removed {removed} cache file(s).")
