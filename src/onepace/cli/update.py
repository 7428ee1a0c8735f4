"""Run the scheduled metadata update once."""

from __future__ import annotations

import click

from onepace.catalog.errors import CatalogCancelledError
from onepace.cli import get_config_from_context, get_service
from onepace.cli.exit_codes import ExitCode
from onepace.tasks.update import MetadataUpdateTask


@click.command("update")
@click.pass_context
def update_command(ctx: click.Context) -> None:
    """Run the metadata update task as the scheduler would."""
    config = get_config_from_context(ctx)
    task = MetadataUpdateTask(get_service(ctx), config.update)

    def report(value: float) -> None:
        click.echo(f"Progress: {value:.0f}%")

    try:
        ok = task.execute(progress=report)
    except CatalogCancelledError:
        click.echo("Update cancelled.", err=True)
        ctx.exit(ExitCode.INTERRUPTED)

    if not ok:
        click.echo("Error: Update finished without a catalog", err=True)
        ctx.exit(ExitCode.CATALOG_UNAVAILABLE)
