"""Command line interface for the One Pace metadata resolver."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from onepace.cli.exit_codes import ExitCode
from onepace.config.loader import load_config
from onepace.config.models import OnePaceConfig
from onepace.logging.config import configure_logging
from onepace.service import MetadataService

logger = logging.getLogger(__name__)

_logging_configured: bool = False


def _configure_logging(config: OnePaceConfig) -> None:
    global _logging_configured
    if _logging_configured:
        return
    configure_logging(config.logging)
    _logging_configured = True


def get_config_from_context(ctx: click.Context) -> OnePaceConfig:
    """Return the configuration loaded by the main group."""
    return ctx.obj["config"]


def get_service(ctx: click.Context) -> MetadataService:
    """Return the shared MetadataService, creating it on first use."""
    service = ctx.obj.get("service")
    if service is None:
        service = MetadataService.from_config(get_config_from_context(ctx))
        ctx.obj["service"] = service
        ctx.call_on_close(service.close)
    return service


@click.group()
@click.version_option(package_name="onepace")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.onepace/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_json: bool,
) -> None:
    """One Pace metadata - resolve media files against the One Pace catalog."""
    ctx.ensure_object(dict)

    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = load_config(
                config_path,
                log_level=log_level.lower() if log_level else None,
                log_format="json" if log_json else None,
            )
        except ValueError as e:
            click.echo(f"Error: Invalid configuration: {e}", err=True)
            ctx.exit(ExitCode.CONFIG_ERROR)

    _configure_logging(ctx.obj["config"])


def _register_commands() -> None:
    from onepace.cli.catalog import catalog_group
    from onepace.cli.match import match_command, poster_command, series_command
    from onepace.cli.update import update_command

    main.add_command(catalog_group)
    main.add_command(match_command)
    main.add_command(poster_command)
    main.add_command(series_command)
    main.add_command(update_command)


_register_commands()
