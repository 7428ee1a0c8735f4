"""Logging setup for the CLI and for hosts embedding onepace.

configure_logging() attaches onepace's handlers to the root logger. Handlers
installed by the host are left alone, and calling it again replaces only the
handlers a previous call installed.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from onepace.logging.context import ItemContextFilter
from onepace.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from onepace.config.models import LoggingConfig

_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(item_tag)s%(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# HTTP libraries that log every catalog and poster request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(config: LoggingConfig) -> list[logging.Handler]:
    """Configure onepace logging from LoggingConfig.

    A rotating file handler is installed when a file is configured. A stderr
    handler is installed when requested, or when no file handler could be
    opened.

    Args:
        config: Logging configuration.

    Returns:
        The handlers that were installed.
    """
    level = _LEVEL_MAP.get(config.level.casefold(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _remove_onepace_handlers(root_logger)

    formatter = _build_formatter(config.format)
    handlers: list[logging.Handler] = []

    file_handler = _open_file_handler(config) if config.file else None
    if file_handler is not None:
        handlers.append(file_handler)
    if config.include_stderr or file_handler is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    context_filter = ItemContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return handlers


def _build_formatter(format_name: str) -> logging.Formatter:
    if format_name.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _open_file_handler(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating log file, or return None if it is unusable."""
    try:
        file_path = Path(config.file).expanduser()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        # Logging is not set up yet, so report straight to stderr
        sys.stderr.write(f"Warning: Could not open log file {config.file}: {e}\n")
        return None


def _remove_onepace_handlers(root_logger: logging.Logger) -> None:
    for handler in root_logger.handlers[:]:
        if any(isinstance(f, ItemContextFilter) for f in handler.filters):
            root_logger.removeHandler(handler)
            handler.close()
