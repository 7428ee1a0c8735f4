"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. Explicit overrides (CLI arguments passed to load_config)
2. Environment variables (ONEPACE_*)
3. Config file (~/.onepace/config.toml)
4. Default values

Environment variables:
- ONEPACE_CONFIG_PATH: Path to config file (overrides default location)
- ONEPACE_DATA_DIR: Path to data directory (overrides ~/.onepace/)
- ONEPACE_CACHE_DIR: Catalog cache directory
- ONEPACE_DATA_URL / ONEPACE_STATUS_URL: Remote catalog documents
- ONEPACE_CACHE_DURATION_HOURS: Hours before the remote version is checked
- ONEPACE_VERSION_TIMEOUT / ONEPACE_CATALOG_TIMEOUT: Request timeouts (s)
- ONEPACE_PREFER_CHECKSUM: Try checksum matching first
- ONEPACE_POSTER_DOWNLOAD: Offer arc posters to the host
- ONEPACE_AUTO_UPDATE / ONEPACE_UPDATE_INTERVAL_HOURS: Scheduled refresh
- ONEPACE_LOG_LEVEL / ONEPACE_LOG_FORMAT / ONEPACE_LOG_FILE: Logging
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from onepace.config.env import EnvReader
from onepace.config.models import (
    CatalogConfig,
    ImagesConfig,
    LoggingConfig,
    MatchingConfig,
    OnePaceConfig,
    UpdateConfig,
)

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".onepace"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

_config_cache: OnePaceConfig | None = None


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the config file path, honouring ONEPACE_CONFIG_PATH."""
    reader = env or EnvReader()
    return reader.get_path("ONEPACE_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def get_data_dir(env: EnvReader | None = None) -> Path:
    """Get the data directory, honouring ONEPACE_DATA_DIR.

    Returns:
        Path to the data directory (~/.onepace/ by default).
    """
    reader = env or EnvReader()
    return reader.get_path("ONEPACE_DATA_DIR") or DEFAULT_CONFIG_DIR


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _section(file_config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = file_config.get(name, {})
    if not isinstance(value, Mapping):
        logger.warning("Ignoring config section [%s]: not a table", name)
        return {}
    return value


def _file_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    *,
    log_level: str | None = None,
    log_format: str | None = None,
    cache_dir: Path | None = None,
) -> OnePaceConfig:
    """Load configuration with full precedence handling.

    Args:
        config_path: Config file (overrides ONEPACE_CONFIG_PATH).
        env: Environment mapping (defaults to os.environ).
        log_level: Override for the log level.
        log_format: Override for the log format ("text" or "json").
        cache_dir: Override for the catalog cache directory.

    Returns:
        OnePaceConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
    """
    reader = EnvReader(env)
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path)

    catalog_file = _section(file_config, "catalog")
    catalog = CatalogConfig(
        data_url=reader.get_str(
            "ONEPACE_DATA_URL",
            catalog_file.get("data_url", CatalogConfig.data_url),
        ),
        status_url=reader.get_str(
            "ONEPACE_STATUS_URL",
            catalog_file.get("status_url", CatalogConfig.status_url),
        ),
        cache_duration_hours=reader.get_int(
            "ONEPACE_CACHE_DURATION_HOURS",
            catalog_file.get("cache_duration_hours", 24),
        ),
        retry_backoff_minutes=reader.get_int(
            "ONEPACE_RETRY_BACKOFF_MINUTES",
            catalog_file.get(
                "retry_backoff_minutes", CatalogConfig.retry_backoff_minutes
            ),
        ),
        version_timeout_seconds=reader.get_float(
            "ONEPACE_VERSION_TIMEOUT",
            catalog_file.get(
                "version_timeout_seconds", CatalogConfig.version_timeout_seconds
            ),
        ),
        catalog_timeout_seconds=reader.get_float(
            "ONEPACE_CATALOG_TIMEOUT",
            catalog_file.get(
                "catalog_timeout_seconds", CatalogConfig.catalog_timeout_seconds
            ),
        ),
        cache_dir=(
            cache_dir
            or reader.get_path("ONEPACE_CACHE_DIR")
            or _file_path(catalog_file.get("cache_dir"))
        ),
    )

    matching_file = _section(file_config, "matching")
    matching = MatchingConfig(
        prefer_checksum_matching=reader.get_bool(
            "ONEPACE_PREFER_CHECKSUM",
            matching_file.get("prefer_checksum_matching", True),
        ),
    )

    images_file = _section(file_config, "images")
    images = ImagesConfig(
        enable_poster_download=reader.get_bool(
            "ONEPACE_POSTER_DOWNLOAD",
            images_file.get("enable_poster_download", True),
        ),
    )

    update_file = _section(file_config, "update")
    update = UpdateConfig(
        enabled=reader.get_bool(
            "ONEPACE_AUTO_UPDATE",
            update_file.get("enabled", True),
        ),
        interval_hours=reader.get_int(
            "ONEPACE_UPDATE_INTERVAL_HOURS",
            update_file.get("interval_hours", 6),
        ),
    )

    logging_file = _section(file_config, "logging")
    logging_config = LoggingConfig(
        level=log_level
        or reader.get_str("ONEPACE_LOG_LEVEL", logging_file.get("level", "info")),
        file=(
            reader.get_path("ONEPACE_LOG_FILE")
            or _file_path(logging_file.get("file"))
        ),
        format=log_format
        or reader.get_str("ONEPACE_LOG_FORMAT", logging_file.get("format", "text")),
        include_stderr=bool(logging_file.get("include_stderr", False)),
        max_bytes=int(logging_file.get("max_bytes", 10_485_760)),
        backup_count=int(logging_file.get("backup_count", 5)),
    )

    return OnePaceConfig(
        catalog=catalog,
        matching=matching,
        images=images,
        update=update,
        logging=logging_config,
        data_dir=get_data_dir(reader),
    )


def get_config() -> OnePaceConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def clear_config_cache() -> None:
    """Forget the cached configuration so the next get_config() reloads."""
    global _config_cache
    _config_cache = None
