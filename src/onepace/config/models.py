"""Configuration data models.

This module defines dataclasses for onepace configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from onepace.catalog.fetcher import (
    DEFAULT_CATALOG_TIMEOUT,
    DEFAULT_DATA_URL,
    DEFAULT_STATUS_URL,
    DEFAULT_VERSION_TIMEOUT,
)


@dataclass(frozen=True)
class CatalogConfig:
    """Configuration for fetching and caching the remote catalog."""

    data_url: str = DEFAULT_DATA_URL
    """URL of the full catalog document (data.json)."""

    status_url: str = DEFAULT_STATUS_URL
    """URL of the version document (status.json)."""

    cache_duration_hours: int = 24
    """How long a catalog is served before the remote version is checked."""

    retry_backoff_minutes: int = 5
    """After a failed download, how long the cached catalog is served as is."""

    version_timeout_seconds: float = DEFAULT_VERSION_TIMEOUT
    catalog_timeout_seconds: float = DEFAULT_CATALOG_TIMEOUT

    cache_dir: Path | None = None
    """Cache directory (None = <data_dir>/cache)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("data_url", "status_url"):
            value = getattr(self, name)
            if not value.startswith(("http://", "https://")):
                raise ValueError(f"{name} must start with http:// or https://")
        if self.cache_duration_hours < 1:
            raise ValueError("cache_duration_hours must be at least 1")
        if self.retry_backoff_minutes < 0:
            raise ValueError("retry_backoff_minutes must not be negative")
        if self.version_timeout_seconds <= 0 or self.catalog_timeout_seconds <= 0:
            raise ValueError("timeouts must be positive")
        if self.version_timeout_seconds > self.catalog_timeout_seconds:
            raise ValueError(
                "version_timeout_seconds must not exceed catalog_timeout_seconds"
            )


@dataclass(frozen=True)
class MatchingConfig:
    """Configuration for episode matching."""

    # Try the bracketed checksum in the file name before the hints
    prefer_checksum_matching: bool = True


@dataclass(frozen=True)
class ImagesConfig:
    """Configuration for poster images."""

    enable_poster_download: bool = True


@dataclass(frozen=True)
class UpdateConfig:
    """Configuration for the scheduled catalog update task."""

    enabled: bool = True
    interval_hours: int = 6

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.interval_hours < 1:
            raise ValueError("interval_hours must be at least 1")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class OnePaceConfig:
    """Root configuration."""

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)
    update: UpdateConfig = field(default_factory=UpdateConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    data_dir: Path = field(default_factory=lambda: Path.home() / ".onepace")

    @property
    def cache_dir(self) -> Path:
        """Effective catalog cache directory."""
        if self.catalog.cache_dir is not None:
            return self.catalog.cache_dir
        return self.data_dir / "cache"
