"""Scheduled catalog update task.

The host runs this periodically (every UpdateConfig.interval_hours by
default) to force a catalog refresh in the background, so library scans
rarely wait on the network.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta

from onepace.catalog.errors import CatalogCancelledError
from onepace.config.models import UpdateConfig
from onepace.core.cancellation import CancellationToken
from onepace.service import MetadataService

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class MetadataUpdateTask:
    """Forces a catalog refresh when auto-update is enabled."""

    name: str = "Update One Pace Metadata"
    key: str = "OnePaceMetadataUpdate"
    category: str = "One Pace"

    def __init__(self, service: MetadataService, config: UpdateConfig) -> None:
        self._service = service
        self._config = config

    def default_interval(self) -> timedelta:
        """Interval between scheduled runs."""
        return timedelta(hours=self._config.interval_hours)

    def execute(
        self,
        progress: ProgressCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> bool:
        """Run the update.

        Args:
            progress: Called with a percentage (0, 25, 75, 100).
            cancel: Optional cancellation token.

        Returns:
            True if a catalog is available after the run (including when the
            run was skipped), False if the refresh produced nothing.

        Raises:
            CatalogCancelledError: If cancelled before the refresh started.
        """
        report = progress or (lambda _value: None)
        report(0)

        if not self._config.enabled:
            logger.info("Auto-update is disabled, skipping metadata update")
            report(100)
            return True

        if cancel is not None and cancel.cancelled:
            raise CatalogCancelledError("Metadata update cancelled")

        report(25)
        logger.info("Starting One Pace metadata update")
        catalog = self._service.get_catalog(force_refresh=True, cancel=cancel)
        report(75)

        if catalog is None:
            logger.warning("Metadata update finished without a catalog")
            report(100)
            return False

        logger.info(
            "Metadata update complete: version %d, %d arcs",
            catalog.version,
            len(catalog.arcs),
        )
        report(100)
        return True
