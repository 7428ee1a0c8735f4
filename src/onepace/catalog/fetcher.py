"""HTTP client for the remote One Pace metadata documents.

This module fetches the small version document (status.json) and the full
catalog document (data.json). Every request is bounded by a timeout and can
be aborted through a CancellationToken.
"""

from __future__ import annotations

import logging

import httpx

from onepace import __version__
from onepace.catalog.errors import (
    CatalogCancelledError,
    CatalogNetworkError,
)
from onepace.catalog.models import Catalog, VersionStatus
from onepace.catalog.schema import catalog_from_json, version_from_json
from onepace.core.cancellation import CancellationToken, is_cancelled

logger = logging.getLogger(__name__)

DEFAULT_DATA_URL = (
    "https://raw.githubusercontent.com/ladyisatis/one-pace-metadata/main/data.json"
)
DEFAULT_STATUS_URL = (
    "https://raw.githubusercontent.com/ladyisatis/one-pace-metadata/main/status.json"
)
DEFAULT_VERSION_TIMEOUT = 10.0
DEFAULT_CATALOG_TIMEOUT = 30.0


class CatalogFetcher:
    """Fetches and decodes the remote catalog documents.

    The version probe uses a tighter timeout than the full download so a
    slow status check cannot hold up falling back to a cached catalog.
    """

    def __init__(
        self,
        data_url: str = DEFAULT_DATA_URL,
        status_url: str = DEFAULT_STATUS_URL,
        version_timeout: float = DEFAULT_VERSION_TIMEOUT,
        catalog_timeout: float = DEFAULT_CATALOG_TIMEOUT,
    ) -> None:
        """Initialize the fetcher.

        Args:
            data_url: URL of the full catalog document.
            status_url: URL of the version document.
            version_timeout: Timeout in seconds for the version probe.
            catalog_timeout: Timeout in seconds for the catalog download.
        """
        self._data_url = data_url
        self._status_url = status_url
        self._version_timeout = version_timeout
        self._catalog_timeout = catalog_timeout
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._catalog_timeout,
                headers=self._headers(),
                follow_redirects=True,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": f"onepace/{__version__}"}

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def download(
        self,
        url: str,
        cancel: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> bytes:
        """GET a URL and return the response body.

        The body is streamed and the open response is registered with the
        cancellation token. Cancelling closes the response, which aborts a
        read that is blocked waiting on the server.

        Args:
            url: Absolute URL to fetch.
            cancel: Optional cancellation token.
            timeout: Timeout in seconds (defaults to the catalog timeout).

        Returns:
            Response body.

        Raises:
            CatalogCancelledError: If the token was set before or during
                the transfer.
            CatalogNetworkError: On timeout, connection failure or non-2xx.
        """
        if is_cancelled(cancel):
            raise CatalogCancelledError(f"Request cancelled: {url}")

        client = self._get_client()
        chunks: list[bytes] = []
        try:
            with client.stream(
                "GET", url, timeout=timeout or self._catalog_timeout
            ) as response:
                unregister = (
                    cancel.on_cancel(response.close) if cancel is not None else None
                )
                try:
                    response.raise_for_status()
                    for chunk in response.iter_bytes():
                        if is_cancelled(cancel):
                            raise CatalogCancelledError(f"Request cancelled: {url}")
                        chunks.append(chunk)
                finally:
                    if unregister is not None:
                        unregister()
        except (httpx.HTTPError, httpx.StreamError) as e:
            if is_cancelled(cancel):
                raise CatalogCancelledError(f"Request cancelled: {url}") from e
            raise _network_error(url, e) from e

        return b"".join(chunks)

    def fetch_version(self, cancel: CancellationToken | None = None) -> VersionStatus:
        """Fetch the remote version document.

        Raises:
            CatalogCancelledError: If cancelled.
            CatalogNetworkError: If the request fails.
            CatalogDecodeError: If the document is malformed.
        """
        logger.debug("Checking catalog version at %s", self._status_url)
        payload = self.download(self._status_url, cancel, self._version_timeout)
        status = version_from_json(payload)
        logger.debug("Remote catalog version: %d", status.version)
        return status

    def fetch_catalog(self, cancel: CancellationToken | None = None) -> Catalog:
        """Fetch and decode the full catalog document.

        Raises:
            CatalogCancelledError: If cancelled.
            CatalogNetworkError: If the request fails.
            CatalogDecodeError: If the document is malformed.
        """
        logger.debug("Fetching catalog from %s", self._data_url)
        payload = self.download(self._data_url, cancel, self._catalog_timeout)
        catalog = catalog_from_json(payload)
        logger.info(
            "Fetched catalog version %d (%d arcs, %d episodes)",
            catalog.version,
            len(catalog.arcs),
            catalog.episode_count,
        )
        return catalog


def _network_error(url: str, e: Exception) -> CatalogNetworkError:
    """Map an httpx failure to CatalogNetworkError."""
    if isinstance(e, httpx.TimeoutException):
        return CatalogNetworkError(f"Timeout fetching {url}: {e}")
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        return CatalogNetworkError(f"HTTP {status} fetching {url}", status_code=status)
    return CatalogNetworkError(f"Cannot fetch {url}: {e}")
