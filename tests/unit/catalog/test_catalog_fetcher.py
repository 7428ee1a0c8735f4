"""Unit tests for the catalog HTTP fetcher."""

import json
import threading
import time
from unittest.mock import MagicMock, patch

import httpx
import pytest

from onepace.catalog.errors import (
    CatalogCancelledError,
    CatalogDecodeError,
    CatalogNetworkError,
)
from onepace.catalog.fetcher import (
    DEFAULT_DATA_URL,
    DEFAULT_STATUS_URL,
    CatalogFetcher,
)
from onepace.core.cancellation import CancellationToken


def _mock_stream(client: MagicMock, chunks) -> MagicMock:
    """Configure client.stream() to yield a response with chunks."""
    response = MagicMock()
    response.iter_bytes.return_value = chunks
    client.stream.return_value.__enter__.return_value = response
    return response


@pytest.fixture
def fetcher() -> CatalogFetcher:
    return CatalogFetcher(version_timeout=5.0, catalog_timeout=20.0)


class TestCatalogFetcherClient:
    """Tests for lazy HTTP client creation."""

    def test_client_is_none_until_used(self, fetcher: CatalogFetcher):
        assert fetcher._client is None

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_creates_client_once(self, mock_client_class: MagicMock, fetcher):
        first = fetcher._get_client()
        second = fetcher._get_client()

        assert first is second
        mock_client_class.assert_called_once()
        kwargs = mock_client_class.call_args.kwargs
        assert kwargs["timeout"] == 20.0
        assert kwargs["headers"]["User-Agent"].startswith("onepace/")

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_close(self, mock_client_class: MagicMock, fetcher):
        fetcher._get_client()
        fetcher.close()

        mock_client_class.return_value.close.assert_called_once()
        assert fetcher._client is None


class TestCatalogFetcherDownload:
    """Tests for the generic streaming GET."""

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_joins_chunks(self, mock_client_class: MagicMock, fetcher):
        client = mock_client_class.return_value
        _mock_stream(client, [b"ab", b"cd"])

        assert fetcher.download("https://example.org/x") == b"abcd"
        client.stream.assert_called_once_with(
            "GET", "https://example.org/x", timeout=20.0
        )

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_http_error_status(self, mock_client_class: MagicMock, fetcher):
        client = mock_client_class.return_value
        response = _mock_stream(client, [])
        request = httpx.Request("GET", "https://example.org/x")
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Not Found",
            request=request,
            response=httpx.Response(404, request=request),
        )

        with pytest.raises(CatalogNetworkError, match="HTTP 404") as exc_info:
            fetcher.download("https://example.org/x")
        assert exc_info.value.status_code == 404

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_timeout(self, mock_client_class: MagicMock, fetcher):
        client = mock_client_class.return_value
        client.stream.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(CatalogNetworkError, match="Timeout"):
            fetcher.download("https://example.org/x")

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_connection_error(self, mock_client_class: MagicMock, fetcher):
        client = mock_client_class.return_value
        client.stream.side_effect = httpx.ConnectError("refused")

        with pytest.raises(CatalogNetworkError, match="Cannot fetch") as exc_info:
            fetcher.download("https://example.org/x")
        assert exc_info.value.status_code is None

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_cancelled_before_request(self, mock_client_class: MagicMock, fetcher):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(CatalogCancelledError):
            fetcher.download("https://example.org/x", token)
        mock_client_class.return_value.stream.assert_not_called()

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_cancelled_mid_transfer(self, mock_client_class: MagicMock, fetcher):
        token = CancellationToken()
        received = []

        def chunks():
            received.append(1)
            yield b"first"
            token.cancel()
            received.append(2)
            yield b"second"
            received.append(3)
            yield b"third"

        _mock_stream(mock_client_class.return_value, chunks())

        with pytest.raises(CatalogCancelledError):
            fetcher.download("https://example.org/x", token)
        assert received == [1, 2]

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_cancel_aborts_stalled_read(self, mock_client_class: MagicMock, fetcher):
        token = CancellationToken()
        closed = threading.Event()
        response = _mock_stream(mock_client_class.return_value, None)
        response.close.side_effect = closed.set

        def chunks():
            yield b"first"
            # Stalled server: only closing the response unblocks the read
            closed.wait(timeout=5)
            raise httpx.ReadError("connection closed")

        response.iter_bytes.return_value = chunks()
        threading.Timer(0.05, token.cancel).start()

        started = time.monotonic()
        with pytest.raises(CatalogCancelledError):
            fetcher.download("https://example.org/x", token)

        assert closed.is_set()
        assert time.monotonic() - started < 2

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_finished_download_unregisters_abort(
        self, mock_client_class: MagicMock, fetcher
    ):
        token = CancellationToken()
        response = _mock_stream(mock_client_class.return_value, [b"body"])

        assert fetcher.download("https://example.org/x", token) == b"body"
        token.cancel()

        response.close.assert_not_called()

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_read_error_without_cancel_is_network_error(
        self, mock_client_class: MagicMock, fetcher
    ):
        response = _mock_stream(mock_client_class.return_value, None)
        response.iter_bytes.side_effect = httpx.ReadError("reset by peer")

        with pytest.raises(CatalogNetworkError, match="reset by peer"):
            fetcher.download("https://example.org/x", CancellationToken())

    def test_cancelled_is_not_network_error(self):
        assert not issubclass(CatalogCancelledError, CatalogNetworkError)


class TestCatalogFetcherDocuments:
    """Tests for the version check and catalog download."""

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_fetch_version_uses_short_timeout(self, mock_client_class, fetcher):
        client = mock_client_class.return_value
        _mock_stream(client, [b'{"version": 1714564800, "last_update": "x"}'])

        status = fetcher.fetch_version()

        assert status.version == 1714564800
        client.stream.assert_called_once_with("GET", DEFAULT_STATUS_URL, timeout=5.0)

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_fetch_catalog(self, mock_client_class, fetcher, sample_catalog_dict):
        client = mock_client_class.return_value
        _mock_stream(client, [json.dumps(sample_catalog_dict).encode()])

        catalog = fetcher.fetch_catalog()

        assert catalog.version == 1714564800
        assert len(catalog.arcs) == 2
        client.stream.assert_called_once_with("GET", DEFAULT_DATA_URL, timeout=20.0)

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_fetch_catalog_malformed(self, mock_client_class, fetcher):
        _mock_stream(mock_client_class.return_value, [b'{"arcs": "nope"}'])

        with pytest.raises(CatalogDecodeError):
            fetcher.fetch_catalog()

    @patch("onepace.catalog.fetcher.httpx.Client")
    def test_fetch_catalog_overflowing_timestamp(self, mock_client_class, fetcher):
        _mock_stream(mock_client_class.return_value, [b'{"last_update_ts": 1e400}'])

        with pytest.raises(CatalogDecodeError, match="last_update_ts"):
            fetcher.fetch_catalog()
