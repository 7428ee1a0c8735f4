"""Exceptions raised while fetching, decoding or caching the catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog retrieval failures."""


class CatalogNetworkError(CatalogError):
    """Raised on timeout, connection failure or a non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class CatalogDecodeError(CatalogError):
    """Raised when a payload is not valid JSON or does not match the schema."""


class CatalogCancelledError(CatalogError):
    """Raised when the caller cancelled the operation."""
