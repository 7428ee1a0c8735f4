"""Shared test fixtures for onepace."""

from __future__ import annotations

import copy
import shutil
import tempfile
import threading
import time
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest

from onepace.catalog.errors import CatalogNetworkError
from onepace.catalog.models import Catalog, VersionStatus
from onepace.catalog.resolver import MetadataResolver
from onepace.catalog.schema import catalog_from_dict
from onepace.catalog.store import CatalogCacheStore
from onepace.config.models import ImagesConfig, MatchingConfig
from onepace.service import MetadataService

SAMPLE_CATALOG: dict[str, Any] = {
    "last_update": "2024-05-01 12:00:00",
    "last_update_ts": 1714564800.25,
    "base_url": "https://example.org/one-pace/",
    "tvshow": {
        "title": "One Pace",
        "sorttitle": "One Pace",
        "originaltitle": "One Piece",
        "genre": ["Anime", "Action", "Adventure"],
        "premiered": "2013-01-01",
        "releasedate": "2013-01-01",
        "year": 2013,
        "status": "Continuing",
        "customrating": "TV-14",
        "plot": "A fan project recutting the One Piece anime.",
    },
    "arcs": [
        {
            "part": 1,
            "saga": "East Blue",
            "title": "Romance Dawn",
            "originaltitle": "Romance Dawn",
            "description": "Luffy sets out to sea.",
            "poster": "posters/romance-dawn.png",
            "episodes": {
                "01": {
                    "length": "24:30",
                    "crc32": "D767799C",
                    "crc32_extended": "",
                    "tid": "1001",
                    "tid_extended": "",
                    "length_extended": "",
                },
                "02": {
                    "length": "23:00",
                    "crc32": "1A2B3C4D",
                    "crc32_extended": "5E6F7A8B",
                    "tid": 1002,
                    "tid_extended": 2002,
                    "length_extended": "26:10",
                },
            },
        },
        {
            "part": 2,
            "saga": "East Blue",
            "title": "Orange Town",
            "originaltitle": "Orange Town",
            "description": "Buggy the Clown.",
            "poster": "",
            "episodes": {
                "1": {"length": "20:15", "crc32": "AABBCCDD"},
            },
        },
    ],
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def sample_catalog_dict() -> dict[str, Any]:
    """Return a fresh copy of the sample catalog document."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture
def sample_catalog(sample_catalog_dict: dict[str, Any]) -> Catalog:
    """Return the sample catalog parsed into the model."""
    return catalog_from_dict(sample_catalog_dict)


def make_catalog(version: float, title: str = "Romance Dawn") -> Catalog:
    data = copy.deepcopy(SAMPLE_CATALOG)
    data["last_update_ts"] = version
    data["arcs"][0]["title"] = title
    return catalog_from_dict(data)


class FakeClock:
    """Manually advanced wall clock starting at the real current time."""

    def __init__(self) -> None:
        self.now = time.time()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """In-memory stand-in for CatalogFetcher that counts calls."""

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog
        self.remote_version: int | None = catalog.version if catalog else None
        self.fetch_error: Exception | None = None
        self.version_error: Exception | None = None
        self.fetch_calls = 0
        self.version_calls = 0
        self.fetch_delay = 0.0
        self._count_lock = threading.Lock()

    def fetch_catalog(self, cancel=None) -> Catalog:
        with self._count_lock:
            self.fetch_calls += 1
        if self.fetch_delay:
            time.sleep(self.fetch_delay)
        if self.fetch_error is not None:
            raise self.fetch_error
        if self.catalog is None:
            raise CatalogNetworkError("no catalog configured")
        return self.catalog

    def fetch_version(self, cancel=None) -> VersionStatus:
        with self._count_lock:
            self.version_calls += 1
        if self.version_error is not None:
            raise self.version_error
        if self.remote_version is None:
            raise CatalogNetworkError("no version configured")
        return VersionStatus(version=self.remote_version)

    def download(self, url: str, cancel=None, timeout=None) -> bytes:
        return b"image-bytes"

    def close(self) -> None:
        pass


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog_factory():
    """Build catalogs with a given version marker."""
    return make_catalog


@pytest.fixture
def fake_fetcher(sample_catalog: Catalog) -> FakeFetcher:
    return FakeFetcher(sample_catalog)


@pytest.fixture
def service(fake_fetcher, temp_dir, fake_clock) -> MetadataService:
    """MetadataService wired to the fake fetcher and a temp cache."""
    store = CatalogCacheStore(temp_dir / "cache", clock=fake_clock)
    resolver = MetadataResolver(
        fake_fetcher, store, timedelta(hours=24), clock=fake_clock
    )
    return MetadataService(resolver, fake_fetcher, MatchingConfig(), ImagesConfig())
