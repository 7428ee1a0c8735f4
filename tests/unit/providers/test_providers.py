"""Unit tests for the series, season, episode and image providers."""

from datetime import date

import pytest

from onepace.catalog.errors import CatalogNetworkError
from onepace.catalog.models import SeriesStatus
from onepace.config.models import ImagesConfig, MatchingConfig
from onepace.matching.episodes import FileCandidate
from onepace.matching.images import SeasonHint
from onepace.providers import (
    PROVIDER_ID,
    EpisodeProvider,
    ImageProvider,
    SeasonProvider,
    SeriesProvider,
    is_onepace_name,
)


@pytest.fixture
def offline(fake_fetcher):
    """Make every network call fail."""
    fake_fetcher.fetch_error = CatalogNetworkError("offline")
    fake_fetcher.version_error = CatalogNetworkError("offline")
    return fake_fetcher


def _season(index: int) -> SeasonHint:
    return SeasonHint(index=index, series_name="One Pace")


class TestIsOnePaceName:
    @pytest.mark.parametrize(
        "name", ["One Pace", "one-pace", "ONEPACE", "[One Pace] Romance Dawn"]
    )
    def test_matches(self, name):
        assert is_onepace_name(name)

    @pytest.mark.parametrize("name", ["One Piece", "", "   ", None, "Pace One"])
    def test_rejects(self, name):
        assert not is_onepace_name(name)


class TestSeriesProvider:
    def test_metadata(self, service):
        metadata = SeriesProvider(service).get_metadata("One Pace")

        assert metadata.name == "One Pace"
        assert metadata.original_title == "One Piece"
        assert metadata.premiere_date == date(2013, 1, 1)
        assert metadata.production_year == 2013
        assert metadata.official_rating == "TV-14"
        assert metadata.status is SeriesStatus.CONTINUING
        assert metadata.genres == ("Anime", "Action", "Adventure")
        assert metadata.provider_id == PROVIDER_ID

    def test_other_series_ignored(self, service, fake_fetcher):
        assert SeriesProvider(service).get_metadata("One Piece") is None
        assert fake_fetcher.fetch_calls == 0

    def test_catalog_unavailable(self, service, offline):
        assert SeriesProvider(service).get_metadata("One Pace") is None

    def test_search(self, service):
        assert len(SeriesProvider(service).search("one pace")) == 1
        assert SeriesProvider(service).search("Bleach") == []


class TestSeasonProvider:
    def test_by_index(self, service):
        metadata = SeasonProvider(service).get_metadata(SeasonHint(index=2))

        assert metadata.name == "Orange Town"
        assert metadata.index == 2
        assert metadata.overview == "Buggy the Clown."

    def test_falls_back_to_name(self, service):
        hint = SeasonHint(index=99, name="romance dawn")
        assert SeasonProvider(service).get_metadata(hint).index == 1

    def test_no_arc(self, service):
        assert SeasonProvider(service).get_metadata(SeasonHint(name="Wano")) is None

    def test_search(self, service):
        results = SeasonProvider(service).search(SeasonHint(name="ORANGE TOWN"))

        assert [r.index for r in results] == [2]
        assert SeasonProvider(service).search(SeasonHint(index=42)) == []

    def test_search_catalog_unavailable(self, service, offline):
        assert SeasonProvider(service).search(SeasonHint(index=1)) == []


class TestEpisodeProvider:
    def test_checksum_match(self, service):
        candidate = FileCandidate("/media/Romance Dawn 01 [D767799C].mkv")

        metadata = EpisodeProvider(service).get_metadata(candidate)

        assert metadata.name == "Romance Dawn - Episode 01"
        assert metadata.index == 1
        assert metadata.parent_index == 1
        assert metadata.overview == "Luffy sets out to sea."
        assert metadata.runtime_minutes == pytest.approx(24.5)

    def test_unpadded_key(self, service):
        candidate = FileCandidate("/media/x.mkv", hinted_season=2, hinted_episode=1)

        metadata = EpisodeProvider(service).get_metadata(candidate)

        assert metadata.name == "Orange Town - Episode 1"
        assert metadata.runtime_minutes == pytest.approx(20.25)

    def test_respects_checksum_preference(self, service):
        service.matching = MatchingConfig(prefer_checksum_matching=False)
        candidate = FileCandidate(
            "/media/Romance Dawn 01 [D767799C].mkv",
            hinted_season=2,
            hinted_episode=1,
        )

        assert EpisodeProvider(service).get_metadata(candidate).parent_index == 2

    def test_no_match(self, service):
        assert EpisodeProvider(service).get_metadata(FileCandidate("/x.mkv")) is None

    def test_catalog_unavailable(self, service, offline):
        candidate = FileCandidate("/media/Romance Dawn 01 [D767799C].mkv")
        assert EpisodeProvider(service).get_metadata(candidate) is None

    def test_search(self, service):
        candidate = FileCandidate("/media/x.mkv", hinted_season=1, hinted_episode=2)

        results = EpisodeProvider(service).search(candidate)

        assert [(r.parent_index, r.index) for r in results] == [(1, 2)]
        assert EpisodeProvider(service).search(FileCandidate("/x.mkv")) == []


class TestImageProvider:
    def test_primary_poster(self, service):
        images = ImageProvider(service).get_images(_season(1))

        assert len(images) == 1
        assert images[0].url == "https://example.org/one-pace/posters/romance-dawn.png"
        assert images[0].type == "primary"

    def test_arc_without_poster(self, service):
        assert ImageProvider(service).get_images(_season(2)) == []

    def test_disabled(self, service, fake_fetcher):
        service.images = ImagesConfig(enable_poster_download=False)

        assert ImageProvider(service).get_images(_season(1)) == []
        assert fake_fetcher.fetch_calls == 0

    def test_other_series_not_supported(self, service, fake_fetcher):
        provider = ImageProvider(service)

        assert provider.get_images(SeasonHint(index=1, series_name="One Piece")) == []
        assert provider.get_images(SeasonHint(index=1)) == []
        assert fake_fetcher.fetch_calls == 0

    def test_supports(self, service):
        assert ImageProvider(service).supports(_season(1))
        assert not ImageProvider(service).supports(SeasonHint(index=1))

    def test_fetch_image(self, service):
        assert ImageProvider(service).fetch_image("https://x/p.png") == b"image-bytes"

    def test_fetch_image_failure(self, service, monkeypatch):
        def fail(url, cancel=None, timeout=None):
            raise CatalogNetworkError("HTTP 404", status_code=404)

        monkeypatch.setattr(service.fetcher, "download", fail)
        assert ImageProvider(service).fetch_image("https://x/p.png") is None
