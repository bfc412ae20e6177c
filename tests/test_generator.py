"""Tests for PlaylistGenerator using an in-memory catalog."""

import asyncio
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from trip_tunes.db.models import FitConfig, TravelTime
from trip_tunes.exceptions import (
    CatalogUnavailableError,
    FitFailureReason,
    InvalidInputError,
    NoCandidatesError,
    NoFeasibleCombinationError,
)
from trip_tunes.generator.builder import PlaylistGenerator
from trip_tunes.generator.fitter import DurationFitter

from conftest import make_video


class FakeCatalog:
    def __init__(self, items=None, error=None):
        self.items = list(items or [])
        self.error = error
        self.queries: list[str] = []

    async def search(self, keywords):
        self.queries.append(keywords)
        if self.error is not None:
            raise self.error
        return list(self.items)


class GatedCatalog:
    """Catalog whose searches block until released, one event per query."""

    def __init__(self, items):
        self.items = items
        self.gates: dict[str, asyncio.Event] = {}

    async def search(self, keywords):
        gate = self.gates.setdefault(keywords, asyncio.Event())
        await gate.wait()
        return list(self.items)

    def release(self, keywords):
        self.gates.setdefault(keywords, asyncio.Event()).set()


def _generator(catalog, seed=1):
    return PlaylistGenerator(catalog, DurationFitter(FitConfig(), random.Random(seed)))


class TestValidation:
    def test_zero_trip_length(self, three_videos):
        catalog = FakeCatalog(three_videos)
        with pytest.raises(InvalidInputError):
            asyncio.run(_generator(catalog).generate("lofi", TravelTime()))
        assert catalog.queries == []

    def test_blank_keywords(self, three_videos):
        catalog = FakeCatalog(three_videos)
        with pytest.raises(InvalidInputError):
            asyncio.run(_generator(catalog).generate("   ", TravelTime(minutes=30)))
        assert catalog.queries == []

    def test_keywords_are_trimmed(self, three_videos):
        catalog = FakeCatalog(three_videos)
        asyncio.run(_generator(catalog).generate("  road trip  ", TravelTime(minutes=30)))
        assert catalog.queries == ["road trip"]


class TestGenerate:
    def test_builds_playlist(self, three_videos):
        generator = _generator(FakeCatalog(three_videos))
        playlist = asyncio.run(generator.generate("rock", TravelTime(minutes=15)))

        assert playlist.target_duration_seconds == 900
        assert playlist.total_duration_seconds <= 900
        assert playlist.total_duration_seconds == sum(
            v.duration_seconds for v in playlist.items
        )
        assert playlist.name == "rock (15m)"
        assert generator.latest is playlist
        assert not generator.is_generating

    def test_custom_name(self, three_videos):
        generator = _generator(FakeCatalog(three_videos))
        playlist = asyncio.run(
            generator.generate("rock", TravelTime(minutes=15), name="Commute")
        )
        assert playlist.name == "Commute"

    def test_zero_length_candidates_dropped(self):
        items = [make_video("live", 0), make_video("song", 200)]
        playlist = asyncio.run(
            _generator(FakeCatalog(items)).generate("jazz", TravelTime(minutes=10))
        )
        assert [v.id for v in playlist.items] == ["song"]

    def test_no_candidates(self):
        generator = _generator(FakeCatalog([]))
        with pytest.raises(NoCandidatesError):
            asyncio.run(generator.generate("zzzz", TravelTime(minutes=10)))
        assert generator.latest is None
        assert not generator.is_generating

    def test_only_zero_length_candidates(self):
        generator = _generator(FakeCatalog([make_video("live", 0)]))
        with pytest.raises(NoCandidatesError):
            asyncio.run(generator.generate("live", TravelTime(minutes=10)))

    def test_every_item_too_long(self):
        items = [make_video("x", 1200), make_video("y", 1800)]
        generator = _generator(FakeCatalog(items))
        with pytest.raises(NoFeasibleCombinationError) as exc_info:
            asyncio.run(generator.generate("epic", TravelTime(minutes=10)))
        assert exc_info.value.reason == FitFailureReason.ALL_ITEMS_TOO_LONG
        assert "longer than the trip" in exc_info.value.message

    def test_no_combination_found(self, three_videos):
        class EmptyFitter(DurationFitter):
            def fit(self, items, target_seconds):
                return super().fit([], target_seconds)

        generator = PlaylistGenerator(FakeCatalog(three_videos), EmptyFitter())
        with pytest.raises(NoFeasibleCombinationError) as exc_info:
            asyncio.run(generator.generate("rock", TravelTime(minutes=15)))
        assert exc_info.value.reason == FitFailureReason.NO_COMBINATION

    def test_catalog_error_propagates(self):
        error = CatalogUnavailableError("quota exceeded")
        generator = _generator(FakeCatalog(error=error))
        with pytest.raises(CatalogUnavailableError):
            asyncio.run(generator.generate("rock", TravelTime(minutes=15)))
        assert not generator.is_generating


class TestConcurrentGenerations:
    def test_latest_follows_most_recent_request(self, three_videos):
        catalog = GatedCatalog(three_videos)
        generator = _generator(catalog)

        async def scenario():
            first = asyncio.create_task(generator.generate("first", TravelTime(minutes=15)))
            await asyncio.sleep(0)
            second = asyncio.create_task(generator.generate("second", TravelTime(minutes=15)))
            await asyncio.sleep(0)
            assert generator.is_generating

            catalog.release("second")
            newer = await second
            catalog.release("first")
            older = await first
            return older, newer

        older, newer = asyncio.run(scenario())
        assert older.name.startswith("first")
        assert newer.name.startswith("second")
        assert generator.latest is newer
        assert not generator.is_generating


class TestCollaborators:
    def test_fitter_receives_filtered_candidates_and_target(self, three_videos):
        catalog = MagicMock()
        catalog.search = AsyncMock(return_value=three_videos + [make_video("live", 0)])
        fitter = MagicMock(wraps=DurationFitter(rng=random.Random(2)))

        generator = PlaylistGenerator(catalog, fitter)
        asyncio.run(generator.generate("indie", TravelTime(hours=1)))

        catalog.search.assert_awaited_once_with("indie")
        fitter.fit.assert_called_once_with(three_videos, 3600)
