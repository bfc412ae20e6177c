"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from trip_tunes.db.models import (
    FitConfig,
    PlayerState,
    PlayerVars,
    Playlist,
    PlaylistSort,
    PlaylistSortKey,
    SortOrder,
    TravelTime,
    VideoItem,
)

from conftest import make_video


class TestVideoItem:
    def test_frozen(self, video_a):
        with pytest.raises(ValidationError):
            video_a.title = "changed"

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            VideoItem(id="x", duration_seconds=-1)

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            VideoItem(id="", duration_seconds=10)


class TestPlaylist:
    def test_valid(self, three_videos):
        playlist = Playlist(
            name="Trip",
            items=three_videos,
            total_duration_seconds=1200,
            target_duration_seconds=1200,
        )
        assert playlist.item_count == 3

    def test_total_must_match_items(self, three_videos):
        with pytest.raises(ValidationError):
            Playlist(
                name="Trip",
                items=three_videos,
                total_duration_seconds=1000,
                target_duration_seconds=1200,
            )

    def test_total_may_not_exceed_target(self, three_videos):
        with pytest.raises(ValidationError):
            Playlist(
                name="Trip",
                items=three_videos,
                total_duration_seconds=1200,
                target_duration_seconds=900,
            )

    def test_target_must_be_positive(self):
        with pytest.raises(ValidationError):
            Playlist(name="Empty", target_duration_seconds=0)

    def test_json_roundtrip_keeps_order(self):
        items = [make_video("z", 10), make_video("a", 20)]
        playlist = Playlist(
            name="Order", items=items,
            total_duration_seconds=30, target_duration_seconds=60,
        )
        restored = Playlist.model_validate_json(playlist.model_dump_json())
        assert [v.id for v in restored.items] == ["z", "a"]
        assert restored.id == playlist.id


class TestTravelTime:
    def test_total_seconds(self):
        assert TravelTime(hours=1, minutes=30).total_seconds == 5400

    def test_label(self):
        assert TravelTime(hours=0, minutes=45).label == "45m"

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            TravelTime(hours=-1)


class TestPlaylistSort:
    def test_default_is_newest_first(self):
        sort = PlaylistSort()
        assert sort.key == PlaylistSortKey.CREATED_AT
        assert sort.order == SortOrder.DESC

    def test_reselect_flips(self):
        sort = PlaylistSort().select(PlaylistSortKey.CREATED_AT)
        assert sort.order == SortOrder.ASC
        assert sort.select(PlaylistSortKey.CREATED_AT).order == SortOrder.DESC

    @pytest.mark.parametrize(
        "key",
        [PlaylistSortKey.NAME, PlaylistSortKey.ITEM_COUNT, PlaylistSortKey.TOTAL_DURATION],
    )
    def test_other_keys_start_ascending(self, key):
        sort = PlaylistSort().select(key)
        assert sort.key == key
        assert sort.order == SortOrder.ASC

    def test_created_at_starts_descending_when_switched_back(self):
        sort = PlaylistSort().select(PlaylistSortKey.NAME).select(PlaylistSortKey.CREATED_AT)
        assert sort.order == SortOrder.DESC


class TestFitConfig:
    def test_defaults(self):
        config = FitConfig()
        assert config.max_attempts == 500
        assert config.tolerance_seconds == 60

    def test_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            FitConfig(max_attempts=0)


class TestPlayerState:
    @pytest.mark.parametrize(
        "code,state",
        [
            (-1, PlayerState.UNSTARTED),
            (0, PlayerState.ENDED),
            (1, PlayerState.PLAYING),
            (2, PlayerState.PAUSED),
            (3, PlayerState.BUFFERING),
            (5, PlayerState.CUED),
        ],
    )
    def test_from_code(self, code, state):
        assert PlayerState.from_code(code) == state

    def test_unknown_code(self):
        assert PlayerState.from_code(42) == PlayerState.UNSTARTED


class TestPlayerVars:
    def test_embed_params_are_ints(self):
        params = PlayerVars().as_embed_params()
        assert params == {"autoplay": 1, "controls": 1, "modestbranding": 1, "fs": 1}
