"""Shared test fixtures for Trip Tunes."""

import pytest

from trip_tunes.db.models import Playlist, PlayerState, VideoItem


def make_video(video_id: str, duration: int, title: str | None = None) -> VideoItem:
    """Create a VideoItem with sensible defaults."""
    return VideoItem(
        id=video_id,
        title=title or f"Song {video_id}",
        duration_seconds=duration,
        thumbnail_url=f"https://i.ytimg.com/vi/{video_id}/default.jpg",
        channel_title="Test Channel",
    )


def make_playlist(items: list[VideoItem], target: int | None = None, name: str = "Trip") -> Playlist:
    total = sum(v.duration_seconds for v in items)
    return Playlist(
        name=name,
        items=items,
        total_duration_seconds=total,
        target_duration_seconds=target or max(total, 1),
    )


class FakeWidget:
    """In-memory stand-in for the embedded player.

    Records every call and lets tests push lifecycle events for any handle,
    including handles that have already been destroyed.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.live: dict[int, str] = {}
        self.states: dict[int, PlayerState] = {}
        self.subscribers: dict[int, object] = {}
        self._next = 0

    def create(self, video_id, player_vars):
        self._next += 1
        handle = self._next
        self.live[handle] = video_id
        self.states[handle] = PlayerState.UNSTARTED
        self.calls.append(("create", video_id, player_vars.autoplay))
        return handle

    def destroy(self, handle):
        self.live.pop(handle, None)
        self.calls.append(("destroy", handle))

    def play(self, handle):
        self.calls.append(("play", handle))

    def pause(self, handle):
        self.calls.append(("pause", handle))

    def get_state(self, handle):
        return self.states.get(handle, PlayerState.UNSTARTED)

    def subscribe(self, handle, callback):
        self.subscribers[handle] = callback

    def emit(self, handle, event):
        self.subscribers[handle](event)

    @property
    def created_ids(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "create"]


@pytest.fixture
def video_a():
    return make_video("a", 300)


@pytest.fixture
def video_b():
    return make_video("b", 400)


@pytest.fixture
def video_c():
    return make_video("c", 500)


@pytest.fixture
def three_videos(video_a, video_b, video_c):
    return [video_a, video_b, video_c]


@pytest.fixture
def three_track_playlist(three_videos):
    return make_playlist(three_videos, target=1200)


@pytest.fixture
def fake_widget():
    return FakeWidget()
