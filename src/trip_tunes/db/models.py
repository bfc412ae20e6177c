"""Pydantic v2 data models — videos, playlists, playback state and events."""

from datetime import datetime
from enum import Enum
from typing import Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from trip_tunes.catalog.duration import format_travel_time

# ---------------------------------------------------------------------------
# Catalog items
# ---------------------------------------------------------------------------

class VideoItem(BaseModel):
    """A single time-bounded video returned by the catalog."""

    id: str = Field(min_length=1, description="Catalog video id")
    title: str = ""
    duration_seconds: int = Field(ge=0, description="Whole seconds")
    thumbnail_url: str = ""
    channel_title: str = ""

    model_config = {"frozen": True}


class TravelTime(BaseModel):
    """Trip length entered by the user."""

    hours: int = Field(0, ge=0)
    minutes: int = Field(0, ge=0)

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60

    @property
    def label(self) -> str:
        return format_travel_time(self.hours, self.minutes)


# ---------------------------------------------------------------------------
# Playlist
# ---------------------------------------------------------------------------

class Playlist(BaseModel):
    """An ordered, immutable selection of videos fitted to a target length."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    items: list[VideoItem] = Field(default_factory=list)
    total_duration_seconds: int = Field(0, ge=0)
    target_duration_seconds: int = Field(gt=0)
    created_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_durations(self) -> "Playlist":
        actual = sum(item.duration_seconds for item in self.items)
        if actual != self.total_duration_seconds:
            raise ValueError(
                f"total_duration_seconds={self.total_duration_seconds} "
                f"does not match item sum {actual}"
            )
        if self.total_duration_seconds > self.target_duration_seconds:
            raise ValueError(
                f"total_duration_seconds={self.total_duration_seconds} "
                f"exceeds target {self.target_duration_seconds}"
            )
        return self

    @property
    def item_count(self) -> int:
        return len(self.items)


class PlaylistSortKey(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"
    ITEM_COUNT = "item_count"
    TOTAL_DURATION = "total_duration"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class PlaylistSort(BaseModel):
    """Active sort of the saved-playlist list."""

    key: PlaylistSortKey = PlaylistSortKey.CREATED_AT
    order: SortOrder = SortOrder.DESC

    model_config = {"frozen": True}

    def select(self, key: PlaylistSortKey) -> "PlaylistSort":
        """Return the sort that results from the user clicking ``key``.

        Re-selecting the active key flips the order. A newly selected key
        starts newest-first for ``created_at`` and ascending for the rest.
        """
        if key == self.key:
            flipped = SortOrder.ASC if self.order == SortOrder.DESC else SortOrder.DESC
            return PlaylistSort(key=key, order=flipped)
        default = SortOrder.DESC if key == PlaylistSortKey.CREATED_AT else SortOrder.ASC
        return PlaylistSort(key=key, order=default)


# ---------------------------------------------------------------------------
# Duration fitting
# ---------------------------------------------------------------------------

class FitConfig(BaseModel):
    """Budget for the randomized duration-fitting search."""

    max_attempts: int = Field(500, gt=0, description="Shuffle-and-pack passes")
    tolerance_seconds: int = Field(
        60, ge=0, description="Stop early once this close to the target"
    )


class FitResult(BaseModel):
    """Selected videos (in playback order) and their summed duration."""

    items: list[VideoItem] = Field(default_factory=list)
    total_seconds: int = 0


# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------

class PlayerState(str, Enum):
    """Lifecycle states reported by the embedded player."""

    UNSTARTED = "unstarted"
    ENDED = "ended"
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    CUED = "cued"

    @classmethod
    def from_code(cls, code: int) -> "PlayerState":
        """Map a YouTube IFrame API state code to a PlayerState."""
        return _YT_STATE_CODES.get(code, cls.UNSTARTED)


_YT_STATE_CODES: dict[int, PlayerState] = {
    -1: PlayerState.UNSTARTED,
    0: PlayerState.ENDED,
    1: PlayerState.PLAYING,
    2: PlayerState.PAUSED,
    3: PlayerState.BUFFERING,
    5: PlayerState.CUED,
}


class SequencerState(str, Enum):
    IDLE = "idle"
    AWAITING_RESOURCE = "awaiting_resource"
    PLAYING = "playing"
    PAUSED = "paused"


class PlaybackPosition(BaseModel):
    """Which playlist entry the live player resource belongs to."""

    track: VideoItem
    index: int = Field(ge=0)

    model_config = {"frozen": True}


class PlayerVars(BaseModel):
    """Embed configuration handed to the player widget on creation."""

    autoplay: bool = True
    controls: bool = True
    modestbranding: bool = True
    fs: bool = True

    def as_embed_params(self) -> dict[str, int]:
        return {name: int(value) for name, value in self.model_dump().items()}


class ResourceReady(BaseModel):
    video_id: str

    model_config = {"frozen": True}


class ResourceStateChanged(BaseModel):
    video_id: str
    state: PlayerState

    model_config = {"frozen": True}


class ResourceError(BaseModel):
    video_id: str
    code: int

    model_config = {"frozen": True}


PlayerEvent = Union[ResourceReady, ResourceStateChanged, ResourceError]
