"""Custom exceptions for trip-tunes.

Every exception carries a user-facing ``message`` so the UI can show it
as-is in the status bar or a message box.
"""

from enum import Enum


class TripTunesError(Exception):
    """Base exception for trip-tunes.

    Attributes:
        retryable: Whether repeating the same request may succeed.
    """

    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(TripTunesError):
    """Request rejected before any work was done.

    Raised for a non-positive trip length, blank keywords or an
    out-of-range track index.
    """


class CatalogUnavailableError(TripTunesError):
    """The video catalog could not be reached or refused the request.

    Covers network failures, quota exhaustion and a missing or rejected
    API key. Nothing is retried automatically.
    """

    retryable: bool = True


class NoCandidatesError(TripTunesError):
    """The catalog returned no usable videos for the keywords."""


class FitFailureReason(str, Enum):
    ALL_ITEMS_TOO_LONG = "all_items_too_long"
    NO_COMBINATION = "no_combination"


class NoFeasibleCombinationError(TripTunesError):
    """Videos were found but none could be packed under the trip length."""

    def __init__(self, message: str, reason: FitFailureReason) -> None:
        super().__init__(message)
        self.reason = reason


class PlaybackResourceError(TripTunesError):
    """The embedded player failed on one video.

    Non-fatal: the playlist and the current position stay intact.
    """

    retryable: bool = True

    def __init__(self, video_id: str, code: int) -> None:
        super().__init__(
            f"Playback failed for video {video_id} (player error code {code})."
        )
        self.video_id = video_id
        self.code = code
