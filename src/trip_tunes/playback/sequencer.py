"""Playback sequencer — decides what plays now and what plays next.

The sequencer never touches the player itself. It issues commands through a
``PlayerCommands`` object and reacts to lifecycle events that the player
reports back, one at a time. Every event names the video the reporting
player instance has loaded; events for any other video come from a player
that has since been replaced and are dropped.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from trip_tunes.db.models import (
    PlaybackPosition,
    PlayerEvent,
    PlayerState,
    Playlist,
    ResourceError,
    ResourceReady,
    ResourceStateChanged,
    SequencerState,
    VideoItem,
)
from trip_tunes.exceptions import InvalidInputError, PlaybackResourceError

logger = logging.getLogger(__name__)


class PlayerCommands(Protocol):
    """Commands the sequencer sends towards the player widget."""

    def create_resource_for(self, track: VideoItem) -> None: ...

    def destroy_resource(self) -> None: ...

    def request_play(self) -> None: ...

    def request_pause(self) -> None: ...


class PlaybackSequencer:
    """State machine over one playlist: idle, awaiting resource, playing, paused."""

    def __init__(
        self,
        commands: PlayerCommands,
        *,
        on_change: Callable[[PlaybackSequencer], None] | None = None,
        on_error: Callable[[PlaybackResourceError], None] | None = None,
    ) -> None:
        self._commands = commands
        self._on_change = on_change
        self._on_error = on_error

        self.playlist: Playlist | None = None
        self.position: PlaybackPosition | None = None
        self.state = SequencerState.IDLE
        self.is_playing = False
        self.last_error: PlaybackResourceError | None = None
        self._resource_failed = False

    # ------------------------------------------------------------------
    # Caller operations
    # ------------------------------------------------------------------

    def load_playlist(self, playlist: Playlist | None) -> None:
        """Replace the playlist; any current playback is stopped."""
        if self.position is not None:
            self._clear_position()
        self.playlist = playlist
        self.last_error = None
        self._changed()

    def select_track(self, playlist: Playlist, index: int) -> None:
        """Play ``playlist[index]`` from the beginning."""
        if playlist is not self.playlist:
            self.load_playlist(playlist)
        if not 0 <= index < playlist.item_count:
            raise InvalidInputError(
                f"Track {index + 1} is not in a playlist of {playlist.item_count}."
            )
        self._set_position(index)

    def toggle_play_pause(self) -> None:
        """Pause, resume, or start playback depending on the current state."""
        if self.playlist is None or not self.playlist.items:
            return

        if self.state == SequencerState.PLAYING:
            logger.debug("Pausing %s", self.position.track.id)
            self._commands.request_pause()
        elif self.position is not None and not self._resource_failed:
            # A live player exists (paused, or not started yet): ask it to play.
            logger.debug("Resuming %s", self.position.track.id)
            self._commands.request_play()
        else:
            index = self.position.index if self.position is not None else 0
            self._set_position(index)

    def skip_next(self) -> None:
        """Advance to the next track, or go idle after the last one."""
        if self.position is None:
            return
        self._advance()

    def stop(self) -> None:
        """Stop playback and release the player."""
        if self.position is None:
            return
        self._clear_position()
        self._changed()

    # ------------------------------------------------------------------
    # Player events
    # ------------------------------------------------------------------

    def on_external_event(self, event: PlayerEvent) -> bool:
        """Apply one player event. Returns False when the event was ignored."""
        current = self.position.track.id if self.position is not None else None
        if event.video_id != current:
            logger.info(
                "Ignoring %s for %s: tracking %s",
                type(event).__name__, event.video_id, current or "nothing",
            )
            return False

        if isinstance(event, ResourceReady):
            logger.debug("Player ready for %s", event.video_id)
        elif isinstance(event, ResourceStateChanged):
            self._on_state_changed(event.state)
        elif isinstance(event, ResourceError):
            self._on_resource_error(event)
        return True

    def _on_state_changed(self, state: PlayerState) -> None:
        if state == PlayerState.ENDED:
            logger.info("Finished %s", self.position.track.title)
            self._advance()
        elif state == PlayerState.PLAYING:
            self.state = SequencerState.PLAYING
            self.is_playing = True
            self._changed()
        elif state == PlayerState.PAUSED:
            self.state = SequencerState.PAUSED
            self.is_playing = False
            self._changed()
        else:
            logger.debug("Player %s: %s", self.position.track.id, state.value)

    def _on_resource_error(self, event: ResourceError) -> None:
        error = PlaybackResourceError(event.video_id, event.code)
        logger.error("%s", error.message)
        self.last_error = error
        self.is_playing = False
        self._resource_failed = True
        # Keep the position; the next toggle recreates the player.
        self.state = SequencerState.AWAITING_RESOURCE
        self._changed()
        if self._on_error is not None:
            self._on_error(error)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _advance(self) -> None:
        next_index = self.position.index + 1
        if next_index < self.playlist.item_count:
            self._set_position(next_index)
        else:
            logger.info("Reached the end of %r", self.playlist.name)
            self._clear_position()
            self._changed()

    def _set_position(self, index: int) -> None:
        track = self.playlist.items[index]
        logger.info("Now playing %d/%d: %s", index + 1, self.playlist.item_count, track.title)
        self.position = PlaybackPosition(track=track, index=index)
        self.state = SequencerState.AWAITING_RESOURCE
        self.is_playing = False
        self.last_error = None
        self._resource_failed = False
        self._commands.create_resource_for(track)
        self._changed()

    def _clear_position(self) -> None:
        self.position = None
        self._resource_failed = False
        self.state = SequencerState.IDLE
        self.is_playing = False
        self._commands.destroy_resource()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
