"""Binds the sequencer to one externally owned player widget.

The adapter owns the only live player handle. Creating a player for a new
track always destroys the previous handle first, and player events are
handed to the sequencer strictly one at a time in arrival order.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Callable, Protocol

from trip_tunes.db.models import PlayerEvent, PlayerState, PlayerVars, VideoItem
from trip_tunes.playback.sequencer import PlaybackSequencer

logger = logging.getLogger(__name__)

EventSink = Callable[[PlayerEvent], Any]


class PlaybackWidget(Protocol):
    """The embedded player as seen by the adapter."""

    def create(self, video_id: str, player_vars: PlayerVars) -> Any: ...

    def destroy(self, handle: Any) -> None: ...

    def play(self, handle: Any) -> None: ...

    def pause(self, handle: Any) -> None: ...

    def get_state(self, handle: Any) -> PlayerState: ...

    def subscribe(self, handle: Any, callback: EventSink) -> None: ...


class PlayerAdapter:
    """Owns at most one player handle and forwards its events."""

    def __init__(
        self,
        widget: PlaybackWidget,
        player_vars: PlayerVars | None = None,
    ) -> None:
        self._widget = widget
        self._player_vars = player_vars or PlayerVars()
        self._handle: Any = None
        self._sink: EventSink | None = None
        self._pending: deque[PlayerEvent] = deque()
        self._busy = False

    @property
    def has_resource(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Any:
        return self._handle

    def connect(self, sink: EventSink) -> None:
        """Route player events to ``sink`` (normally the sequencer)."""
        self._sink = sink

    # ------------------------------------------------------------------
    # PlayerCommands
    # ------------------------------------------------------------------

    def create_resource_for(self, track: VideoItem) -> None:
        with self._exclusive():
            self._release()
            logger.info("Creating player for %s (%s)", track.id, track.title)
            handle = self._widget.create(track.id, self._player_vars)
            self._handle = handle
            self._widget.subscribe(handle, self._on_widget_event)

    def destroy_resource(self) -> None:
        with self._exclusive():
            self._release()

    def request_play(self) -> None:
        if self._handle is None:
            logger.debug("Play requested with no player")
            return
        with self._exclusive():
            self._widget.play(self._handle)

    def request_pause(self) -> None:
        if self._handle is None:
            logger.debug("Pause requested with no player")
            return
        with self._exclusive():
            self._widget.pause(self._handle)

    def current_state(self) -> PlayerState | None:
        if self._handle is None:
            return None
        return self._widget.get_state(self._handle)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _release(self) -> None:
        if self._handle is None:
            return
        logger.debug("Destroying player %r", self._handle)
        handle, self._handle = self._handle, None
        self._widget.destroy(handle)

    def _on_widget_event(self, event: PlayerEvent) -> None:
        self._pending.append(event)
        if not self._busy:
            self._drain()

    def _drain(self) -> None:
        self._busy = True
        try:
            while self._pending:
                event = self._pending.popleft()
                if self._sink is None:
                    logger.debug("Dropping %r: no listener connected", event)
                    continue
                self._sink(event)
        finally:
            self._busy = False

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Hold events back while a command runs, then deliver them in order."""
        if self._busy:
            yield
            return
        self._busy = True
        try:
            yield
        finally:
            self._busy = False
        if self._pending:
            self._drain()


def create_playback(
    widget: PlaybackWidget,
    *,
    on_change: Callable[[PlaybackSequencer], None] | None = None,
    on_error: Callable[..., None] | None = None,
) -> tuple[PlaybackSequencer, PlayerAdapter]:
    """Wire a sequencer and an adapter around ``widget``."""
    adapter = PlayerAdapter(widget)
    sequencer = PlaybackSequencer(adapter, on_change=on_change, on_error=on_error)
    adapter.connect(sequencer.on_external_event)
    return sequencer, adapter
