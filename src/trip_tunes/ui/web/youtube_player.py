"""Embedded YouTube player using the IFrame API inside QWebEngineView.

Implements the widget side of the playback adapter: each ``create`` call
builds a new ``YT.Player`` identified by an integer handle, and its
lifecycle callbacks come back through the QWebChannel bridge as player
events.
"""

from __future__ import annotations

import json
import logging

from PyQt6.QtCore import QUrl
from PyQt6.QtWebChannel import QWebChannel
from PyQt6.QtWebEngineCore import QWebEngineSettings
from PyQt6.QtWebEngineWidgets import QWebEngineView

from trip_tunes.db.models import (
    PlayerEvent,
    PlayerState,
    PlayerVars,
    ResourceError,
    ResourceReady,
    ResourceStateChanged,
)
from trip_tunes.playback.adapter import EventSink
from trip_tunes.ui.web.bridge import PlayerBridge

logger = logging.getLogger(__name__)

# The IFrame API refuses to embed without an http(s) origin.
_ORIGIN = "https://localhost"

_PLAYER_HTML = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
  html, body, #host { margin: 0; width: 100%; height: 100%; background: #000; overflow: hidden; }
  #host > * { width: 100%; height: 100%; border: 0; }
</style>
<script src="qrc:///qtwebchannel/qwebchannel.js"></script>
<script src="https://www.youtube.com/iframe_api"></script>
</head>
<body>
<div id="host"></div>
<script>
var bridge = null;
var apiLoaded = false;
var players = {};

new QWebChannel(qt.webChannelTransport, function (channel) {
  bridge = channel.objects.bridge;
  announce();
});

window.onerror = function (message, source, line) {
  if (bridge) { bridge.log(message + ' (' + source + ':' + line + ')'); }
};

function onYouTubeIframeAPIReady() {
  apiLoaded = true;
  announce();
}

function announce() {
  if (bridge && apiLoaded) { bridge.on_api_ready(); }
}

function createPlayer(handle, videoId, playerVars) {
  var el = document.createElement('div');
  el.id = 'player-' + handle;
  document.getElementById('host').appendChild(el);
  players[handle] = new YT.Player(el.id, {
    height: '100%',
    width: '100%',
    videoId: videoId,
    playerVars: playerVars,
    events: {
      onReady: function () { bridge.on_ready(handle, videoId); },
      onStateChange: function (e) {
        var data = e.target.getVideoData ? e.target.getVideoData() : null;
        bridge.on_state_change(handle, (data && data.video_id) || videoId, e.data);
      },
      onError: function (e) { bridge.on_error(handle, videoId, e.data); }
    }
  });
}

function destroyPlayer(handle) {
  var player = players[handle];
  if (player) {
    player.destroy();
    delete players[handle];
  }
  var el = document.getElementById('player-' + handle);
  if (el) { el.remove(); }
}

function playVideo(handle) {
  var player = players[handle];
  if (player && player.playVideo) { player.playVideo(); }
}

function pauseVideo(handle) {
  var player = players[handle];
  if (player && player.pauseVideo) { player.pauseVideo(); }
}
</script>
</body>
</html>
"""


def configure_web_settings(settings: QWebEngineSettings) -> None:
    """Let new players start on their own, so autoplay and auto-advance work."""
    settings.setAttribute(
        QWebEngineSettings.WebAttribute.PlaybackRequiresUserGesture, False
    )


class YouTubePlayerView(QWebEngineView):
    """QWebEngineView hosting one YT.Player per handle."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setMinimumSize(320, 180)

        self._api_ready = False
        self._pending_calls: list[str] = []
        self._next_handle = 0
        self._states: dict[int, PlayerState] = {}
        self._subscribers: dict[int, EventSink] = {}

        self._bridge = PlayerBridge(self)
        self._channel = QWebChannel(self)
        self._channel.registerObject("bridge", self._bridge)
        self.page().setWebChannel(self._channel)

        self._bridge.api_ready.connect(self._on_api_ready)
        self._bridge.player_ready.connect(self._on_player_ready)
        self._bridge.state_changed.connect(self._on_state_changed)
        self._bridge.player_error.connect(self._on_player_error)

        configure_web_settings(self.settings())
        self.setHtml(_PLAYER_HTML, QUrl(_ORIGIN))

    @property
    def is_api_ready(self) -> bool:
        return self._api_ready

    # --- PlaybackWidget ---

    def create(self, video_id: str, player_vars: PlayerVars) -> int:
        self._next_handle += 1
        handle = self._next_handle
        self._states[handle] = PlayerState.UNSTARTED
        params = player_vars.as_embed_params()
        params["origin"] = _ORIGIN
        self._run_js(
            f"createPlayer({handle}, {json.dumps(video_id)}, {json.dumps(params)});"
        )
        return handle

    def destroy(self, handle: int) -> None:
        self._states.pop(handle, None)
        self._subscribers.pop(handle, None)
        self._run_js(f"destroyPlayer({int(handle)});")

    def play(self, handle: int) -> None:
        self._run_js(f"playVideo({int(handle)});")

    def pause(self, handle: int) -> None:
        self._run_js(f"pauseVideo({int(handle)});")

    def get_state(self, handle: int) -> PlayerState:
        return self._states.get(handle, PlayerState.UNSTARTED)

    def subscribe(self, handle: int, callback: EventSink) -> None:
        self._subscribers[handle] = callback

    # --- Private ---

    def _run_js(self, script: str) -> None:
        if not self._api_ready:
            self._pending_calls.append(script)
            return
        self.page().runJavaScript(script)

    def _on_api_ready(self) -> None:
        self._api_ready = True
        pending, self._pending_calls = self._pending_calls, []
        for script in pending:
            self.page().runJavaScript(script)

    def _emit(self, handle: int, event: PlayerEvent) -> None:
        callback = self._subscribers.get(handle)
        if callback is None:
            logger.debug("No subscriber for player %d, dropping %r", handle, event)
            return
        callback(event)

    def _on_player_ready(self, handle: int, video_id: str) -> None:
        self._emit(handle, ResourceReady(video_id=video_id))

    def _on_state_changed(self, handle: int, video_id: str, code: int) -> None:
        state = PlayerState.from_code(code)
        if handle in self._states:
            self._states[handle] = state
        self._emit(handle, ResourceStateChanged(video_id=video_id, state=state))

    def _on_player_error(self, handle: int, video_id: str, code: int) -> None:
        self._emit(handle, ResourceError(video_id=video_id, code=code))
