"""Python-side QWebChannel bridge for JS <-> Python communication."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

logger = logging.getLogger(__name__)


class PlayerBridge(QObject):
    """Bridge object exposed to the YouTube IFrame page via QWebChannel.

    JS calls @pyqtSlot methods on this object.  Python drives the players
    via runJavaScript() on the QWebEnginePage (not through this bridge).
    """

    api_ready = pyqtSignal()
    player_ready = pyqtSignal(int, str)              # handle, video_id
    state_changed = pyqtSignal(int, str, int)        # handle, video_id, YT state code
    player_error = pyqtSignal(int, str, int)         # handle, video_id, YT error code

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)

    # --- Slots called by JavaScript ---

    @pyqtSlot()
    def on_api_ready(self) -> None:
        """Called once both the channel and the IFrame API are loaded."""
        logger.info("YouTube IFrame API ready")
        self.api_ready.emit()

    @pyqtSlot(int, str)
    def on_ready(self, handle: int, video_id: str) -> None:
        logger.debug("JS player %d ready: %s", handle, video_id)
        self.player_ready.emit(handle, video_id)

    @pyqtSlot(int, str, int)
    def on_state_change(self, handle: int, video_id: str, code: int) -> None:
        logger.debug("JS player %d state %d: %s", handle, code, video_id)
        self.state_changed.emit(handle, video_id, code)

    @pyqtSlot(int, str, int)
    def on_error(self, handle: int, video_id: str, code: int) -> None:
        logger.warning("JS player %d error %d: %s", handle, code, video_id)
        self.player_error.emit(handle, video_id, code)

    @pyqtSlot(str)
    def log(self, message: str) -> None:
        """Allow JS to log messages through Python's logging."""
        logger.info("[JS] %s", message)
