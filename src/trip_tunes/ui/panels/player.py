"""Player panel with the embedded YouTube view and transport controls."""

from __future__ import annotations

import logging

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from trip_tunes.catalog.duration import format_duration
from trip_tunes.db.models import SequencerState
from trip_tunes.playback.sequencer import PlaybackSequencer
from trip_tunes.ui.web.youtube_player import YouTubePlayerView

logger = logging.getLogger(__name__)

BUTTON_STYLE = """
    QPushButton {
        background: rgba(22, 27, 34, 0.8); color: #f1f5f9;
        border: 1px solid rgba(255, 255, 255, 0.08);
        border-radius: 6px; padding: 4px 12px; font-size: 14px;
    }
    QPushButton:hover {
        background: rgba(0, 212, 255, 0.12);
        border-color: rgba(0, 212, 255, 0.3);
    }
    QPushButton:disabled { color: #475569; }
"""


class PlayerPanel(QWidget):
    """Video area, now-playing line, play/pause and next buttons."""

    play_pause_clicked = pyqtSignal()
    next_clicked = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setStyleSheet("""
            QWidget {
                background: rgba(13, 17, 23, 0.95);
            }
        """)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 6, 12, 6)
        layout.setSpacing(6)

        self.video_view = YouTubePlayerView(self)
        layout.addWidget(self.video_view, stretch=1)

        self._now_playing = QLabel("Nothing playing")
        self._now_playing.setStyleSheet(
            "color: #94a3b8; font-size: 11px; font-weight: 500; border: none;"
        )
        layout.addWidget(self._now_playing)

        transport = QHBoxLayout()
        transport.setSpacing(8)

        self._play_btn = QPushButton("▶")
        self._play_btn.setFixedSize(36, 30)
        self._play_btn.setStyleSheet(BUTTON_STYLE)
        self._play_btn.clicked.connect(self.play_pause_clicked.emit)
        transport.addWidget(self._play_btn)

        self._next_btn = QPushButton("⏭")
        self._next_btn.setFixedSize(36, 30)
        self._next_btn.setStyleSheet(BUTTON_STYLE)
        self._next_btn.clicked.connect(self.next_clicked.emit)
        transport.addWidget(self._next_btn)

        self._state_label = QLabel("")
        self._state_label.setStyleSheet("color: #64748b; font-size: 11px; border: none;")
        transport.addWidget(self._state_label)
        transport.addStretch()

        layout.addLayout(transport)
        self._play_btn.setEnabled(False)
        self._next_btn.setEnabled(False)

    def refresh(self, sequencer: PlaybackSequencer) -> None:
        """Mirror the sequencer's state in the controls."""
        has_tracks = sequencer.playlist is not None and bool(sequencer.playlist.items)
        self._play_btn.setEnabled(has_tracks)
        self._next_btn.setEnabled(sequencer.position is not None)
        self._play_btn.setText("⏸" if sequencer.is_playing else "▶")

        position = sequencer.position
        if position is None:
            self._now_playing.setText("Nothing playing")
            self._state_label.setText("")
            return

        track = position.track
        total = sequencer.playlist.item_count
        self._now_playing.setText(
            f"▶ {position.index + 1}/{total}  {track.title}  "
            f"({format_duration(track.duration_seconds)})"
        )
        if sequencer.state == SequencerState.AWAITING_RESOURCE:
            self._state_label.setText("Loading…")
        else:
            self._state_label.setText(sequencer.state.value.replace("_", " "))
