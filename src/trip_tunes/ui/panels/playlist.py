"""Playlist panel — the generated trip playlist.

Shows each video with its length, the total against the trip length, and
lets the user start playback from any entry.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from trip_tunes.catalog.duration import format_duration
from trip_tunes.db.models import Playlist, VideoItem


class PlaylistVideoItem(QWidget):
    """A single video row in the playlist."""

    def __init__(self, video: VideoItem, position: int, parent=None):
        super().__init__(parent)
        self.video = video

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)

        pos_label = QLabel(f"{position + 1}.")
        pos_label.setFixedWidth(24)
        pos_label.setStyleSheet("color: #FFD700; font-size: 11px; font-weight: bold;")
        layout.addWidget(pos_label)

        info = QVBoxLayout()
        info.setSpacing(0)
        name_label = QLabel(video.title[:48])
        name_label.setToolTip(video.title)
        name_label.setStyleSheet("color: #E0E0E0; font-size: 11px;")
        info.addWidget(name_label)

        channel_label = QLabel(video.channel_title)
        channel_label.setStyleSheet("color: #888888; font-size: 10px;")
        info.addWidget(channel_label)
        layout.addLayout(info)

        layout.addStretch()

        duration_label = QLabel(format_duration(video.duration_seconds))
        duration_label.setStyleSheet("color: #00D4FF; font-size: 10px;")
        layout.addWidget(duration_label)


class PlaylistPanel(QWidget):
    """Panel listing the videos of the current playlist."""

    track_activated = pyqtSignal(int)  # index
    save_requested = pyqtSignal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(300)
        self.setStyleSheet("background: #0F0F23;")

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        layout.setSpacing(4)

        self._header = QLabel("PLAYLIST")
        self._header.setFont(QFont("Segoe UI", 12, QFont.Weight.Bold))
        self._header.setStyleSheet("color: #00D4FF; padding: 8px;")
        layout.addWidget(self._header)

        self._stats_label = QLabel("0 videos | 00:00")
        self._stats_label.setStyleSheet("color: #888888; font-size: 11px; padding: 0 8px;")
        layout.addWidget(self._stats_label)

        self._save_btn = QPushButton("Save Playlist")
        self._save_btn.setStyleSheet("""
            QPushButton {
                background: #00D4FF; color: #000; border: none;
                padding: 4px 12px; border-radius: 3px; font-size: 11px;
            }
            QPushButton:hover { background: #33DDFF; }
            QPushButton:disabled { background: #1A1A2E; color: #555; }
        """)
        self._save_btn.setEnabled(False)
        self._save_btn.clicked.connect(self.save_requested.emit)
        layout.addWidget(self._save_btn)

        self._list = QListWidget()
        self._list.setStyleSheet("""
            QListWidget {
                background: #0F0F23; border: none; outline: none;
            }
            QListWidget::item {
                border-bottom: 1px solid #1A1A2E; padding: 2px;
            }
            QListWidget::item:selected { background: #16213E; }
        """)
        self._list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self._list, stretch=1)

    def set_playlist(self, playlist: Playlist | None) -> None:
        """Refresh the playlist display."""
        self._list.clear()
        self._save_btn.setEnabled(playlist is not None and bool(playlist.items))

        if playlist is None:
            self._header.setText("PLAYLIST")
            self._stats_label.setText("0 videos | 00:00")
            return

        self._header.setText(playlist.name.upper())
        self._stats_label.setText(
            f"{playlist.item_count} videos | "
            f"{format_duration(playlist.total_duration_seconds)} of "
            f"{format_duration(playlist.target_duration_seconds)}"
        )

        for i, video in enumerate(playlist.items):
            widget = PlaylistVideoItem(video, i)
            item = QListWidgetItem()
            item.setSizeHint(widget.sizeHint())
            self._list.addItem(item)
            self._list.setItemWidget(item, widget)

    def highlight(self, index: int | None) -> None:
        """Select the row that is currently playing."""
        if index is None or index >= self._list.count():
            self._list.clearSelection()
            return
        self._list.setCurrentRow(index)

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        self.track_activated.emit(self._list.row(item))
