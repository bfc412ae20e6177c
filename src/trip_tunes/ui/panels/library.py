"""Library panel — browse, sort, load and delete saved playlists."""

from __future__ import annotations

import logging
from uuid import UUID

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from trip_tunes.catalog.duration import format_duration
from trip_tunes.db.models import Playlist, PlaylistSort, PlaylistSortKey, SortOrder

logger = logging.getLogger(__name__)

PANEL_STYLE = """
    QWidget { background: transparent; color: #f1f5f9; }
    QLabel { color: #94a3b8; font-size: 11px; }
"""

CARD_STYLE = """
    QWidget#playlistCard {
        background: rgba(22, 27, 34, 0.6);
        border: 1px solid rgba(255, 255, 255, 0.06);
        border-radius: 8px;
    }
    QWidget#playlistCard:hover {
        border-color: rgba(0, 212, 255, 0.3);
    }
"""

SORT_BUTTON_STYLE = """
    QPushButton {
        background: #1A1A2E; color: #E0E0E0;
        border: 1px solid #333; padding: 3px 8px;
        border-radius: 3px; font-size: 10px;
    }
    QPushButton:checked { border-color: #00D4FF; color: #00D4FF; }
"""

SORT_LABELS: dict[PlaylistSortKey, str] = {
    PlaylistSortKey.CREATED_AT: "Created",
    PlaylistSortKey.NAME: "Name",
    PlaylistSortKey.ITEM_COUNT: "Videos",
    PlaylistSortKey.TOTAL_DURATION: "Length",
}


class PlaylistCard(QWidget):
    """A single row/card for a saved playlist."""

    clicked = pyqtSignal(object)  # UUID
    delete_requested = pyqtSignal(object)  # UUID

    def __init__(self, playlist: Playlist, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("playlistCard")
        self.setStyleSheet(CARD_STYLE)
        self._playlist_id = playlist.id

        layout = QVBoxLayout(self)
        layout.setContentsMargins(10, 8, 10, 8)
        layout.setSpacing(4)

        top = QHBoxLayout()
        name_label = QLabel(playlist.name)
        name_label.setStyleSheet("color: #f1f5f9; font-size: 12px; font-weight: 600;")
        top.addWidget(name_label)
        top.addStretch()

        date_label = QLabel(playlist.created_at.strftime("%Y-%m-%d %H:%M"))
        date_label.setStyleSheet("color: #64748b; font-size: 10px;")
        top.addWidget(date_label)

        delete_btn = QPushButton("x")
        delete_btn.setFixedSize(20, 20)
        delete_btn.setStyleSheet(
            "background: transparent; color: #64748b; border: none; font-size: 12px;"
        )
        delete_btn.clicked.connect(lambda: self.delete_requested.emit(self._playlist_id))
        top.addWidget(delete_btn)
        layout.addLayout(top)

        stats = QLabel(
            f"{playlist.item_count} videos  |  "
            f"{format_duration(playlist.total_duration_seconds)} / "
            f"{format_duration(playlist.target_duration_seconds)}"
        )
        layout.addWidget(stats)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit(self._playlist_id)
        super().mousePressEvent(event)


class LibraryPanel(QScrollArea):
    """Saved playlists with sort controls."""

    load_requested = pyqtSignal(object)  # UUID
    delete_requested = pyqtSignal(object)  # UUID
    sort_selected = pyqtSignal(object)  # PlaylistSortKey

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setStyleSheet("QScrollArea { background: #0F0F23; border: none; }")

        container = QWidget()
        container.setStyleSheet(PANEL_STYLE)
        self._layout = QVBoxLayout(container)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self._layout.setSpacing(6)
        self.setWidget(container)

        sort_row = QHBoxLayout()
        sort_row.addWidget(QLabel("Sort:"))
        self._sort_buttons: dict[PlaylistSortKey, QPushButton] = {}
        for key, label in SORT_LABELS.items():
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setStyleSheet(SORT_BUTTON_STYLE)
            btn.clicked.connect(lambda checked, k=key: self.sort_selected.emit(k))
            sort_row.addWidget(btn)
            self._sort_buttons[key] = btn
        sort_row.addStretch()
        self._layout.addLayout(sort_row)

        self._empty_label = QLabel("No saved playlists yet.")
        self._layout.addWidget(self._empty_label)

        self._cards: list[PlaylistCard] = []

    def set_playlists(self, playlists: list[Playlist], sort: PlaylistSort) -> None:
        """Rebuild the card list in the given (already sorted) order."""
        for key, btn in self._sort_buttons.items():
            active = key == sort.key
            btn.setChecked(active)
            arrow = (" ▼" if sort.order == SortOrder.DESC else " ▲") if active else ""
            btn.setText(SORT_LABELS[key] + arrow)

        for card in self._cards:
            self._layout.removeWidget(card)
            card.deleteLater()
        self._cards = []

        self._empty_label.setVisible(not playlists)
        for playlist in playlists:
            card = PlaylistCard(playlist)
            card.clicked.connect(self.load_requested.emit)
            card.delete_requested.connect(self.delete_requested.emit)
            self._layout.addWidget(card)
            self._cards.append(card)
        logger.debug("Library shows %d playlists sorted by %s", len(playlists), sort.key.value)
