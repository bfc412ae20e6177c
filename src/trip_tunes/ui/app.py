"""Application window and main UI entry point.

Collects the trip length and keywords, runs playlist generation in a
background thread, and wires the player panel to the playback sequencer.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from uuid import UUID

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QSplitter,
    QStatusBar,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from trip_tunes.catalog.youtube import YouTubeCatalog
from trip_tunes.db.database import Database
from trip_tunes.db.models import Playlist, PlaylistSortKey, TravelTime
from trip_tunes.db.preferences import PreferencesManager
from trip_tunes.exceptions import PlaybackResourceError, TripTunesError
from trip_tunes.generator.builder import PlaylistGenerator
from trip_tunes.generator.fitter import DurationFitter
from trip_tunes.playback.adapter import create_playback
from trip_tunes.playback.sequencer import PlaybackSequencer
from trip_tunes.ui.panels.library import LibraryPanel
from trip_tunes.ui.panels.player import PlayerPanel
from trip_tunes.ui.panels.playlist import PlaylistPanel

logger = logging.getLogger(__name__)

# Dark theme stylesheet
DARK_STYLESHEET = """
QMainWindow { background: #1A1A2E; }
QStatusBar { background: #0F0F23; color: #888888; font-size: 11px; }
QTabWidget::pane { background: #0F0F23; border: none; }
QTabBar::tab {
    background: #0F0F23; color: #888888;
    padding: 6px 16px; border: none; border-bottom: 2px solid transparent;
}
QTabBar::tab:selected { color: #00D4FF; border-bottom: 2px solid #00D4FF; }
QTabBar::tab:hover { color: #E0E0E0; }
QSplitter::handle { background: #333; width: 2px; }
QLabel { color: #E0E0E0; }
QLineEdit, QSpinBox {
    background: #1A1A2E; color: #E0E0E0;
    border: 1px solid #333; border-radius: 4px;
    padding: 4px 8px;
}
QLineEdit:focus, QSpinBox:focus { border-color: #00D4FF; }
QPushButton#generateButton {
    background: #00D4FF; color: #000; border: none;
    padding: 6px 16px; border-radius: 4px; font-weight: 600;
}
QPushButton#generateButton:disabled { background: #333; color: #777; }
"""


class GenerationWorker(QThread):
    """Background thread running catalog search and fitting."""

    finished_ok = pyqtSignal(object)  # Playlist
    failed = pyqtSignal(object)  # TripTunesError

    def __init__(
        self,
        generator: PlaylistGenerator,
        keywords: str,
        travel_time: TravelTime,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.generator = generator
        self.keywords = keywords
        self.travel_time = travel_time

    def run(self) -> None:
        try:
            playlist = asyncio.run(
                self.generator.generate(self.keywords, self.travel_time)
            )
        except TripTunesError as exc:
            self.failed.emit(exc)
        except Exception as exc:
            logger.exception("Playlist generation failed")
            self.failed.emit(TripTunesError(f"Playlist generation failed: {exc}"))
        else:
            self.finished_ok.emit(playlist)


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        super().__init__()
        self.setWindowTitle("Trip Tunes")
        self.resize(1200, 760)
        self.setStyleSheet(DARK_STYLESHEET)

        self.db = Database(db_path)
        self.prefs = PreferencesManager(self.db)
        self._sort = self.prefs.load_playlist_sort()
        self._worker: GenerationWorker | None = None
        self._generator: PlaylistGenerator | None = None

        self._build_ui()

        self.sequencer, self.adapter = create_playback(
            self.player_panel.video_view,
            on_change=self._on_sequencer_changed,
            on_error=self._on_playback_error,
        )
        self.player_panel.play_pause_clicked.connect(self.sequencer.toggle_play_pause)
        self.player_panel.next_clicked.connect(self.sequencer.skip_next)
        self.player_panel.refresh(self.sequencer)

        self._refresh_library()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        central = QWidget()
        root = QVBoxLayout(central)
        root.setContentsMargins(8, 8, 8, 0)

        form = QHBoxLayout()
        form.addWidget(QLabel("Trip:"))
        self._hours = QSpinBox()
        self._hours.setRange(0, 24)
        self._hours.setSuffix(" h")
        form.addWidget(self._hours)
        self._minutes = QSpinBox()
        self._minutes.setRange(0, 59)
        self._minutes.setSuffix(" min")
        self._minutes.setValue(30)
        form.addWidget(self._minutes)

        form.addWidget(QLabel("Music:"))
        self._keywords = QLineEdit(self.prefs.load_last_keywords())
        self._keywords.setPlaceholderText("e.g. city pop, lo-fi, jazz piano")
        self._keywords.returnPressed.connect(self._on_generate)
        form.addWidget(self._keywords, stretch=1)

        self._generate_btn = QPushButton("Generate")
        self._generate_btn.setObjectName("generateButton")
        self._generate_btn.clicked.connect(self._on_generate)
        form.addWidget(self._generate_btn)
        root.addLayout(form)

        splitter = QSplitter()
        tabs = QTabWidget()
        self.playlist_panel = PlaylistPanel()
        self.playlist_panel.track_activated.connect(self._on_track_activated)
        self.playlist_panel.save_requested.connect(self._on_save_playlist)
        tabs.addTab(self.playlist_panel, "Playlist")

        self.library_panel = LibraryPanel()
        self.library_panel.load_requested.connect(self._on_load_playlist)
        self.library_panel.delete_requested.connect(self._on_delete_playlist)
        self.library_panel.sort_selected.connect(self._on_sort_selected)
        tabs.addTab(self.library_panel, "Saved")
        self._tabs = tabs
        splitter.addWidget(tabs)

        self.player_panel = PlayerPanel()
        splitter.addWidget(self.player_panel)
        splitter.setStretchFactor(1, 2)
        root.addWidget(splitter, stretch=1)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())
        self.statusBar().showMessage("Enter a trip length and some music keywords.")

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _ensure_api_key(self) -> str | None:
        api_key = self.prefs.load_api_key()
        if api_key:
            return api_key
        api_key, ok = QInputDialog.getText(
            self,
            "YouTube API Key",
            "A YouTube Data API v3 key is required:",
            QLineEdit.EchoMode.Password,
        )
        if not ok or not api_key.strip():
            return None
        self.prefs.save_api_key(api_key)
        return api_key.strip()

    def _on_generate(self) -> None:
        if self._worker is not None and self._worker.isRunning():
            return
        api_key = self._ensure_api_key()
        if api_key is None:
            self.statusBar().showMessage("A YouTube API key is required.")
            return

        keywords = self._keywords.text()
        travel_time = TravelTime(hours=self._hours.value(), minutes=self._minutes.value())
        self.prefs.save_last_keywords(keywords.strip())

        self.sequencer.load_playlist(None)
        self.playlist_panel.set_playlist(None)

        catalog = YouTubeCatalog(api_key)
        fitter = DurationFitter(self.prefs.load_fit_config())
        if self._generator is None:
            self._generator = PlaylistGenerator(catalog, fitter)
        else:
            self._generator.catalog = catalog
            self._generator.fitter = fitter

        self._generate_btn.setEnabled(False)
        self.statusBar().showMessage(f"Searching YouTube for {keywords.strip()!r}…")

        self._worker = GenerationWorker(self._generator, keywords, travel_time, self)
        self._worker.finished_ok.connect(self._on_generated)
        self._worker.failed.connect(self._on_generation_failed)
        self._worker.finished.connect(lambda: self._generate_btn.setEnabled(True))
        self._worker.start()

    def _on_generated(self, playlist: Playlist) -> None:
        if self._generator is not None and self._generator.latest is not playlist:
            logger.debug("Ignoring stale generation result %s", playlist.id)
            return
        self.sequencer.load_playlist(playlist)
        self.playlist_panel.set_playlist(playlist)
        self._tabs.setCurrentWidget(self.playlist_panel)
        self.statusBar().showMessage(
            f"Built {playlist.name!r} with {playlist.item_count} videos."
        )

    def _on_generation_failed(self, error: TripTunesError) -> None:
        self.statusBar().showMessage(error.message)
        QMessageBox.warning(self, "Could not build playlist", error.message)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def _on_track_activated(self, index: int) -> None:
        playlist = self.sequencer.playlist
        if playlist is None:
            return
        try:
            self.sequencer.select_track(playlist, index)
        except TripTunesError as exc:
            self.statusBar().showMessage(exc.message)

    def _on_sequencer_changed(self, sequencer: PlaybackSequencer) -> None:
        self.player_panel.refresh(sequencer)
        self.playlist_panel.highlight(
            sequencer.position.index if sequencer.position is not None else None
        )

    def _on_playback_error(self, error: PlaybackResourceError) -> None:
        self.statusBar().showMessage(error.message)

    # ------------------------------------------------------------------
    # Saved playlists
    # ------------------------------------------------------------------

    def _on_save_playlist(self) -> None:
        playlist = self.sequencer.playlist
        if playlist is None:
            return
        self.db.save_playlist(playlist)
        self.statusBar().showMessage(f"Saved {playlist.name!r}.")
        self._refresh_library()

    def _on_load_playlist(self, playlist_id: UUID) -> None:
        playlist = self.db.get_playlist(playlist_id)
        if playlist is None:
            self._refresh_library()
            return
        self.sequencer.load_playlist(playlist)
        self.playlist_panel.set_playlist(playlist)
        self._tabs.setCurrentWidget(self.playlist_panel)

    def _on_delete_playlist(self, playlist_id: UUID) -> None:
        self.db.delete_playlist(playlist_id)
        self._refresh_library()

    def _on_sort_selected(self, key: PlaylistSortKey) -> None:
        self._sort = self._sort.select(key)
        self.prefs.save_playlist_sort(self._sort)
        self._refresh_library()

    def _refresh_library(self) -> None:
        self.library_panel.set_playlists(self.db.list_playlists(self._sort), self._sort)

    def closeEvent(self, event) -> None:
        self.sequencer.stop()
        self.db.close()
        super().closeEvent(event)
