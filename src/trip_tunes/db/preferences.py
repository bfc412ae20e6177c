"""Settings persistence via the preferences table.

Stores and retrieves user-configurable settings (fitting budget, playlist
sort, API key, last keywords) in the preferences table.
"""

from __future__ import annotations

import logging
import os

from trip_tunes.db.database import Database
from trip_tunes.db.models import FitConfig, PlaylistSort

logger = logging.getLogger(__name__)

API_KEY_ENV = "YOUTUBE_API_KEY"

# Keys used in the preferences table
_KEY_FIT_CONFIG = "fit_config"
_KEY_PLAYLIST_SORT = "playlist_sort"
_KEY_API_KEY = "youtube_api_key"
_KEY_LAST_KEYWORDS = "last_keywords"


class PreferencesManager:
    """Read/write user preferences backed by the Database preferences table."""

    def __init__(self, database: Database) -> None:
        self.db = database

    # ------------------------------------------------------------------
    # FitConfig
    # ------------------------------------------------------------------

    def save_fit_config(self, config: FitConfig) -> None:
        """Persist the fitting budget as JSON."""
        self.db.set_preference(_KEY_FIT_CONFIG, config.model_dump_json())

    def load_fit_config(self) -> FitConfig:
        """Load FitConfig from DB, or return defaults."""
        raw = self.db.get_preference(_KEY_FIT_CONFIG)
        if raw is None:
            return FitConfig()
        return FitConfig.model_validate_json(raw)

    # ------------------------------------------------------------------
    # Saved-playlist sort
    # ------------------------------------------------------------------

    def save_playlist_sort(self, sort: PlaylistSort) -> None:
        self.db.set_preference(_KEY_PLAYLIST_SORT, sort.model_dump_json())

    def load_playlist_sort(self) -> PlaylistSort:
        """Load the last sort, or newest-first."""
        raw = self.db.get_preference(_KEY_PLAYLIST_SORT)
        if raw is None:
            return PlaylistSort()
        return PlaylistSort.model_validate_json(raw)

    # ------------------------------------------------------------------
    # General string preferences
    # ------------------------------------------------------------------

    def save_api_key(self, api_key: str) -> None:
        """Remember the YouTube Data API key."""
        self.db.set_preference(_KEY_API_KEY, api_key.strip())

    def load_api_key(self) -> str | None:
        """Return the API key, preferring the environment over the DB."""
        from_env = os.environ.get(API_KEY_ENV, "").strip()
        if from_env:
            return from_env
        return self.db.get_preference(_KEY_API_KEY) or None

    def save_last_keywords(self, keywords: str) -> None:
        self.db.set_preference(_KEY_LAST_KEYWORDS, keywords)

    def load_last_keywords(self) -> str:
        return self.db.get_preference(_KEY_LAST_KEYWORDS) or ""
