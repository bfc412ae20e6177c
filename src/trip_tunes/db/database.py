"""SQLite database connection and CRUD operations."""

import locale
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from uuid import UUID

from trip_tunes.db.models import (
    Playlist,
    PlaylistSort,
    PlaylistSortKey,
    SortOrder,
    VideoItem,
)

logger = logging.getLogger(__name__)


class Database:
    """SQLite database for persisting playlists and preferences."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self._db_path = str(db_path)
        self._conn = sqlite3.connect(self._db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self.create_tables()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def create_tables(self) -> None:
        """Create all tables and indexes."""
        cur = self._conn.cursor()

        cur.executescript("""
            CREATE TABLE IF NOT EXISTS playlists (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                created_at TEXT NOT NULL,
                total_duration_seconds INTEGER NOT NULL,
                target_duration_seconds INTEGER NOT NULL,
                item_count INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_playlists_created
                ON playlists(created_at);

            CREATE TABLE IF NOT EXISTS playlist_items (
                playlist_id TEXT NOT NULL
                    REFERENCES playlists(id) ON DELETE CASCADE,
                position INTEGER NOT NULL,
                video_id TEXT NOT NULL,
                title TEXT NOT NULL,
                duration_seconds INTEGER NOT NULL,
                thumbnail_url TEXT,
                channel_title TEXT,
                PRIMARY KEY(playlist_id, position)
            );

            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    @property
    def connection(self) -> sqlite3.Connection:
        """Expose the underlying connection (for testing)."""
        return self._conn

    # ------------------------------------------------------------------
    # Playlist CRUD
    # ------------------------------------------------------------------

    def save_playlist(self, playlist: Playlist) -> UUID:
        """Insert or overwrite a playlist and its items. Returns its id."""
        playlist_id = str(playlist.id)
        with self._conn:
            self._conn.execute(
                "DELETE FROM playlist_items WHERE playlist_id = ?", (playlist_id,)
            )
            self._conn.execute(
                """
                INSERT OR REPLACE INTO playlists (
                    id, name, created_at, total_duration_seconds,
                    target_duration_seconds, item_count
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    playlist_id,
                    playlist.name,
                    playlist.created_at.isoformat(),
                    playlist.total_duration_seconds,
                    playlist.target_duration_seconds,
                    playlist.item_count,
                ),
            )
            self._conn.executemany(
                """
                INSERT INTO playlist_items (
                    playlist_id, position, video_id, title,
                    duration_seconds, thumbnail_url, channel_title
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        playlist_id,
                        position,
                        item.id,
                        item.title,
                        item.duration_seconds,
                        item.thumbnail_url,
                        item.channel_title,
                    )
                    for position, item in enumerate(playlist.items)
                ],
            )
        logger.info("Saved playlist %r (%s)", playlist.name, playlist_id)
        return playlist.id

    def get_playlist(self, playlist_id: UUID) -> Playlist | None:
        """Get a playlist by its UUID."""
        row = self._conn.execute(
            "SELECT * FROM playlists WHERE id = ?", (str(playlist_id),)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_playlist(row, self._get_items(row["id"]))

    def delete_playlist(self, playlist_id: UUID) -> bool:
        """Delete a playlist. Returns False if it did not exist."""
        with self._conn:
            cur = self._conn.execute(
                "DELETE FROM playlists WHERE id = ?", (str(playlist_id),)
            )
        deleted = cur.rowcount > 0
        if deleted:
            logger.info("Deleted playlist %s", playlist_id)
        return deleted

    def list_playlists(self, sort: PlaylistSort | None = None) -> list[Playlist]:
        """Return all playlists ordered by ``sort`` (newest first by default)."""
        sort = sort or PlaylistSort()
        rows = self._conn.execute("SELECT * FROM playlists").fetchall()
        playlists = [self._row_to_playlist(r, self._get_items(r["id"])) for r in rows]
        descending = sort.order == SortOrder.DESC
        if sort.key == PlaylistSortKey.NAME:
            playlists.sort(key=_name_key, reverse=descending)
            return playlists
        # Stable two-pass sort: ties on the primary key stay in A-Z name order.
        playlists.sort(key=_name_key)
        playlists.sort(key=_SORT_KEYS[sort.key], reverse=descending)
        return playlists

    def _get_items(self, playlist_id: str) -> list[VideoItem]:
        rows = self._conn.execute(
            """
            SELECT * FROM playlist_items
            WHERE playlist_id = ?
            ORDER BY position
            """,
            (playlist_id,),
        ).fetchall()
        return [self._row_to_item(r) for r in rows]

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def set_preference(self, key: str, value: str) -> None:
        """Set a user preference (insert or update)."""
        self._conn.execute(
            """
            INSERT OR REPLACE INTO preferences (key, value)
            VALUES (?, ?)
            """,
            (key, value),
        )
        self._conn.commit()

    def get_preference(self, key: str) -> str | None:
        """Get a user preference by key."""
        row = self._conn.execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        return row["value"]

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_playlist(row: sqlite3.Row, items: list[VideoItem]) -> Playlist:
        """Reconstruct a Playlist model from a SQLite row and its items."""
        return Playlist(
            id=UUID(row["id"]),
            name=row["name"],
            items=items,
            total_duration_seconds=row["total_duration_seconds"],
            target_duration_seconds=row["target_duration_seconds"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> VideoItem:
        """Reconstruct a VideoItem model from a SQLite row."""
        return VideoItem(
            id=row["video_id"],
            title=row["title"],
            duration_seconds=row["duration_seconds"],
            thumbnail_url=row["thumbnail_url"] or "",
            channel_title=row["channel_title"] or "",
        )


def _name_key(playlist: Playlist) -> str:
    return locale.strxfrm(playlist.name.casefold())


_SORT_KEYS = {
    PlaylistSortKey.CREATED_AT: lambda p: p.created_at,
    PlaylistSortKey.ITEM_COUNT: lambda p: p.item_count,
    PlaylistSortKey.TOTAL_DURATION: lambda p: p.total_duration_seconds,
}
