"""
SQLite database operations for Queue Minion
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


# Database schema version for migrations
SCHEMA_VERSION = 1


@contextmanager
def get_db_connection(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Get a database connection with proper cleanup and concurrency support."""
    conn = sqlite3.connect(db_path, timeout=30.0)
    conn.row_factory = sqlite3.Row  # Enable dict-like access
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        yield conn
    finally:
        conn.close()


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the stored schema version, or 0 for a fresh database."""
    try:
        row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
    except sqlite3.OperationalError:
        return 0
    if row is None or row["version"] is None:
        return 0
    return row["version"]


def init_database(db_path: Path) -> None:
    """Initialize the database with required tables."""
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db_connection(db_path) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            )
        """)

        current_version = get_schema_version(conn)

        # Queues, in store order. current_position is the index of the
        # current entry in queue_tracks, so duplicate entries round-trip.
        conn.execute("""
            CREATE TABLE IF NOT EXISTS queues (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position INTEGER NOT NULL,
                current_position INTEGER
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS queue_tracks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                queue_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                filename TEXT NOT NULL,
                artist TEXT,
                title TEXT,
                album TEXT,
                track_number TEXT,
                date TEXT,
                genre TEXT,
                FOREIGN KEY (queue_id) REFERENCES queues (id) ON DELETE CASCADE,
                UNIQUE (queue_id, position)
            )
        """)

        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_queue_tracks_queue_id ON queue_tracks (queue_id, position)"
        )

        if current_version < SCHEMA_VERSION:
            logger.info(
                f"Database schema upgraded from v{current_version} to v{SCHEMA_VERSION}"
            )

        conn.execute("DELETE FROM schema_version")
        conn.execute(
            "INSERT INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )

        conn.commit()
