"""
Queue persistence.

Repositories load and save the whole ordered set of queues at once. The
current pointer is stored as a position, not a filename, so a queue that
holds the same file twice comes back pointing at the same entry.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from loguru import logger

from queue_minion.core.database import get_db_connection, init_database
from queue_minion.domain.library.models import Track

from .models import Queue

TRACK_COLUMNS = ("filename", "artist", "title", "album", "track_number", "date", "genre")


class QueueRepository(Protocol):
    """Durable storage for the queue set."""

    def load_queues(self) -> List[Queue]: ...

    def save_queues(self, queues: List[Queue]) -> None: ...


def track_to_dict(track: Track) -> Dict[str, Any]:
    """Serialize a track to a JSON-compatible dict."""
    return {column: getattr(track, column) for column in TRACK_COLUMNS}


def track_from_dict(data: Dict[str, Any]) -> Track:
    """Deserialize a track from ``track_to_dict`` output or a database row."""
    return Track(**{column: data[column] for column in TRACK_COLUMNS})


def queue_to_dict(queue: Queue) -> Dict[str, Any]:
    """Serialize a queue to a JSON-compatible dict."""
    return {
        "id": queue.id,
        "name": queue.name,
        "current_position": queue.current_index(),
        "tracks": [track_to_dict(track) for track in queue.tracks],
    }


def queue_from_dict(data: Dict[str, Any]) -> Queue:
    """Deserialize a queue from ``queue_to_dict`` output."""
    tracks = [track_from_dict(item) for item in data["tracks"]]
    return Queue(
        id=data["id"],
        name=data["name"],
        tracks=tracks,
        current=_track_at(tracks, data.get("current_position")),
    )


def _track_at(tracks: List[Track], position: Optional[int]) -> Optional[Track]:
    if position is None or not 0 <= position < len(tracks):
        return None
    return tracks[position]


class SqliteQueueRepository:
    """Stores queues in the SQLite database."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        init_database(db_path)

    def load_queues(self) -> List[Queue]:
        """Load all queues in store order."""
        with get_db_connection(self.db_path) as conn:
            queue_rows = conn.execute(
                "SELECT id, name, current_position FROM queues ORDER BY position"
            ).fetchall()

            queues = []
            for row in queue_rows:
                track_rows = conn.execute(
                    f"""
                    SELECT {", ".join(TRACK_COLUMNS)}
                    FROM queue_tracks
                    WHERE queue_id = ?
                    ORDER BY position
                """,
                    (row["id"],),
                ).fetchall()
                tracks = [track_from_dict(dict(track_row)) for track_row in track_rows]
                queues.append(
                    Queue(
                        id=row["id"],
                        name=row["name"],
                        tracks=tracks,
                        current=_track_at(tracks, row["current_position"]),
                    )
                )

        logger.debug(f"Loaded {len(queues)} queues from {self.db_path}")
        return queues

    def save_queues(self, queues: List[Queue]) -> None:
        """Replace the stored queue set with ``queues``."""
        with get_db_connection(self.db_path) as conn:
            # Begin explicit transaction for atomicity
            conn.execute("BEGIN")
            try:
                conn.execute("DELETE FROM queue_tracks")
                conn.execute("DELETE FROM queues")

                for position, queue in enumerate(queues):
                    conn.execute(
                        """
                        INSERT INTO queues (id, name, position, current_position)
                        VALUES (?, ?, ?, ?)
                    """,
                        (queue.id, queue.name, position, queue.current_index()),
                    )
                    conn.executemany(
                        f"""
                        INSERT INTO queue_tracks (queue_id, position, {", ".join(TRACK_COLUMNS)})
                        VALUES (?, ?, {", ".join("?" for _ in TRACK_COLUMNS)})
                    """,
                        [
                            (queue.id, i, *(getattr(track, c) for c in TRACK_COLUMNS))
                            for i, track in enumerate(queue.tracks)
                        ],
                    )

                conn.commit()
            except Exception:
                conn.rollback()
                raise

        logger.debug(f"Saved {len(queues)} queues to {self.db_path}")


class MemoryQueueRepository:
    """Keeps serialized queues in memory.

    Loading always returns fresh objects, like a real database would.
    """

    def __init__(self, queues: Optional[List[Queue]] = None):
        self._data: List[Dict[str, Any]] = [queue_to_dict(q) for q in queues or []]
        self.save_count = 0

    def load_queues(self) -> List[Queue]:
        return [queue_from_dict(data) for data in self._data]

    def save_queues(self, queues: List[Queue]) -> None:
        self._data = [queue_to_dict(q) for q in queues]
        self.save_count += 1
