"""Queues domain - named play queues with persistence.

This domain handles:
- Queue model and the process-wide QueueStore
- Queue operations (create, add, transpose, shuffle, play, advance)
- SQLite and in-memory persistence
- Queue/track selection through a pluggable chooser
"""

from .exceptions import (
    QueueError,
    BoundaryError,
    EmptyQueueError,
    NoNextTrackError,
    QueueNotFoundError,
    TrackNotFoundError,
    SelectionError,
)
from .models import Direction, Queue
from .operations import (
    new_queue,
    add_tracks,
    add_files,
    discard,
    transpose,
    shuffle,
    next_track,
    play,
    play_next,
    remove_track,
)
from .persistence import (
    QueueRepository,
    SqliteQueueRepository,
    MemoryQueueRepository,
    queue_to_dict,
    queue_from_dict,
)
from .selection import Chooser, NonInteractiveChooser, SelectionService, track_labels
from .store import QueueStore

__all__ = [
    # Errors
    "QueueError",
    "BoundaryError",
    "EmptyQueueError",
    "NoNextTrackError",
    "QueueNotFoundError",
    "TrackNotFoundError",
    "SelectionError",
    # Models
    "Direction",
    "Queue",
    "QueueStore",
    # Operations
    "new_queue",
    "add_tracks",
    "add_files",
    "discard",
    "transpose",
    "shuffle",
    "next_track",
    "play",
    "play_next",
    "remove_track",
    # Persistence
    "QueueRepository",
    "SqliteQueueRepository",
    "MemoryQueueRepository",
    "queue_to_dict",
    "queue_from_dict",
    # Selection
    "Chooser",
    "NonInteractiveChooser",
    "SelectionService",
    "track_labels",
]
