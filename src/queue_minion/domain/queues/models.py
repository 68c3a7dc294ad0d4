"""
Queue domain models.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from queue_minion.domain.library.models import Track


class Direction(Enum):
    """Transpose direction within a queue."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def step(self) -> int:
        return 1 if self is Direction.FORWARD else -1


def generate_queue_id() -> str:
    """Generate a short stable identifier for a new queue."""
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class Queue:
    """A named, ordered list of tracks with an optional current entry.

    ``current`` is either None or one of the objects in ``tracks``
    (compared by identity). ``id`` is what views and the player hold on to;
    ``name`` is for people and is not required to be unique.
    """

    name: str
    tracks: List[Track] = field(default_factory=list)
    current: Optional[Track] = None
    id: str = field(default_factory=generate_queue_id)

    def index_of(self, track: Track) -> Optional[int]:
        """Position of the first entry that *is* ``track``, or None."""
        for i, candidate in enumerate(self.tracks):
            if candidate is track:
                return i
        return None

    def current_index(self) -> Optional[int]:
        """Position of the current entry, or None when idle."""
        if self.current is None:
            return None
        return self.index_of(self.current)

    def __repr__(self) -> str:
        return f"Queue(id={self.id!r}, name={self.name!r}, tracks={len(self.tracks)})"
