"""
Music library domain models.

Contains data structures for representing music tracks.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, eq=False)
class Track:
    """Represents a queued audio file with its metadata.

    Tracks are immutable once built. Equality is identity: the same file
    added twice yields two distinct queue entries, and one Track object can
    be shared by several queues.
    """

    filename: str  # Path or URI handed to the player
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None
    track_number: Optional[str] = None
    date: Optional[str] = None
    genre: Optional[str] = None

    @classmethod
    def from_metadata(cls, filename: str, metadata: Mapping[str, Any]) -> "Track":
        """Build a Track from an extractor mapping.

        Keys follow tag naming (``tracknumber`` rather than ``track_number``);
        missing keys become None.
        """
        return cls(
            filename=filename,
            artist=metadata.get("artist"),
            title=metadata.get("title"),
            album=metadata.get("album"),
            track_number=metadata.get("tracknumber"),
            date=metadata.get("date"),
            genre=metadata.get("genre"),
        )
