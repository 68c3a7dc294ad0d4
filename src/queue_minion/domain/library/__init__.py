"""Library domain - tracks and metadata extraction.

This domain handles:
- The immutable Track record
- Reading tags from audio files (Mutagen)
- Expanding directories into audio files
- Human-readable track labels
"""

from .models import Track
from .metadata import (
    METADATA_FIELDS,
    Extractor,
    extract_metadata,
    track_from_file,
    expand_paths,
    format_track,
)

__all__ = [
    "Track",
    "METADATA_FIELDS",
    "Extractor",
    "extract_metadata",
    "track_from_file",
    "expand_paths",
    "format_track",
]
