"""
Music metadata extraction and track display utilities.

Reads tags from audio files using Mutagen's "easy" interface, builds
Track objects from them, and renders tracks for selection prompts.
"""

from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .models import Track

# Easy-tag keys understood by Track.from_metadata
METADATA_FIELDS = ("artist", "title", "album", "tracknumber", "date", "genre")

Extractor = Callable[[str], Optional[dict[str, Any]]]


def get_tag_value(audio_file: Any, tag_name: str) -> Optional[str]:
    """Get a tag value as a plain string, or None when absent."""
    try:
        value = audio_file.get(tag_name)
    except (KeyError, ValueError):
        # Some formats (like Vorbis) raise ValueError for non-existent keys
        return None

    if not value:
        return None
    if isinstance(value, list):
        return str(value[0])
    return str(value)


def extract_metadata(filename: str) -> Optional[dict[str, Any]]:
    """Extract tag metadata from an audio file using mutagen.

    Returns:
        Mapping of METADATA_FIELDS to strings (None for absent tags), or
        None when the file could not be read as audio at all.
    """
    try:
        audio_file = MutagenFile(filename, easy=True)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read metadata from {filename}: {e}")
        return None

    if audio_file is None:
        logger.warning(f"Unrecognized audio format: {filename}")
        return None

    return {field: get_tag_value(audio_file, field) for field in METADATA_FIELDS}


def track_from_file(
    filename: str, extract: Extractor = extract_metadata
) -> Optional[Track]:
    """Build a Track for a file, or None when extraction fails.

    An extractor result with no fields at all counts as a failure; a
    mapping whose fields are all empty (an untagged file) still yields
    a Track.
    """
    metadata = extract(filename)
    if not metadata:
        logger.debug(f"No metadata extracted for {filename}")
        return None
    return Track.from_metadata(filename, metadata)


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported."""
    return local_path.suffix.lower() in supported_formats


def expand_paths(paths: Iterable[str], supported_formats: list[str]) -> list[str]:
    """Expand directories into the audio files they contain.

    Plain file arguments are passed through untouched (in order) so that
    extraction decides whether they are usable; directories are scanned
    recursively and their supported files appended in sorted order.
    """
    expanded = []
    for raw_path in paths:
        path = Path(raw_path).expanduser()
        if path.is_dir():
            files = sorted(
                p for p in path.rglob("*")
                if p.is_file() and is_supported_format(p, supported_formats)
            )
            expanded.extend(str(p) for p in files)
        else:
            expanded.append(str(path))
    return expanded


def format_track(track: Track) -> str:
    """Render a track as ``artist: title (album) (date)``.

    Missing album/date groups are left out; a missing title falls back to
    the file name.
    """
    artist = track.artist or "Unknown Artist"
    title = track.title or Path(track.filename).stem
    label = f"{artist}: {title}"
    if track.album:
        label += f" ({track.album})"
    if track.date:
        label += f" ({track.date})"
    return label
