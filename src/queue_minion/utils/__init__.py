"""Cross-cutting utilities."""

from .parsers import CommandParseError, parse_command, split_track_and_direction

__all__ = ["CommandParseError", "parse_command", "split_track_and_direction"]
