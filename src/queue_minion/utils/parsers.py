"""
Argument and command parsing utilities.

Cross-cutting utilities for parsing user input and command arguments.
"""

import shlex
from typing import List, Optional, Tuple


class CommandParseError(ValueError):
    """Raised when a command line cannot be split into words."""

    def __init__(self, user_input: str, reason: str):
        self.user_input = user_input
        self.reason = reason
        super().__init__(f"Could not parse command ({reason}): {user_input}")


def parse_command(user_input: str) -> Tuple[str, List[str]]:
    """
    Parse user input into command and arguments.

    Quoted arguments keep their spaces (``play "Road Trip"``).

    Args:
        user_input: Raw user input string

    Returns:
        Tuple of (command, args) where command is lowercase and args is a list

    Raises:
        CommandParseError: For input shlex rejects, such as an unbalanced quote
    """
    try:
        parts = shlex.split(user_input)
    except ValueError as e:
        raise CommandParseError(user_input, str(e).lower()) from e

    if not parts:
        return "", []

    return parts[0].lower(), parts[1:]


def split_track_and_direction(args: List[str]) -> Tuple[List[str], Optional[str]]:
    """
    Split a trailing ``forward``/``backward`` word off an argument list.

    Example:
        ['Rock', '2', 'forward'] -> (['Rock', '2'], 'forward')
        ['Rock', '2'] -> (['Rock', '2'], None)
    """
    if args and args[-1].lower() in ("forward", "backward", "up", "down"):
        word = args[-1].lower()
        direction = {"up": "backward", "down": "forward"}.get(word, word)
        return args[:-1], direction
    return args, None


__all__ = ["CommandParseError", "parse_command", "split_track_and_direction"]
