"""IPC client: the side `queue-minion <command>` runs in."""

import os
import socket
from pathlib import Path
from typing import List, Optional, Tuple

from .protocol import ProtocolError, decode_response, encode_message, read_line

# Long enough for add-files on a large directory
REQUEST_TIMEOUT = 15.0

NOT_RUNNING = "Queue Minion is not running"


def get_socket_path() -> Path:
    """Control socket location, under XDG_RUNTIME_DIR when it is set."""
    runtime_dir = os.environ.get('XDG_RUNTIME_DIR')
    base = Path(runtime_dir) if runtime_dir else Path.home() / '.local' / 'share'
    return base / 'queue-minion' / 'control.sock'


def send_command(
    command: str, args: Optional[List[str]] = None, socket_path: Optional[Path] = None
) -> Tuple[bool, str]:
    """
    Run a command in the running shell and wait for its result.

    Args:
        command: Command name (e.g., 'play', 'add-files')
        args: Command arguments
        socket_path: Override the control socket location

    Returns:
        (success, message): the shell's answer, or False with a description
        of why it could not be reached
    """
    path = socket_path or get_socket_path()
    if not path.exists():
        return False, NOT_RUNNING

    request = encode_message({'command': command, 'args': list(args or [])})

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(REQUEST_TIMEOUT)
            sock.connect(str(path))
            sock.sendall(request)
            line = read_line(sock)
    except socket.timeout:
        return False, f"Queue Minion did not answer within {REQUEST_TIMEOUT:g}s"
    except (ConnectionRefusedError, FileNotFoundError):
        # Socket file left behind by a shell that exited uncleanly
        return False, NOT_RUNNING
    except OSError as e:
        return False, f"Failed to send command: {e}"

    if not line.strip():
        return False, "No response from Queue Minion"

    try:
        return decode_response(line)
    except ProtocolError as e:
        return False, f"Invalid response from Queue Minion: {e}"
