"""Wire format of the control socket.

One connection carries one exchange: the client writes a request line
``{"command": str, "args": [str, ...]}`` and the server answers with a
response line ``{"success": bool, "message": str}``. Lines are UTF-8 JSON
terminated by a newline.
"""

import json
import socket
from typing import Any, Dict, List, Tuple

# Longest line either side accepts
MAX_LINE_BYTES = 1024 * 1024


class ProtocolError(ValueError):
    """Raised when a line on the control socket is not a valid message."""


def encode_message(message: Dict[str, Any]) -> bytes:
    return (json.dumps(message) + '\n').encode('utf-8')


def read_line(sock: socket.socket) -> bytes:
    """Read one newline-terminated line (the newline is kept if present)."""
    with sock.makefile('rb') as stream:
        return stream.readline(MAX_LINE_BYTES)


def _decode_object(line: bytes) -> Dict[str, Any]:
    try:
        data = json.loads(line.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(str(e)) from e
    if not isinstance(data, dict):
        raise ProtocolError("expected a JSON object")
    return data


def decode_request(line: bytes) -> Tuple[str, List[str]]:
    data = _decode_object(line)
    command = data.get('command')
    args = data.get('args', [])
    if not isinstance(command, str) or not isinstance(args, list):
        raise ProtocolError("request needs a command string and an args list")
    return command, [str(arg) for arg in args]


def decode_response(line: bytes) -> Tuple[bool, str]:
    data = _decode_object(line)
    return bool(data.get('success', False)), str(data.get('message', ''))
