"""IPC (Inter-Process Communication) for Queue Minion.

Lets `queue-minion <command>` in another terminal drive the running shell.
"""

from .client import get_socket_path, send_command

__all__ = ['get_socket_path', 'send_command']
