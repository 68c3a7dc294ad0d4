"""IPC server for receiving commands from external processes."""

import io
import socket
import threading
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from loguru import logger
from rich.console import Console

from queue_minion import router
from queue_minion.context import AppContext
from queue_minion.core.console import use_console
from queue_minion.domain.queues import NonInteractiveChooser, QueueError

from .client import REQUEST_TIMEOUT, get_socket_path
from .protocol import ProtocolError, decode_request, encode_message, read_line

CommandHandler = Callable[[str, List[str]], Tuple[bool, str]]


class IPCServer:
    """Unix socket server for IPC commands.

    Runs in a background thread and answers one JSON line per connection.
    Each request is passed to ``handler`` on the server thread; the handler
    is responsible for locking shared state.
    """

    def __init__(self, handler: CommandHandler, socket_path: Optional[Path] = None):
        """
        Initialize IPC server.

        Args:
            handler: Called with (command, args), returns (success, message)
            socket_path: Override the control socket location
        """
        self.handler = handler
        self.socket_path = socket_path or get_socket_path()
        self.server_socket: Optional[socket.socket] = None
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the IPC server in a background thread."""
        if self.running:
            return

        self.socket_path.parent.mkdir(parents=True, exist_ok=True)

        # Remove stale socket if it exists
        if self.socket_path.exists():
            try:
                self.socket_path.unlink()
            except OSError:
                logger.warning(f"Could not remove stale socket {self.socket_path}")

        # Bind before returning so clients can connect as soon as start() does
        self.server_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self.server_socket.bind(str(self.socket_path))
        self.server_socket.listen(5)
        self.server_socket.settimeout(1.0)  # Poll every second

        self.running = True
        self.thread = threading.Thread(target=self._run_server, daemon=True, name="ipc-server")
        self.thread.start()
        logger.info(f"IPC server listening on {self.socket_path}")

    def stop(self) -> None:
        """Stop the IPC server and cleanup."""
        self.running = False

        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=2.0)

        if self.server_socket:
            try:
                self.server_socket.close()
            except OSError:
                logger.debug("IPC socket already closed")
            self.server_socket = None

        if self.socket_path.exists():
            try:
                self.socket_path.unlink()
            except OSError:
                logger.debug(f"Could not remove socket {self.socket_path}")

    def _run_server(self) -> None:
        """Run the Unix socket server loop."""
        while self.running:
            try:
                client_socket, _ = self.server_socket.accept()
                # Sequential processing keeps commands in arrival order
                self._handle_client(client_socket)
            except socket.timeout:
                continue
            except OSError as e:
                if self.running:
                    logger.error(f"Error accepting connection: {e}")

    def _handle_client(self, client_socket: socket.socket) -> None:
        """
        Handle a client connection.

        Args:
            client_socket: Connected client socket
        """
        try:
            client_socket.settimeout(REQUEST_TIMEOUT)
            line = read_line(client_socket)
            if not line.strip():
                return

            try:
                command, args = decode_request(line)
            except ProtocolError as e:
                success, message = False, f"Invalid request: {e}"
            else:
                success, message = self.handler(command, args)

            client_socket.sendall(encode_message({'success': success, 'message': message}))

        except OSError as e:
            logger.warning(f"IPC client connection failed: {e}")
        finally:
            client_socket.close()


def process_ipc_command(ctx: AppContext, command: str, args: List[str]) -> Tuple[bool, str]:
    """
    Run one IPC command against the shared context.

    The whole command runs under the store lock, selections never prompt
    (a missing argument is an error unless a default exists), and anything
    the command prints is collected and returned as the message.

    Returns:
        (success, message) tuple
    """
    if command in ('quit', 'exit'):
        return False, "quit is only available in the interactive shell"
    if command not in router.COMMAND_NAMES:
        return False, f"Unknown command: '{command}'"

    ipc_ctx = ctx.with_chooser(NonInteractiveChooser())
    buffer = io.StringIO()
    capture = Console(file=buffer, width=100, color_system=None, emoji=True)

    try:
        with ctx.store.lock, use_console(capture):
            # Remote callers always name the queue first; never guess another one
            if command in router.QUEUE_ARGUMENT_COMMANDS and args:
                ipc_ctx.selection.find_queue(args[0])
            router.dispatch(ipc_ctx, command, args)
    except QueueError as e:
        logger.info(f"IPC command '{command}' failed: {e}")
        return False, str(e)
    except Exception as e:
        logger.exception(f"IPC command '{command}' crashed")
        return False, f"Error processing command: {e}"

    output = buffer.getvalue().rstrip()
    args_str = ' '.join(args)
    return True, output or f"Executed: {command} {args_str}".strip()
