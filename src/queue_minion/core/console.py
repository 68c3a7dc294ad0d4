"""Centralized Rich Console management.

A single Console instance shared by the shell, the queue view and
``core.output.log``. A thread can temporarily swap in its own console
(the IPC server does this to collect a command's output as text).
"""

import threading
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console

_console: Console | None = None
_thread_local = threading.local()


def get_console() -> Console:
    """Get the console for the calling thread.

    Returns:
        Console: The thread's override if one is active, else the global Rich Console
    """
    override = getattr(_thread_local, "console", None)
    if override is not None:
        return override

    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Replace the global console (e.g. a no-color console from config)."""
    global _console
    _console = console


@contextmanager
def use_console(console: Console) -> Iterator[Console]:
    """Route this thread's output to ``console`` for the duration of the block."""
    previous = getattr(_thread_local, "console", None)
    _thread_local.console = console
    try:
        yield console
    finally:
        _thread_local.console = previous


def safe_print(message: str, style: str | None = None) -> None:
    """Print using Rich Console with optional styling.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
    """
    console = get_console()
    if style:
        console.print(message, style=style)
    else:
        console.print(message)
