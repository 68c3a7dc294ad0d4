"""
Unified output system using Loguru.
Replaces print() statements and stdlib logging with dual output (console + file).
"""

from pathlib import Path

from loguru import logger

from .console import get_console

_LEVEL_STYLES = {
    "debug": "cyan",
    "info": "white",
    "warning": "yellow",
    "error": "red",
}


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Configure loguru for file-only logging (the shell handles console display).

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to file AND prints to the console.

    Use this instead of print() for user-facing messages that should also be logged.
    Console output goes to the calling thread's console (see ``use_console``).

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    get_console().print(message, style=_LEVEL_STYLES.get(level, "white"), markup=False)
