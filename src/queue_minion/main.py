"""
Queue Minion - Main entry point and interactive loop
"""

import sys
import threading
from pathlib import Path
from typing import Optional

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from queue_minion import helpers
from queue_minion import router
from queue_minion import ui
from queue_minion.completers import PROMPT_STYLE, PromptChooser, QueueMinionCompleter
from queue_minion.context import AppContext
from queue_minion.core import config
from queue_minion.core.console import get_console, set_console
from queue_minion.core.output import log, setup_loguru
from queue_minion.domain.playback import MpvPlayer
from queue_minion.domain.queues import QueueStore, SqliteQueueRepository
from queue_minion.ipc.server import IPCServer, process_ipc_command
from queue_minion.utils import parsers


def build_context(cfg: config.Config) -> AppContext:
    """Open the queue store and player described by ``cfg``.

    mpv failing to start is not fatal: queues can still be edited, and
    play commands set the current track without audio.
    """
    if not cfg.ui.use_colors:
        set_console(Console(no_color=True))
    console = get_console()

    store = QueueStore(SqliteQueueRepository(config.get_database_path(cfg)))
    store.load()

    player = MpvPlayer(cfg.player)
    if not player.start():
        log("mpv is not available; queues work but nothing will be heard", "warning")

    ctx = AppContext.create(cfg, store, player, PromptChooser(), console)

    if cfg.ui.show_queue_after_change:
        store.subscribe(ui.QueueView(store, player, console))

    return ctx


def start_ipc(ctx: AppContext) -> Optional[IPCServer]:
    """Start the control socket used by `queue-minion <command>`."""
    if not ctx.config.ipc.enabled:
        return None

    server = IPCServer(lambda command, args: process_ipc_command(ctx, command, args))
    try:
        server.start()
    except OSError as e:
        log(f"Could not start IPC server: {e}", "warning")
        return None
    return server


def interactive_mode(config_path: Optional[Path] = None) -> None:
    """Run the interactive shell until quit/exit or end of input."""
    cfg = config.load_config(config_path)
    config.ensure_directories()
    setup_loguru(config.get_log_file_path(cfg), cfg.logging.level)

    ctx = build_context(cfg)
    ipc_server = start_ipc(ctx)

    stop_event = threading.Event()
    if cfg.player.auto_advance:
        helpers.start_auto_advance(ctx, stop_event)

    console = ctx.console or get_console()
    console.print("[bold green]Welcome to Queue Minion![/bold green]")
    console.print("Type 'help' for available commands, or 'quit' to exit.")
    console.print()

    session = PromptSession(
        history=FileHistory(str(config.get_data_dir() / "history")),
        completer=QueueMinionCompleter(ctx.store),
        style=PROMPT_STYLE,
        complete_while_typing=True,
    )

    try:
        should_continue = True
        # Background threads print above the prompt instead of through it
        with patch_stdout(raw=True):
            while should_continue:
                try:
                    user_input = session.prompt("queue-minion> ").strip()
                    command, args = parsers.parse_command(user_input)
                    ctx, should_continue = router.handle_command(ctx, command, args)

                except parsers.CommandParseError as e:
                    log(f"❌ {e}", "warning")
                except KeyboardInterrupt:
                    console.print(
                        "\n[yellow]Use 'quit' or 'exit' to leave gracefully.[/yellow]"
                    )
                except EOFError:
                    console.print("\n[green]Goodbye![/green]")
                    break

    except Exception as e:
        logger.exception("Unexpected error in interactive loop")
        console.print(f"[red]An unexpected error occurred: {e}[/red]")
        sys.exit(1)
    finally:
        stop_event.set()
        if ipc_server is not None:
            helpers.cleanup_safe("IPC server", ipc_server.stop)
        helpers.cleanup_safe("queue store", ctx.store.close)
        helpers.cleanup_safe("player", ctx.player.shutdown)
