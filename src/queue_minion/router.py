"""
Command routing for Queue Minion.

Routes user commands to appropriate handler functions.
"""

from typing import List, Tuple

from queue_minion.context import AppContext
from queue_minion.core.output import log
from queue_minion.domain.queues import QueueError

# Import command handlers
from queue_minion.commands import playback
from queue_minion.commands import queue

# Every name dispatch() accepts
COMMAND_NAMES = {
    "quit", "exit", "help", "create-queue", "new", "add-files", "list", "ls", "show",
    "shuffle", "transpose", "remove", "discard", "play", "next", "skip", "pause", "stop",
}

# Commands whose first argument is a queue name
QUEUE_ARGUMENT_COMMANDS = {
    "show", "play", "next", "shuffle", "transpose", "discard", "add-files", "remove",
}


def print_help() -> None:
    """Display help information for available commands."""
    help_text = """
Queue Minion - Named Play Queues

Queue commands:
  list                                  List all queues
  show [queue]                          Show the tracks of a queue
  create-queue <name>                   Create an empty queue
  add-files <queue> <path>...           Add files or directories (recursive)
  shuffle [queue]                       Shuffle, keeping the current track first
  transpose [queue] [track] [forward|backward]
                                        Swap a track with its neighbour
  remove [queue] [track]                Remove a track
  discard [queue]                       Discard a queue

Playback commands:
  play [queue] [track]                  Play a queue (from the first track by default)
  next [queue]                          Play the next track
  pause                                 Pause or resume
  stop                                  Stop playback

Other:
  help                                  Show this help
  quit / exit                           Exit Queue Minion

Tracks are given by label or by position (1 = first). Quote names with
spaces: play "Road Trip" 3. Anything left out is asked for.
    """.strip()
    log(help_text)


def dispatch(ctx: AppContext, command: str, args: List[str]) -> Tuple[AppContext, bool]:
    """
    Run a single command, letting QueueError propagate.

    Args:
        ctx: Application context
        command: Command name
        args: Command arguments

    Returns:
        (updated_context, should_continue) - Updated context and whether to continue
    """
    if command in ['quit', 'exit']:
        log("Goodbye!")
        return ctx, False

    elif command == 'help':
        print_help()
        return ctx, True

    elif command in ['create-queue', 'new']:
        return queue.handle_create_queue_command(ctx, args)

    elif command == 'add-files':
        return queue.handle_add_files_command(ctx, args)

    elif command in ['list', 'ls']:
        return queue.handle_list_command(ctx, args)

    elif command == 'show':
        return queue.handle_show_command(ctx, args)

    elif command == 'shuffle':
        return queue.handle_shuffle_command(ctx, args)

    elif command == 'transpose':
        return queue.handle_transpose_command(ctx, args)

    elif command == 'remove':
        return queue.handle_remove_command(ctx, args)

    elif command == 'discard':
        return queue.handle_discard_command(ctx, args)

    elif command == 'play':
        return playback.handle_play_command(ctx, args)

    elif command in ['next', 'skip']:
        return playback.handle_next_command(ctx, args)

    elif command == 'pause':
        return playback.handle_pause_command(ctx)

    elif command == 'stop':
        return playback.handle_stop_command(ctx)

    elif command == '':
        return ctx, True

    else:
        log(f"Unknown command: '{command}'. Type 'help' for available commands.", "warning")
        return ctx, True


def handle_command(ctx: AppContext, command: str, args: List[str]) -> Tuple[AppContext, bool]:
    """
    Handle a single command with explicit state passing.

    Queue errors (unknown names, boundaries, empty queues) are reported as
    warnings and the shell keeps running.

    Returns:
        (updated_context, should_continue)
    """
    try:
        return dispatch(ctx, command, args)
    except QueueError as e:
        log(f"❌ {e}", "warning")
        return ctx, True
