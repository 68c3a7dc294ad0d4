"""
Queue command handlers for Queue Minion.

Handles: create-queue, add-files, list, show, shuffle, transpose, remove, discard

Handlers raise QueueError subclasses for bad input; the router reports them.
"""

from typing import List, Tuple

from queue_minion.context import AppContext
from queue_minion.core.console import get_console
from queue_minion.core.output import log
from queue_minion.domain import library, queues
from queue_minion.domain.queues import Direction, Queue
from queue_minion import ui
from queue_minion.utils.parsers import split_track_and_direction


def queue_from_args(ctx: AppContext, args: List[str]) -> Queue:
    """The queue named by all of ``args``, or the selection prompt's pick."""
    if args:
        return ctx.selection.find_queue(" ".join(args))
    return ctx.selection.resolve_queue()


def split_queue_args(ctx: AppContext, args: List[str]) -> Tuple[Queue, List[str]]:
    """
    Take a leading queue name off ``args``.

    With two or more arguments the first one must name a queue. A lone
    argument that is not a queue name is left over and the queue is
    resolved through the selection service.
    """
    if len(args) >= 2:
        return ctx.selection.find_queue(args[0]), args[1:]
    if args:
        queue = ctx.store.find_by_name(args[0])
        if queue is not None:
            return queue, args[1:]
    return ctx.selection.resolve_queue(), args


def handle_create_queue_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle create-queue command.

    Args:
        ctx: Application context
        args: Queue name words

    Returns:
        (updated_context, should_continue)
    """
    name = " ".join(args).strip()
    if not name:
        name = ctx.selection.chooser.choose_one("New queue name: ", [], None).strip()
    if not name:
        log("Usage: create-queue <name>", "warning")
        return ctx, True

    queue = queues.new_queue(ctx.store, name)
    log(f"✅ Created queue '{queue.name}'")
    return ctx, True


def handle_add_files_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle add-files command: add-files <queue> <paths...>

    Directories are searched recursively for supported audio files.
    Files whose tags cannot be read are reported and skipped.
    """
    queue, paths = split_queue_args(ctx, args)
    if not paths:
        log("Usage: add-files <queue> <file or directory>...", "warning")
        return ctx, True

    filenames = library.expand_paths(paths, ctx.config.queues.supported_formats)
    if not filenames:
        log("No audio files found", "warning")
        return ctx, True

    failed = queues.add_files(ctx.store, queue, filenames)
    added = len(filenames) - len(failed)
    log(f"✅ Added {added} tracks to '{queue.name}'")
    for filename in failed:
        log(f"Could not read {filename}", "warning")
    return ctx, True


def handle_list_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle list command: one line per queue."""
    with ctx.store.lock:
        text = ui.render_queue_list(list(ctx.store.queues), ctx.player.linked_queue_id)
    get_console().print(text)
    return ctx, True


def handle_show_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle show command: show [queue]"""
    queue = queue_from_args(ctx, args)
    linked = ctx.player.linked_queue_id == queue.id
    get_console().print(ui.render_queue(queue, linked))
    return ctx, True


def handle_shuffle_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle shuffle command: shuffle [queue]"""
    queue = queue_from_args(ctx, args)
    queues.shuffle(ctx.store, queue)
    log(f"🔀 Shuffled '{queue.name}'")
    return ctx, True


def handle_transpose_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle transpose command: transpose [queue] [track] [forward|backward]

    The track is given by label or 1-based position; anything left out is
    asked for.
    """
    args, direction_word = split_track_and_direction(args)
    queue, rest = split_queue_args(ctx, args)

    if rest:
        track = ctx.selection.find_track(queue, " ".join(rest))
    else:
        track = ctx.selection.resolve_track(queue, "Move track: ")

    if direction_word is None:
        direction_word = ctx.selection.chooser.choose_one(
            "Direction: ", [d.value for d in Direction], Direction.FORWARD.value
        )
    try:
        direction = Direction(direction_word.strip().lower())
    except ValueError:
        log(f"Unknown direction '{direction_word}' (use forward or backward)", "warning")
        return ctx, True

    queues.transpose(ctx.store, queue, track, direction)
    log(f"↕ Moved {library.format_track(track)} {direction.value}")
    return ctx, True


def handle_remove_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle remove command: remove [queue] [track]"""
    queue, rest = split_queue_args(ctx, args)
    if rest:
        track = ctx.selection.find_track(queue, " ".join(rest))
    else:
        track = ctx.selection.resolve_track(queue, "Remove track: ")

    queues.remove_track(ctx.store, queue, track)
    log(f"➖ Removed {library.format_track(track)} from '{queue.name}'")
    return ctx, True


def handle_discard_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle discard command: discard [queue]"""
    queue = queue_from_args(ctx, args)
    if queues.discard(ctx.store, queue):
        if ctx.player.linked_queue_id == queue.id:
            ctx.player.linked_queue_id = None
        log(f"🗑 Discarded queue '{queue.name}'")
    return ctx, True
