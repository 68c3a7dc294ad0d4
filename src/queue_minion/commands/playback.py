"""
Playback command handlers for Queue Minion.

Handles: play, next, pause, stop
"""

from typing import List, Tuple

from queue_minion.commands.queue import queue_from_args, split_queue_args
from queue_minion.context import AppContext
from queue_minion.core.output import log
from queue_minion.domain import library, queues


def handle_play_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle play command: play [queue] [track]

    Without a track the queue plays from its first entry.

    Args:
        ctx: Application context
        args: Optional queue name followed by a track label or position

    Returns:
        (updated_context, should_continue)
    """
    queue, rest = split_queue_args(ctx, args)
    track = ctx.selection.find_track(queue, " ".join(rest)) if rest else None

    track = queues.play(ctx.store, queue, ctx.player, track)
    log(f"🎵 Now playing: {library.format_track(track)}")
    return ctx, True


def handle_next_command(ctx: AppContext, args: List[str]) -> Tuple[AppContext, bool]:
    """Handle next command: next [queue]

    Without a queue name, the queue linked to playback is used when there
    is one.
    """
    if args:
        queue = queue_from_args(ctx, args)
    else:
        queue = ctx.selection.linked_queue() or ctx.selection.resolve_queue()

    track = queues.play_next(ctx.store, queue, ctx.player)
    log(f"⏭ Now playing: {library.format_track(track)}")
    return ctx, True


def handle_pause_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    """Handle pause command (toggles pause/resume)."""
    if ctx.player.toggle_pause():
        if ctx.player.is_playing():
            log("▶ Resumed")
        else:
            log("⏸ Paused")
    else:
        log("No music is currently playing", "warning")
    return ctx, True


def handle_stop_command(ctx: AppContext) -> Tuple[AppContext, bool]:
    """Handle stop command.

    The queue keeps its current track; ``next`` continues from there.
    """
    if ctx.player.stop():
        log("⏹ Stopped playback")
    else:
        log("No music is currently playing", "warning")
    return ctx, True
