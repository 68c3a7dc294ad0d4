"""
Helpers shared by the interactive shell: auto-advance and cleanup.
"""

import threading

from loguru import logger

from queue_minion.context import AppContext
from queue_minion.core.output import log
from queue_minion.domain import library, queues

# How often the watcher asks the player whether the track ended (seconds)
AUTO_ADVANCE_INTERVAL = 1.0


def check_and_handle_track_completion(ctx: AppContext) -> bool:
    """Play the next entry of the linked queue if the current track has ended.

    At the end of the queue playback stops; the queue does not wrap.

    Args:
        ctx: Application context

    Returns:
        True if a new track was started
    """
    if not ctx.player.track_finished():
        return False

    with ctx.store.lock:
        # A command may have started another track before we got the lock
        if not ctx.player.track_finished():
            return False

        queue = ctx.selection.linked_queue()
        if queue is None:
            # Queue was discarded while its track played
            ctx.player.stop()
            return False

        try:
            track = queues.play_next(ctx.store, queue, ctx.player)
        except queues.NoNextTrackError:
            log(f"End of queue '{queue.name}'")
            ctx.player.stop()
            return False

    log(f"⏭ Now playing: {library.format_track(track)}")
    return True


def start_auto_advance(ctx: AppContext, stop_event: threading.Event) -> threading.Thread:
    """Run check_and_handle_track_completion every second until ``stop_event`` is set."""

    def watch() -> None:
        while not stop_event.wait(AUTO_ADVANCE_INTERVAL):
            try:
                check_and_handle_track_completion(ctx)
            except Exception:
                logger.exception("Auto-advance check failed")

    thread = threading.Thread(target=watch, daemon=True, name="auto-advance")
    thread.start()
    return thread


def cleanup_safe(name: str, action) -> None:
    """Run a shutdown step, logging instead of raising so later steps still run."""
    try:
        action()
    except Exception:
        logger.exception(f"Error during {name} cleanup")
