"""
Terminal rendering for Queue Minion using Rich
"""

import sys
from typing import List, Optional

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from queue_minion.core.console import get_console
from queue_minion.domain.queues import Queue, QueueStore, track_labels


def supports_emoji() -> bool:
    """Check if terminal supports emoji."""
    return sys.platform != "win32"


# Icons with ASCII fallbacks
ICONS = {
    "current": "▶" if supports_emoji() else ">",
    "queue": "📋" if supports_emoji() else "#",
    "linked": "🔊" if supports_emoji() else "*",
}


def render_queue(queue: Queue, linked: bool = False) -> Panel:
    """
    Render a queue as a numbered track list with the current entry marked.

    Args:
        queue: Queue to render
        linked: Whether the queue is the one linked to playback

    Returns:
        Rich Panel ready to print
    """
    lines: List[Text] = []
    current_index = queue.current_index()

    if not queue.tracks:
        lines.append(Text("(empty)", style="dim"))

    for i, label in enumerate(track_labels(queue)):
        if i == current_index:
            lines.append(Text(f"{ICONS['current']} {i + 1:>3}. {label}", style="bold green"))
        else:
            lines.append(Text(f"  {i + 1:>3}. {label}"))

    title = f"{ICONS['queue']} {queue.name}"
    if linked:
        title += f" {ICONS['linked']}"

    return Panel(
        Group(*lines),
        border_style="bright_cyan",
        title=title,
        title_align="left",
        subtitle=f"{len(queue.tracks)} tracks",
        subtitle_align="right",
    )


def render_queue_list(queues: List[Queue], linked_id: Optional[str] = None) -> Text:
    """One line per queue: name, size and the current track position."""
    if not queues:
        return Text("No queues yet. Create one with: create-queue <name>", style="dim")

    text = Text()
    for i, queue in enumerate(queues):
        current_index = queue.current_index()
        position = f"at {current_index + 1}" if current_index is not None else "idle"
        marker = ICONS["linked"] if queue.id == linked_id else " "
        if i:
            text.append("\n")
        text.append(f"{marker} {queue.name}", style="bold")
        text.append(f"  {len(queue.tracks)} tracks, {position}", style="cyan")
    return text


class QueueView:
    """
    Store listener that redraws a queue after every change.

    The notification only carries the changed queue; the view looks it up
    again by id so a discarded queue is reported as gone rather than drawn.
    """

    def __init__(self, store: QueueStore, player=None, console=None):
        self.store = store
        self.player = player
        # Bound at creation so redraws reach the shell whichever thread commits
        self.console = console or get_console()

    def __call__(self, queue: Queue) -> None:
        console = self.console
        live = self.store.get(queue.id)
        if live is None:
            console.print(f"Queue '{queue.name}' discarded", style="dim")
            return

        linked = self.player is not None and self.player.linked_queue_id == live.id
        console.print(render_queue(live, linked))
