"""
Queue and track selection.

Resolves a queue or a track through a pluggable chooser: an interactive
prompt in the shell, a fixed answer in tests.
"""

from typing import Dict, List, Optional, Protocol, Sequence, Set

from queue_minion.domain.library.metadata import format_track
from queue_minion.domain.library.models import Track
from queue_minion.domain.playback.player import Player

from . import operations
from .exceptions import (
    EmptyQueueError,
    QueueNotFoundError,
    SelectionError,
    TrackNotFoundError,
)
from .models import Queue
from .store import QueueStore


class Chooser(Protocol):
    """Picks one of ``candidates``; with no candidates, returns free text."""

    def choose_one(
        self, prompt: str, candidates: Sequence[str], default: Optional[str] = None
    ) -> str: ...


class NonInteractiveChooser:
    """Chooser for callers that cannot prompt (IPC requests).

    Accepts the suggested default and refuses everything else, so a command
    without enough arguments fails instead of blocking.
    """

    def choose_one(
        self, prompt: str, candidates: Sequence[str], default: Optional[str] = None
    ) -> str:
        if default is not None:
            return default
        what = prompt.strip().rstrip(":").strip() or "A choice"
        raise SelectionError(f"{what} must be given as an argument")


def track_labels(queue: Queue) -> List[str]:
    """Human-readable label per entry, made unique with a ``<n>`` suffix.

    A suffix never repeats a label some other entry renders to, so every
    label resolves to exactly one entry.
    """
    rendered = [format_track(track) for track in queue.tracks]
    taken = set(rendered)
    used: Set[str] = set()
    next_suffix: Dict[str, int] = {}
    labels = []
    for label in rendered:
        if label in used:
            n = next_suffix.get(label, 2)
            while f"{label} <{n}>" in taken or f"{label} <{n}>" in used:
                n += 1
            next_suffix[label] = n + 1
            label = f"{label} <{n}>"
        used.add(label)
        labels.append(label)
    return labels


class SelectionService:
    """Resolves queues and tracks by name."""

    def __init__(self, store: QueueStore, chooser: Chooser, player: Optional[Player] = None):
        self.store = store
        self.chooser = chooser
        self.player = player

    def linked_queue(self) -> Optional[Queue]:
        """The queue currently linked to playback, if it still exists."""
        if self.player is None:
            return None
        return self.store.get(self.player.linked_queue_id)

    def resolve_queue(self, prompt: str = "Queue: ") -> Queue:
        """
        Resolve the queue to act on.

        - one queue: returned without asking
        - no queues: asks for a name and creates the queue
        - several: asks, suggesting the queue linked to playback
        """
        queues = self.store.queues
        if len(queues) == 1:
            return queues[0]

        if not queues:
            name = self.chooser.choose_one("New queue name: ", [], None).strip()
            if not name:
                raise SelectionError("A queue name is required")
            return operations.new_queue(self.store, name)

        linked = self.linked_queue()
        default = linked.name if linked is not None else None
        choice = self.chooser.choose_one(prompt, self.store.names(), default)
        return self.find_queue(choice)

    def find_queue(self, name: str) -> Queue:
        """First queue called ``name``."""
        queue = self.store.find_by_name(name)
        if queue is None:
            raise QueueNotFoundError(name)
        return queue

    def resolve_track(self, queue: Queue, prompt: str = "Track: ") -> Track:
        """Ask for one of the queue's tracks by its label."""
        if not queue.tracks:
            raise EmptyQueueError(queue.name)

        labels = track_labels(queue)
        default = None
        current_index = queue.current_index()
        if current_index is not None:
            default = labels[current_index]

        choice = self.chooser.choose_one(prompt, labels, default)
        return self.find_track(queue, choice)

    def find_track(self, queue: Queue, label: str) -> Track:
        """Resolve a track label, or a 1-based position such as ``"3"``."""
        labels = track_labels(queue)
        if label in labels:
            return queue.tracks[labels.index(label)]

        if label.isdigit():
            position = int(label)
            if 1 <= position <= len(queue.tracks):
                return queue.tracks[position - 1]

        raise TrackNotFoundError(queue.name, label)
