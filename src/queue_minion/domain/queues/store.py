"""
Queue store - the owner of every Queue in the process.

One instance is created at startup, loaded from its repository, and passed
explicitly to everything that needs it (via AppContext). Mutations go
through ``commit()``, which saves and then tells listeners the queue changed.
"""

import threading
from typing import Callable, List, Optional

from loguru import logger

from .models import Queue
from .persistence import QueueRepository

QueueListener = Callable[[Queue], None]


class QueueStore:
    """Process-wide registry of queues with load/save lifecycle.

    Queue names are not unique; lookups by name return the first match in
    store order. ``lock`` serialises writers when several threads (shell,
    IPC server, auto-advance watcher) share the store.
    """

    def __init__(self, repository: QueueRepository):
        self.repository = repository
        self.queues: List[Queue] = []
        self.lock = threading.RLock()
        self._listeners: List[QueueListener] = []

    # ===================================================================
    # Lifecycle
    # ===================================================================

    def load(self) -> None:
        """Replace in-memory state with the repository contents."""
        with self.lock:
            self.queues = self.repository.load_queues()
        logger.info(f"Loaded {len(self.queues)} queues")

    def save(self) -> None:
        """Write every queue to the repository."""
        with self.lock:
            self.repository.save_queues(self.queues)

    def close(self) -> None:
        """Final save before process exit."""
        self.save()
        logger.info("Queue store closed")

    # ===================================================================
    # Registry
    # ===================================================================

    def add(self, queue: Queue) -> None:
        with self.lock:
            self.queues.append(queue)

    def remove(self, queue: Queue) -> bool:
        """Remove ``queue`` (by identity). Returns False if it was not stored."""
        with self.lock:
            for i, candidate in enumerate(self.queues):
                if candidate is queue:
                    del self.queues[i]
                    return True
        return False

    def get(self, queue_id: Optional[str]) -> Optional[Queue]:
        """Look a queue up by its stable id."""
        if queue_id is None:
            return None
        for queue in self.queues:
            if queue.id == queue_id:
                return queue
        return None

    def find_by_name(self, name: str) -> Optional[Queue]:
        """First queue called ``name``, or None."""
        for queue in self.queues:
            if queue.name == name:
                return queue
        return None

    def names(self) -> List[str]:
        """Queue names in store order (may contain duplicates)."""
        return [queue.name for queue in self.queues]

    # ===================================================================
    # Change notification
    # ===================================================================

    def subscribe(self, listener: QueueListener) -> None:
        """Register a callback fired with the affected queue after each change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: QueueListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def commit(self, queue: Queue) -> None:
        """Persist the store and notify listeners that ``queue`` changed."""
        self.save()
        for listener in list(self._listeners):
            try:
                listener(queue)
            except Exception:
                logger.exception(f"Queue listener failed for {queue!r}")
