"""Queue-specific exceptions for error handling.

All of these are reported to the caller; none leaves a queue half-modified.
"""


class QueueError(Exception):
    """Base exception for queue operations."""

    pass


class BoundaryError(QueueError):
    """Raised when a track would be transposed past the first/last entry."""

    def __init__(self, direction: str, message: str = None):
        self.direction = direction
        super().__init__(message or f"Track is already at the {direction} boundary")


class EmptyQueueError(QueueError):
    """Raised when an operation needs at least one track."""

    def __init__(self, queue_name: str):
        self.queue_name = queue_name
        super().__init__(f"Queue '{queue_name}' is empty")


class NoNextTrackError(QueueError):
    """Raised when there is no track after the current one."""

    def __init__(self, queue_name: str, message: str = None):
        self.queue_name = queue_name
        super().__init__(message or f"No next track in queue '{queue_name}'")


class QueueNotFoundError(QueueError):
    """Raised when no queue has the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No queue named '{name}'")


class TrackNotFoundError(QueueError):
    """Raised when a track label or position does not resolve."""

    def __init__(self, queue_name: str, label: str):
        self.queue_name = queue_name
        self.label = label
        super().__init__(f"No track '{label}' in queue '{queue_name}'")


class SelectionError(QueueError):
    """Raised when a queue or track choice is cancelled or cannot be asked for."""

    pass
