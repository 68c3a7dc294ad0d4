"""Shared fixtures for Queue Minion tests."""

from typing import Callable, Optional
from unittest.mock import MagicMock

import pytest
from loguru import logger

from queue_minion.domain.library.models import Track
from queue_minion.domain.queues import MemoryQueueRepository, QueueStore


@pytest.fixture
def repository() -> MemoryQueueRepository:
    return MemoryQueueRepository()


@pytest.fixture
def store(repository: MemoryQueueRepository) -> QueueStore:
    """Empty store backed by memory."""
    store = QueueStore(repository)
    store.load()
    return store


@pytest.fixture
def player() -> MagicMock:
    """Player double that always starts playback."""
    player = MagicMock()
    player.start_playback.return_value = True
    player.is_playing.return_value = False
    player.track_finished.return_value = False
    player.linked_queue_id = None
    return player


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Build a Track with artist/title derived from the file name."""

    def _make(filename: str, artist: Optional[str] = "Artist", title: Optional[str] = None, **kwargs) -> Track:
        return Track(
            filename=filename,
            artist=artist,
            title=title if title is not None else filename.rsplit(".", 1)[0],
            **kwargs,
        )

    return _make


@pytest.fixture
def log_messages():
    """Capture loguru messages (level name, text) emitted during a test."""
    messages = []
    handler_id = logger.add(
        lambda message: messages.append(
            (message.record["level"].name, message.record["message"])
        ),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
