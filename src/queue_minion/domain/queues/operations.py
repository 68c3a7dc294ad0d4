"""
Queue operations for Queue Minion
Functional approach with explicit store passing

Every mutating operation validates first, mutates second and finishes with
``store.commit(queue)`` so the change is saved and views are refreshed.
A failed operation raises before touching the queue.
"""

import random
from typing import Iterable, List, Optional

from loguru import logger

from queue_minion.domain.library.metadata import (
    Extractor,
    extract_metadata,
    track_from_file,
)
from queue_minion.domain.library.models import Track
from queue_minion.domain.playback.player import Player

from .exceptions import (
    BoundaryError,
    EmptyQueueError,
    NoNextTrackError,
    TrackNotFoundError,
)
from .models import Direction, Queue
from .store import QueueStore


def new_queue(store: QueueStore, name: str) -> Queue:
    """
    Create an empty queue and register it in the store.

    Names are not checked for uniqueness; a duplicate is only logged since
    name-based lookups will then resolve to the older queue.
    """
    with store.lock:
        if store.find_by_name(name) is not None:
            logger.warning(f"Queue name '{name}' is already in use; lookups will match the first one")

        queue = Queue(name=name)
        store.add(queue)
        logger.info(f"Created queue '{name}' ({queue.id})")
        store.commit(queue)
    return queue


def add_tracks(
    store: QueueStore, queue: Queue, tracks: Iterable[Optional[Track]]
) -> int:
    """
    Append tracks to the end of a queue in the given order.

    ``None`` entries (files whose metadata could not be read) are skipped.

    Returns:
        Number of tracks appended
    """
    valid = [track for track in tracks if track is not None]
    with store.lock:
        queue.tracks.extend(valid)
        logger.info(f"Added {len(valid)} tracks to '{queue.name}'")
        store.commit(queue)
    return len(valid)


def add_files(
    store: QueueStore,
    queue: Queue,
    filenames: Iterable[str],
    extract: Extractor = extract_metadata,
) -> List[str]:
    """
    Build tracks for ``filenames`` and append them to a queue.

    Returns:
        The filenames that produced no track (extraction failed), in order
    """
    filenames = list(filenames)
    tracks = [track_from_file(filename, extract) for filename in filenames]
    failed = [f for f, track in zip(filenames, tracks) if track is None]
    for filename in failed:
        logger.warning(f"Skipping {filename}: no readable metadata")

    add_tracks(store, queue, tracks)
    return failed


def discard(store: QueueStore, queue: Queue) -> bool:
    """
    Remove a queue from the store.

    The queue object itself is left as it was, so holders of a reference
    still see its last state.

    Returns:
        True if the queue was removed, False if it was not in the store
    """
    with store.lock:
        removed = store.remove(queue)
        if removed:
            logger.info(f"Discarded queue '{queue.name}' ({queue.id})")
            store.commit(queue)
    return removed


def transpose(
    store: QueueStore, queue: Queue, track: Track, direction: Direction
) -> None:
    """
    Swap a track with its neighbour in ``direction``.

    Raises:
        TrackNotFoundError: If the track is not in the queue
        BoundaryError: If there is no neighbour in that direction
    """
    with store.lock:
        index = queue.index_of(track)
        if index is None:
            raise TrackNotFoundError(queue.name, str(track.filename))

        neighbour = index + direction.step
        if not 0 <= neighbour < len(queue.tracks):
            edge = "last" if direction is Direction.FORWARD else "first"
            raise BoundaryError(
                direction.value, f"Cannot move the {edge} track {direction.value}"
            )

        tracks = queue.tracks
        tracks[index], tracks[neighbour] = tracks[neighbour], tracks[index]
        store.commit(queue)


def shuffle(store: QueueStore, queue: Queue, rng: Optional[random.Random] = None) -> None:
    """
    Shuffle a queue, keeping the current track at the front.

    The current entry is taken out, the rest is Fisher-Yates shuffled
    (element i swapped with a uniform pick from i..n-1), and the current
    entry is put back first. With no current track everything is shuffled.

    Args:
        store: Queue store
        queue: Queue to shuffle
        rng: Random source (defaults to the ``random`` module)
    """
    rng = rng or random

    with store.lock:
        working = list(queue.tracks)
        current_index = queue.current_index()
        pinned = working.pop(current_index) if current_index is not None else None

        n = len(working)
        for i in range(n):
            j = rng.randint(i, n - 1)
            working[i], working[j] = working[j], working[i]

        if pinned is not None:
            working.insert(0, pinned)

        queue.tracks[:] = working
        store.commit(queue)


def next_track(queue: Queue) -> Optional[Track]:
    """
    Get the track after the current one.

    With duplicate entries, the successor of the first occurrence is used.

    Returns:
        Next track, or None when there is no current track or it is last
    """
    index = queue.current_index()
    if index is None or index + 1 >= len(queue.tracks):
        return None
    return queue.tracks[index + 1]


def play(
    store: QueueStore,
    queue: Queue,
    player: Player,
    track: Optional[Track] = None,
) -> Track:
    """
    Make a track current and start it in the player.

    Also records the queue as the one linked to playback, which selection
    prompts use as their default.

    Args:
        store: Queue store
        queue: Queue to play from
        player: Player to start
        track: Track to play (default: first track of the queue)

    Returns:
        The track that was started

    Raises:
        EmptyQueueError: If no track was given and the queue is empty
        TrackNotFoundError: If ``track`` is not in the queue
    """
    with store.lock:
        if track is None:
            if not queue.tracks:
                raise EmptyQueueError(queue.name)
            track = queue.tracks[0]
        elif queue.index_of(track) is None:
            raise TrackNotFoundError(queue.name, str(track.filename))

        queue.current = track
        if not player.start_playback(track.filename):
            logger.warning(f"Player did not start {track.filename}")
        player.linked_queue_id = queue.id

        logger.info(f"Playing {track.filename} from '{queue.name}'")
        store.commit(queue)
    return track


def play_next(store: QueueStore, queue: Queue, player: Player) -> Track:
    """
    Play the track after the current one.

    Whether to stop or wrap at the end is left to the caller.

    Raises:
        NoNextTrackError: If there is no current track or it is the last one
    """
    with store.lock:
        upcoming = next_track(queue)
        if upcoming is None:
            raise NoNextTrackError(queue.name)
        return play(store, queue, player, upcoming)


def remove_track(store: QueueStore, queue: Queue, track: Track) -> None:
    """
    Remove the first occurrence of a track from a queue.

    If that entry was current, the entry that takes its place becomes
    current; when none does, the queue goes back to having no current track.

    Raises:
        TrackNotFoundError: If the track is not in the queue
    """
    with store.lock:
        index = queue.index_of(track)
        if index is None:
            raise TrackNotFoundError(queue.name, str(track.filename))

        was_current = index == queue.current_index()
        del queue.tracks[index]

        if was_current:
            queue.current = queue.tracks[index] if index < len(queue.tracks) else None

        store.commit(queue)
