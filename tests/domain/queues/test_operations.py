"""
Tests for queue operations: create, add, transpose, shuffle, play, advance.
"""

import itertools
import random
from collections import Counter
from unittest.mock import MagicMock

import pytest

from queue_minion.domain.queues import (
    BoundaryError,
    Direction,
    EmptyQueueError,
    NoNextTrackError,
    Queue,
    QueueStore,
    TrackNotFoundError,
    add_files,
    add_tracks,
    discard,
    new_queue,
    next_track,
    play,
    play_next,
    remove_track,
    shuffle,
    transpose,
)


def identities(queue: Queue) -> list:
    return [id(track) for track in queue.tracks]


@pytest.fixture
def abc(store: QueueStore, make_track):
    """Queue 'Mix' holding tracks A, B, C."""
    queue = new_queue(store, "Mix")
    tracks = [make_track("a.mp3"), make_track("b.mp3"), make_track("c.mp3")]
    add_tracks(store, queue, tracks)
    return queue, tracks


class TestNewQueue:
    """Test creating queues."""

    def test_creates_empty_registered_queue(self, store: QueueStore, repository) -> None:
        queue = new_queue(store, "Rock")

        assert queue.name == "Rock"
        assert queue.tracks == []
        assert queue.current is None
        assert store.queues == [queue]
        assert repository.save_count == 1

    def test_duplicate_name_is_allowed_with_warning(self, store: QueueStore, log_messages) -> None:
        first = new_queue(store, "Rock")
        second = new_queue(store, "Rock")

        assert store.queues == [first, second]
        assert first.id != second.id
        assert store.find_by_name("Rock") is first
        assert any(level == "WARNING" and "Rock" in text for level, text in log_messages)

    def test_notifies_listeners(self, store: QueueStore) -> None:
        listener = MagicMock()
        store.subscribe(listener)

        queue = new_queue(store, "Jazz")

        listener.assert_called_once_with(queue)


class TestAddTracks:
    """Test appending tracks and files."""

    def test_appends_in_order_skipping_none(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        a, b = make_track("a.mp3"), make_track("b.mp3")

        added = add_tracks(store, queue, [a, None, b])

        assert added == 2
        assert queue.tracks == [a, b]

    def test_same_track_twice_gives_two_entries(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        a = make_track("a.mp3")

        add_tracks(store, queue, [a, a])

        assert len(queue.tracks) == 2
        assert queue.tracks[0] is queue.tracks[1]

    def test_add_files_reports_failures(self, store: QueueStore) -> None:
        queue = new_queue(store, "Mix")
        files = ["one.mp3", "broken.mp3", "two.mp3", "missing.mp3"]

        def extract(filename):
            if filename in ("broken.mp3", "missing.mp3"):
                return None
            return {"artist": "X", "title": filename}

        failed = add_files(store, queue, files, extract=extract)

        assert failed == ["broken.mp3", "missing.mp3"]
        assert len(queue.tracks) == len(files) - len(failed)
        assert [t.filename for t in queue.tracks] == ["one.mp3", "two.mp3"]

    def test_add_files_no_metadata_is_a_failure(self, store: QueueStore) -> None:
        queue = new_queue(store, "Mix")

        failed = add_files(store, queue, ["untagged.wav"], extract=lambda f: {})

        assert failed == ["untagged.wav"]
        assert queue.tracks == []

    def test_add_files_all_empty_tags_still_adds(self, store: QueueStore) -> None:
        queue = new_queue(store, "Mix")
        empty_tags = {"artist": None, "title": None, "album": None}

        failed = add_files(store, queue, ["untagged.wav"], extract=lambda f: empty_tags)

        assert failed == []
        assert queue.tracks[0].filename == "untagged.wav"
        assert queue.tracks[0].artist is None


class TestDiscard:
    """Test discarding queues."""

    def test_removes_from_store_without_touching_queue(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        queue.current = tracks[1]

        assert discard(store, queue) is True

        assert store.queues == []
        assert queue.tracks == tracks
        assert queue.current is tracks[1]

    def test_discarding_twice_returns_false(self, abc, store: QueueStore) -> None:
        queue, _ = abc
        discard(store, queue)

        assert discard(store, queue) is False


class TestTranspose:
    """Test swapping tracks with their neighbours."""

    def test_forward_then_backward_restores_order(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        before = identities(queue)

        transpose(store, queue, tracks[0], Direction.FORWARD)
        assert queue.tracks == [tracks[1], tracks[0], tracks[2]]

        transpose(store, queue, tracks[0], Direction.BACKWARD)
        assert identities(queue) == before

    def test_backward_at_first_raises_and_leaves_queue(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        before = identities(queue)

        with pytest.raises(BoundaryError):
            transpose(store, queue, tracks[0], Direction.BACKWARD)

        assert identities(queue) == before

    def test_forward_at_last_raises_and_leaves_queue(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        before = identities(queue)

        with pytest.raises(BoundaryError) as exc_info:
            transpose(store, queue, tracks[2], Direction.FORWARD)

        assert exc_info.value.direction == "forward"
        assert identities(queue) == before

    def test_unknown_track_raises(self, abc, store: QueueStore, make_track) -> None:
        queue, _ = abc

        with pytest.raises(TrackNotFoundError):
            transpose(store, queue, make_track("a.mp3"), Direction.FORWARD)

    def test_current_follows_the_moved_track(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        queue.current = tracks[1]

        transpose(store, queue, tracks[1], Direction.FORWARD)

        assert queue.current is tracks[1]
        assert queue.current_index() == 2


class TestShuffle:
    """Test shuffling with the current track pinned first."""

    def test_current_moves_to_front(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        tracks = [make_track(f"{i}.mp3") for i in range(8)]
        add_tracks(store, queue, tracks)
        queue.current = tracks[5]

        for seed in range(20):
            shuffle(store, queue, random.Random(seed))
            assert queue.tracks[0] is tracks[5]
            assert queue.current is tracks[5]

    def test_preserves_entries(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        a, b = make_track("a.mp3"), make_track("b.mp3")
        add_tracks(store, queue, [a, b, a, b, b])
        before = Counter(identities(queue))

        shuffle(store, queue, random.Random(7))

        assert Counter(identities(queue)) == before

    def test_without_current_shuffles_everything(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        firsts = set()

        for seed in range(50):
            shuffle(store, queue, random.Random(seed))
            firsts.add(id(queue.tracks[0]))

        assert firsts == {id(t) for t in tracks}

    def test_empty_queue(self, store: QueueStore) -> None:
        queue = new_queue(store, "Empty")

        shuffle(store, queue, random.Random(0))

        assert queue.tracks == []

    def test_permutations_are_uniform(self, abc, store: QueueStore) -> None:
        queue, tracks = abc
        rng = random.Random(1234)
        names = {id(t): t.filename for t in tracks}
        counts = Counter()
        runs = 6000

        for _ in range(runs):
            shuffle(store, queue, rng)
            counts[tuple(names[id(t)] for t in queue.tracks)] += 1

        permutations = list(itertools.permutations(["a.mp3", "b.mp3", "c.mp3"]))
        assert set(counts) == set(permutations)
        expected = runs / len(permutations)
        for perm in permutations:
            # ~5 standard deviations
            assert abs(counts[perm] - expected) < 150

    def test_rest_is_uniform_with_current_pinned(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        tracks = [make_track(f"{n}.mp3") for n in "wxyz"]
        add_tracks(store, queue, tracks)
        queue.current = tracks[2]
        rng = random.Random(99)
        counts = Counter()

        for _ in range(6000):
            shuffle(store, queue, rng)
            counts[tuple(t.filename for t in queue.tracks[1:])] += 1

        assert len(counts) == 6
        for count in counts.values():
            assert abs(count - 1000) < 150


class TestNextTrack:
    """Test finding the successor of the current track."""

    def test_successor(self, abc) -> None:
        queue, (a, b, c) = abc

        queue.current = a
        assert next_track(queue) is b
        queue.current = b
        assert next_track(queue) is c

    def test_last_and_idle_have_none(self, abc) -> None:
        queue, (_, _, c) = abc

        assert next_track(queue) is None
        queue.current = c
        assert next_track(queue) is None

    def test_duplicate_uses_first_occurrence(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Loop")
        a, b = make_track("a.mp3"), make_track("b.mp3")
        add_tracks(store, queue, [a, b, a])
        queue.current = a

        assert next_track(queue) is b


class TestPlay:
    """Test starting playback from a queue."""

    def test_defaults_to_first_track(self, abc, store: QueueStore, player) -> None:
        queue, tracks = abc

        started = play(store, queue, player)

        assert started is tracks[0]
        assert queue.current is tracks[0]
        player.start_playback.assert_called_once_with("a.mp3")
        assert player.linked_queue_id == queue.id

    def test_specific_track(self, abc, store: QueueStore, player) -> None:
        queue, tracks = abc

        play(store, queue, player, tracks[2])

        assert queue.current is tracks[2]
        player.start_playback.assert_called_once_with("c.mp3")

    def test_empty_queue_raises_without_side_effects(self, store: QueueStore, player) -> None:
        queue = new_queue(store, "Empty")

        with pytest.raises(EmptyQueueError):
            play(store, queue, player)

        assert queue.current is None
        player.start_playback.assert_not_called()
        assert player.linked_queue_id is None

    def test_track_from_other_queue_raises(self, abc, store: QueueStore, player, make_track) -> None:
        queue, _ = abc

        with pytest.raises(TrackNotFoundError):
            play(store, queue, player, make_track("elsewhere.mp3"))

        player.start_playback.assert_not_called()

    def test_player_failure_keeps_current(self, abc, store: QueueStore, player, log_messages) -> None:
        queue, tracks = abc
        player.start_playback.return_value = False

        play(store, queue, player)

        assert queue.current is tracks[0]
        assert any(level == "WARNING" for level, _ in log_messages)

    def test_saves_and_notifies(self, abc, store: QueueStore, repository, player) -> None:
        queue, _ = abc
        listener = MagicMock()
        store.subscribe(listener)
        saves = repository.save_count

        play(store, queue, player)

        assert repository.save_count == saves + 1
        listener.assert_called_once_with(queue)


class TestPlayNext:
    """Test advancing to the next track."""

    def test_advances(self, abc, store: QueueStore, player) -> None:
        queue, tracks = abc
        play(store, queue, player)

        started = play_next(store, queue, player)

        assert started is tracks[1]
        assert queue.current is tracks[1]
        assert player.start_playback.call_args_list[-1].args == ("b.mp3",)

    def test_at_end_raises(self, abc, store: QueueStore, player) -> None:
        queue, tracks = abc
        play(store, queue, player, tracks[2])

        with pytest.raises(NoNextTrackError):
            play_next(store, queue, player)

        assert queue.current is tracks[2]

    def test_idle_queue_raises(self, abc, store: QueueStore, player) -> None:
        queue, _ = abc

        with pytest.raises(NoNextTrackError):
            play_next(store, queue, player)


class TestRemoveTrack:
    """Test removing entries."""

    def test_removes_first_occurrence(self, store: QueueStore, make_track) -> None:
        queue = new_queue(store, "Mix")
        a, b = make_track("a.mp3"), make_track("b.mp3")
        add_tracks(store, queue, [a, b, a])

        remove_track(store, queue, a)

        assert queue.tracks == [b, a]

    def test_current_passes_to_following_entry(self, abc, store: QueueStore) -> None:
        queue, (a, b, c) = abc
        queue.current = b

        remove_track(store, queue, b)

        assert queue.current is c

    def test_removing_last_current_clears_it(self, abc, store: QueueStore) -> None:
        queue, (a, b, c) = abc
        queue.current = c

        remove_track(store, queue, c)

        assert queue.current is None
        assert queue.tracks == [a, b]

    def test_other_entry_keeps_current(self, abc, store: QueueStore) -> None:
        queue, (a, b, c) = abc
        queue.current = c

        remove_track(store, queue, a)

        assert queue.current is c

    def test_unknown_track_raises(self, abc, store: QueueStore, make_track) -> None:
        queue, _ = abc

        with pytest.raises(TrackNotFoundError):
            remove_track(store, queue, make_track("zzz.mp3"))


def test_rock_scenario(store: QueueStore, player) -> None:
    """Create 'Rock', add two files where one fails, then play it."""
    rock = new_queue(store, "Rock")

    def extract(filename):
        return None if filename == "b.mp3" else {"artist": "Band", "title": "A"}

    failed = add_files(store, rock, ["a.mp3", "b.mp3"], extract=extract)

    assert failed == ["b.mp3"]
    assert [t.filename for t in rock.tracks] == ["a.mp3"]

    play(store, rock, player)

    assert rock.current is rock.tracks[0]
    player.start_playback.assert_called_once_with("a.mp3")
