"""
Tests for command routing and the queue/playback command handlers.
"""

import io
from pathlib import Path
from typing import List, Optional, Sequence
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from queue_minion import router
from queue_minion.context import AppContext
from queue_minion.core.config import Config
from queue_minion.core.console import use_console
from queue_minion.domain.queues import (
    BoundaryError,
    QueueNotFoundError,
    QueueStore,
    add_tracks,
    new_queue,
)


class ScriptedChooser:
    """Answers prompts from a list, in order."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: List[str] = []

    def choose_one(
        self, prompt: str, candidates: Sequence[str], default: Optional[str] = None
    ) -> str:
        self.prompts.append(prompt)
        return self.answers.pop(0)


@pytest.fixture
def output():
    """Collect everything printed through the console."""
    buffer = io.StringIO()
    with use_console(Console(file=buffer, width=120, color_system=None)):
        yield buffer


@pytest.fixture
def ctx(store: QueueStore, player) -> AppContext:
    return AppContext.create(Config(), store, player, ScriptedChooser())


@pytest.fixture
def rock(store: QueueStore, make_track):
    queue = new_queue(store, "Rock")
    add_tracks(store, queue, [
        make_track("a.mp3", title="A"),
        make_track("b.mp3", title="B"),
        make_track("c.mp3", title="C"),
    ])
    return queue


def run(ctx: AppContext, line: str):
    from queue_minion.utils.parsers import parse_command

    command, args = parse_command(line)
    return router.handle_command(ctx, command, args)


class TestRouting:
    """Test dispatch basics."""

    def test_quit_stops_loop(self, ctx: AppContext, output) -> None:
        _, should_continue = run(ctx, "quit")

        assert should_continue is False

    def test_unknown_command_warns(self, ctx: AppContext, output) -> None:
        _, should_continue = run(ctx, "frobnicate")

        assert should_continue is True
        assert "Unknown command" in output.getvalue()

    def test_help(self, ctx: AppContext, output) -> None:
        run(ctx, "help")

        assert "transpose" in output.getvalue()

    def test_queue_errors_are_reported_not_raised(self, ctx: AppContext, rock, output) -> None:
        _, should_continue = run(ctx, "show Blues")

        assert should_continue is True
        assert "No queue named 'Blues'" in output.getvalue()

    def test_dispatch_lets_queue_errors_through(self, ctx: AppContext, rock) -> None:
        with pytest.raises(QueueNotFoundError):
            router.dispatch(ctx, "show", ["Blues"])


class TestQueueCommands:
    """Test queue handlers through the router."""

    def test_create_queue_with_quoted_name(self, ctx: AppContext, store: QueueStore, output) -> None:
        run(ctx, 'create-queue "Road Trip"')

        assert store.names() == ["Road Trip"]

    def test_create_queue_prompts_for_missing_name(self, store: QueueStore, player, output) -> None:
        ctx = AppContext.create(Config(), store, player, ScriptedChooser("Prompted"))

        run(ctx, "create-queue")

        assert store.names() == ["Prompted"]

    def test_add_files_reports_unreadable(self, ctx: AppContext, rock, tmp_path: Path, output) -> None:
        good, bad = str(tmp_path / "good.mp3"), str(tmp_path / "bad.mp3")

        def fake_mutagen(filename, easy=False):
            if filename == bad:
                return None
            audio = MagicMock()
            audio.get.return_value = None
            return audio

        with patch("queue_minion.domain.library.metadata.MutagenFile", side_effect=fake_mutagen):
            router.handle_command(ctx, "add-files", ["Rock", good, bad])

        assert [t.filename for t in rock.tracks][-1] == good
        assert len(rock.tracks) == 4
        assert "Could not read" in output.getvalue()

    def test_add_files_to_misspelled_queue_is_refused(
        self, store: QueueStore, player, tmp_path: Path, output
    ) -> None:
        jazz = new_queue(store, "Jazz")
        chooser = ScriptedChooser()
        ctx = AppContext.create(Config(), store, player, chooser)

        router.handle_command(ctx, "add-files", ["Rockk", str(tmp_path / "a.mp3")])

        assert jazz.tracks == []
        assert chooser.prompts == []
        assert "No queue named 'Rockk'" in output.getvalue()

    def test_add_files_misspelled_queue_raises_from_dispatch(
        self, store: QueueStore, player, tmp_path: Path
    ) -> None:
        new_queue(store, "Jazz")
        ctx = AppContext.create(Config(), store, player, ScriptedChooser())

        with pytest.raises(QueueNotFoundError):
            router.dispatch(ctx, "add-files", ["Rockk", str(tmp_path / "a.mp3")])

    def test_remove_single_argument_prompts_for_queue(
        self, store: QueueStore, player, rock, output
    ) -> None:
        a, b, c = rock.tracks
        new_queue(store, "Jazz")
        chooser = ScriptedChooser("Rock")
        ctx = AppContext.create(Config(), store, player, chooser)

        run(ctx, "remove 2")

        assert rock.tracks == [a, c]
        assert len(chooser.prompts) == 1

    def test_list_and_show(self, ctx: AppContext, rock, output) -> None:
        run(ctx, "list")
        run(ctx, "show Rock")

        text = output.getvalue()
        assert "Rock" in text
        assert "3 tracks" in text
        assert "Artist: B" in text

    def test_transpose_by_position(self, ctx: AppContext, rock, output) -> None:
        a, b, c = rock.tracks

        run(ctx, "transpose Rock 1 forward")

        assert rock.tracks == [b, a, c]

    def test_transpose_by_label(self, ctx: AppContext, rock, output) -> None:
        a, b, c = rock.tracks

        run(ctx, 'transpose Rock "Artist: C" backward')

        assert rock.tracks == [a, c, b]

    def test_transpose_boundary_is_reported(self, ctx: AppContext, rock, output) -> None:
        before = list(rock.tracks)

        run(ctx, "transpose Rock 3 forward")

        assert rock.tracks == before
        assert "Cannot move the last track forward" in output.getvalue()

    def test_transpose_boundary_raises_from_dispatch(self, ctx: AppContext, rock) -> None:
        with pytest.raises(BoundaryError):
            router.dispatch(ctx, "transpose", ["Rock", "1", "backward"])

    def test_shuffle(self, ctx: AppContext, rock, output) -> None:
        before = {id(t) for t in rock.tracks}

        run(ctx, "shuffle Rock")

        assert {id(t) for t in rock.tracks} == before

    def test_remove(self, ctx: AppContext, rock, output) -> None:
        a, b, c = rock.tracks

        run(ctx, "remove Rock 2")

        assert rock.tracks == [a, c]

    def test_discard_unlinks_player(self, ctx: AppContext, store: QueueStore, rock, player, output) -> None:
        run(ctx, "play Rock")

        run(ctx, "discard Rock")

        assert store.queues == []
        assert player.linked_queue_id is None


class TestPlaybackCommands:
    """Test play/next/pause/stop handlers."""

    def test_play_from_start(self, ctx: AppContext, rock, player, output) -> None:
        run(ctx, "play Rock")

        assert rock.current is rock.tracks[0]
        player.start_playback.assert_called_once_with("a.mp3")
        assert "Now playing" in output.getvalue()

    def test_play_specific_track(self, ctx: AppContext, rock, player, output) -> None:
        run(ctx, "play Rock 2")

        assert rock.current is rock.tracks[1]

    def test_next_uses_linked_queue(self, ctx: AppContext, store: QueueStore, rock, player, output) -> None:
        new_queue(store, "Other")
        run(ctx, "play Rock")

        run(ctx, "next")

        assert rock.current is rock.tracks[1]

    def test_next_at_end_is_reported(self, ctx: AppContext, rock, output) -> None:
        run(ctx, "play Rock 3")

        run(ctx, "next Rock")

        assert rock.current is rock.tracks[2]
        assert "No next track" in output.getvalue()

    def test_play_empty_queue_is_reported(self, ctx: AppContext, store: QueueStore, player, output) -> None:
        new_queue(store, "Empty")

        run(ctx, "play Empty")

        player.start_playback.assert_not_called()
        assert "is empty" in output.getvalue()

    def test_pause_reports_paused_or_resumed(self, ctx: AppContext, player, output) -> None:
        player.toggle_pause.return_value = True

        player.is_playing.return_value = False
        run(ctx, "pause")
        player.is_playing.return_value = True
        run(ctx, "pause")

        text = output.getvalue()
        assert text.index("Paused") < text.index("Resumed")

    def test_pause_and_stop_delegate_to_player(self, ctx: AppContext, player, output) -> None:
        player.toggle_pause.return_value = True
        player.stop.return_value = False

        run(ctx, "pause")
        run(ctx, "stop")

        player.toggle_pause.assert_called_once()
        player.stop.assert_called_once()
        assert "No music is currently playing" in output.getvalue()
