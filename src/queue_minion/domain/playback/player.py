"""
MPV player integration with JSON IPC for Queue Minion
Functional mpv helpers plus the MpvPlayer adapter used by queue operations
"""

import json
import os
import shutil
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, NamedTuple, Optional, Protocol

from loguru import logger

from queue_minion.core.config import PlayerConfig

# Minimum playback time before allowing "track finished" (seconds)
MIN_PLAYBACK_TIME = 3.0

# How long mpv gets to open its IPC socket (seconds)
MPV_STARTUP_TIMEOUT = 5.0


class Player(Protocol):
    """What queue operations need from a player.

    ``linked_queue_id`` is the shared slot recording which queue playback
    belongs to; queue operations write it, selection prompts read it.
    """

    linked_queue_id: Optional[str]

    def start_playback(self, filename: str) -> bool: ...

    def is_playing(self) -> bool: ...


class PlayerState(NamedTuple):
    """Immutable mpv process state."""

    socket_path: Optional[str] = None
    process: Optional[subprocess.Popen] = None
    current_track: Optional[str] = None
    is_playing: bool = False
    playback_started_at: Optional[float] = None  # Unix timestamp


def check_mpv_available() -> bool:
    """True when an mpv executable is on PATH."""
    return shutil.which("mpv") is not None


def default_socket_path() -> str:
    """Per-process mpv socket in the temp directory."""
    return str(Path(tempfile.gettempdir()) / f"queue-minion-mpv-{os.getpid()}")


def mpv_command(socket_path: str, config: PlayerConfig) -> list[str]:
    """Command line for an idle, audio-only mpv controlled over ``socket_path``."""
    return [
        "mpv",
        "--idle=yes",
        "--no-video",
        "--no-terminal",
        "--keep-open=yes",  # eof-reached marks the end of a track
        "--load-scripts=no",
        f"--input-ipc-server={socket_path}",
        f"--volume={config.volume}",
    ]


def wait_for_socket(process: subprocess.Popen, socket_path: str, timeout: float) -> bool:
    """Wait until mpv answers on its socket; False if it exits or times out."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if process.poll() is not None:
            return False
        if get_mpv_property(socket_path, "idle-active") is not None:
            return True
        time.sleep(0.1)
    return False


def start_mpv(config: PlayerConfig) -> Optional[PlayerState]:
    """Launch mpv and return its state, or None if it never became reachable."""
    socket_path = config.mpv_socket_path or default_socket_path()
    logger.info(f"Starting MPV player with socket: {socket_path}")

    try:
        # A socket left by an earlier run would make mpv look ready at once
        Path(socket_path).unlink(missing_ok=True)
        process = subprocess.Popen(
            mpv_command(socket_path, config),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.error(f"Failed to start MPV: {e}")
        return None

    if not wait_for_socket(process, socket_path, MPV_STARTUP_TIMEOUT):
        logger.error(f"MPV not reachable on {socket_path} after {MPV_STARTUP_TIMEOUT:g}s")
        process.kill()
        return None

    logger.info("MPV started successfully")
    return PlayerState(socket_path=socket_path, process=process)


def stop_mpv(state: PlayerState) -> None:
    """Ask mpv to quit, kill it if it lingers, and remove its socket."""
    process = state.process
    if process is not None and process.poll() is None:
        send_mpv_command(state.socket_path, {"command": ["quit"]})
        try:
            process.wait(timeout=2.0)
        except subprocess.TimeoutExpired:
            logger.warning("MPV ignored quit, killing it")
            process.kill()
            process.wait()

    if state.socket_path:
        try:
            Path(state.socket_path).unlink(missing_ok=True)
        except OSError:
            logger.debug(f"Could not remove socket {state.socket_path}")


def is_mpv_running(state: PlayerState) -> bool:
    """True while the mpv process is alive and its socket exists."""
    return (
        state.process is not None
        and state.process.poll() is None
        and state.socket_path is not None
        and os.path.exists(state.socket_path)
    )


def _request(socket_path: Optional[str], command: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Send one JSON IPC request and return the decoded reply."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)

        sock.send((json.dumps(command) + "\n").encode("utf-8"))
        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()
    except (socket.error, OSError):
        return None

    # mpv may interleave event lines; the reply is the line with "error"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data
    return None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    reply = _request(socket_path, command)
    return reply is not None and reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    reply = _request(socket_path, {"command": ["get_property", property_name]})
    if reply is not None and reply.get("error") == "success":
        return reply.get("data")
    return None


def play_file(state: PlayerState, local_path: str) -> tuple[PlayerState, bool]:
    """Play a specific audio file and return updated state."""
    if not is_mpv_running(state):
        return state, False

    success = send_mpv_command(
        state.socket_path, {"command": ["loadfile", local_path, "replace"]}
    )
    if not success:
        return state, False

    # Explicitly unpause to ensure playback starts
    send_mpv_command(state.socket_path, {"command": ["set_property", "pause", False]})

    return state._replace(
        current_track=local_path,
        is_playing=True,
        playback_started_at=time.time(),
    ), True


def toggle_pause(state: PlayerState) -> tuple[PlayerState, bool]:
    """Toggle pause/resume and return updated state."""
    if not is_mpv_running(state):
        return state, False

    success = send_mpv_command(state.socket_path, {"command": ["cycle", "pause"]})

    if success:
        return state._replace(is_playing=not state.is_playing), True

    return state, False


def stop_playback(state: PlayerState) -> tuple[PlayerState, bool]:
    """Stop playback and return updated state."""
    if not is_mpv_running(state):
        return state, False

    success = send_mpv_command(state.socket_path, {"command": ["stop"]})

    if success:
        return state._replace(
            current_track=None,
            is_playing=False,
            playback_started_at=None,
        ), True

    return state, False


def is_track_finished(state: PlayerState) -> bool:
    """Check if the loaded track has played to its end.

    With ``--keep-open=yes`` mpv stays on the last frame and sets
    ``eof-reached`` instead of unloading the file.
    """
    if not is_mpv_running(state) or state.current_track is None:
        return False

    if state.playback_started_at is not None:
        if time.time() - state.playback_started_at < MIN_PLAYBACK_TIME:
            return False

    position = get_mpv_property(state.socket_path, "time-pos") or 0.0
    duration = get_mpv_property(state.socket_path, "duration") or 0.0
    eof = get_mpv_property(state.socket_path, "eof-reached")

    finished_by_position = duration > 0 and position >= duration - 0.5
    return eof is True or finished_by_position


class MpvPlayer:
    """Player backed by an mpv subprocess.

    Holds the immutable PlayerState and swaps it on every command, the
    same way the functional helpers above return updated states.
    """

    def __init__(self, config: PlayerConfig):
        self.config = config
        self.state = PlayerState()
        self.linked_queue_id: Optional[str] = None

    def start(self) -> bool:
        """Launch mpv. Returns False when mpv is missing or fails to start."""
        if not check_mpv_available():
            logger.error("mpv not found on PATH")
            return False
        state = start_mpv(self.config)
        if state is None:
            return False
        self.state = state
        return True

    def shutdown(self) -> None:
        stop_mpv(self.state)
        self.state = PlayerState()

    def start_playback(self, filename: str) -> bool:
        self.state, success = play_file(self.state, filename)
        return success

    def is_playing(self) -> bool:
        if not is_mpv_running(self.state):
            return False
        paused = get_mpv_property(self.state.socket_path, "pause")
        return self.state.current_track is not None and paused is False

    def toggle_pause(self) -> bool:
        self.state, success = toggle_pause(self.state)
        return success

    def stop(self) -> bool:
        self.state, success = stop_playback(self.state)
        return success

    def track_finished(self) -> bool:
        return is_track_finished(self.state)
