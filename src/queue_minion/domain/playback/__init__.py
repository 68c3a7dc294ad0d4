"""Playback domain - MPV integration.

This domain handles:
- The Player interface queue operations talk to
- MPV player integration via JSON IPC
- Detecting the end of a track for auto-advance
"""

from .player import (
    Player,
    PlayerState,
    MpvPlayer,
    check_mpv_available,
    start_mpv,
    stop_mpv,
    is_mpv_running,
    send_mpv_command,
    get_mpv_property,
    play_file,
    toggle_pause,
    stop_playback,
    is_track_finished,
)

__all__ = [
    "Player",
    "PlayerState",
    "MpvPlayer",
    "check_mpv_available",
    "start_mpv",
    "stop_mpv",
    "is_mpv_running",
    "send_mpv_command",
    "get_mpv_property",
    "play_file",
    "toggle_pause",
    "stop_playback",
    "is_track_finished",
]
