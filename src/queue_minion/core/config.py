"""
Configuration management for Queue Minion
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class PlayerConfig:
    """Configuration for the mpv player."""

    mpv_socket_path: Optional[str] = None
    volume: int = 50
    auto_advance: bool = True  # Play the next queue entry when a track ends


@dataclass
class QueuesConfig:
    """Configuration for queue storage and file intake."""

    database_path: Optional[str] = None  # default: <data dir>/queues.db
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".ogg", ".opus", ".flac", ".wav"]
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # default: <data dir>/queue-minion.log


@dataclass
class IPCConfig:
    """Configuration for IPC (Inter-Process Communication)."""

    enabled: bool = True


@dataclass
class UIConfig:
    """Configuration for the interactive shell."""

    use_colors: bool = True
    show_queue_after_change: bool = True


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    queues: QueuesConfig = field(default_factory=QueuesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ipc: IPCConfig = field(default_factory=IPCConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "queue-minion"
    return Path.home() / ".config" / "queue-minion"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/queue-minion (or ~/.config/queue-minion)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "queue-minion"
    return Path.home() / ".local" / "share" / "queue-minion"


def get_database_path(config: Config) -> Path:
    """Resolve the queue database location for a configuration."""
    if config.queues.database_path:
        return Path(config.queues.database_path).expanduser()
    return get_data_dir() / "queues.db"


def get_log_file_path(config: Config) -> Path:
    """Resolve the log file location for a configuration."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "queue-minion.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Queue Minion Configuration

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/queue-minion-mpv"

# Default volume (0-100)
volume = 50

# Start the next track in the queue when the current one finishes
auto_advance = true

[queues]
# Queue database location (default: ~/.local/share/queue-minion/queues.db)
# database_path = "~/queues.db"

# Audio file extensions accepted when adding a directory
supported_formats = [".mp3", ".m4a", ".ogg", ".opus", ".flac", ".wav"]

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/queue-minion/queue-minion.log)
# log_file = "/path/to/queue-minion.log"

[ipc]
# Accept commands from `queue-minion <command>` in other terminals
enabled = true

[ui]
# Use colors in terminal output
use_colors = true

# Redraw the queue table after each change
show_queue_after_change = true
""".strip()


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - QUEUE_MINION_DB_PATH
    - QUEUE_MINION_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return _apply_env_overrides(Config())

    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=player_data.get("volume", config.player.volume),
            auto_advance=player_data.get("auto_advance", config.player.auto_advance),
        )

    if "queues" in toml_data:
        queues_data = toml_data["queues"]
        config.queues = QueuesConfig(
            database_path=queues_data.get("database_path"),
            supported_formats=queues_data.get(
                "supported_formats", config.queues.supported_formats
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
        )

    if "ipc" in toml_data:
        config.ipc = IPCConfig(
            enabled=toml_data["ipc"].get("enabled", config.ipc.enabled)
        )

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        config.ui = UIConfig(
            use_colors=ui_data.get("use_colors", config.ui.use_colors),
            show_queue_after_change=ui_data.get(
                "show_queue_after_change", config.ui.show_queue_after_change
            ),
        )

    return _apply_env_overrides(config)


def _apply_env_overrides(config: Config) -> Config:
    db_path = os.environ.get("QUEUE_MINION_DB_PATH")
    if db_path:
        config.queues.database_path = db_path

    log_level = os.environ.get("QUEUE_MINION_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
