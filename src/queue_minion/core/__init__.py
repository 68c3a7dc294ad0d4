"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Database operations (SQLite)
- Console management (Rich)
- Logging (Loguru)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_database_path,
    get_log_file_path,
    create_default_config,
    ensure_directories,
)

# Database
from .database import get_db_connection, init_database

# Console
from .console import get_console, set_console, use_console, safe_print

# Output
from .output import log, setup_loguru

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_database_path",
    "get_log_file_path",
    "create_default_config",
    "ensure_directories",
    # Database
    "get_db_connection",
    "init_database",
    # Console
    "get_console",
    "set_console",
    "use_console",
    "safe_print",
    # Output
    "log",
    "setup_loguru",
]
