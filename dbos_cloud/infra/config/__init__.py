"""Local configuration file handling."""

from .config_loader import (
    CONFIG_PATH,
    apply_database_connection,
    backup_config,
    load_config,
    save_config,
)

__all__ = [
    "CONFIG_PATH",
    "apply_database_connection",
    "backup_config",
    "load_config",
    "save_config",
]
