"""
Core module initialization.
Exports configuration and logging utilities.
"""

from foodmenu.core.config import (
    EnvironmentMode,
    Settings,
    StorageBackend,
    get_settings,
    setup_logging,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "StorageBackend",
]
