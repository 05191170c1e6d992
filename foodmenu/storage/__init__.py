"""
Storage Factory

Returns the SQL or JSON-file storage based on STORAGE_BACKEND.

Version: 1.0.0
"""

import logging
from functools import lru_cache

from foodmenu.core.config import StorageBackend, get_settings
from foodmenu.storage.base import BaseStorage, DuplicateEntityError, StorageError
from foodmenu.storage.json_file import JsonStorage
from foodmenu.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage() -> BaseStorage:
    """Get the configured storage backend."""
    settings = get_settings()

    if settings.storage_backend == StorageBackend.JSON:
        logger.info(f"Storage: Using JsonStorage ({settings.json_db_path})")
        return JsonStorage(settings.json_db_path, lock_timeout=settings.json_lock_timeout)
    else:
        logger.info("Storage: Using SqlStorage")
        return SqlStorage(settings.database_url, echo=settings.database_echo)


def reset_storage() -> None:
    """Clear the cached storage instance."""
    get_storage.cache_clear()


__all__ = [
    "get_storage",
    "reset_storage",
    "BaseStorage",
    "DuplicateEntityError",
    "StorageError",
    "JsonStorage",
    "SqlStorage",
]
