from taskboard.core.config import Settings
from taskboard.core.db import engine_from_settings
from taskboard.storage.base import Storage, StorageError
from taskboard.storage.memory import MemoryStorage
from taskboard.storage.sql import SQLStorage

__all__ = [
    "MemoryStorage",
    "SQLStorage",
    "Storage",
    "StorageError",
    "build_storage",
]


def build_storage(settings: Settings) -> Storage:
    """Construct the backend named by STORAGE_BACKEND, ready for use."""
    if settings.STORAGE_BACKEND == "sql":
        storage = SQLStorage(engine_from_settings(settings))
        storage.bootstrap(seed=settings.SEED_SAMPLE_USERS)
        return storage
    return MemoryStorage(seed=settings.SEED_SAMPLE_USERS)
