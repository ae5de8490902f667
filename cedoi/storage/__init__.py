"""Storage backends and the startup-time backend selection."""
from cedoi.core.config import Settings
from cedoi.core.logging_config import get_logger
from cedoi.db import make_engine
from cedoi.storage.base import AttendanceStore
from cedoi.storage.memory import MemoryStore
from cedoi.storage.sql import SqlStore

logger = get_logger(__name__)


def build_store(settings: Settings) -> AttendanceStore:
    """Create the backend named by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "sql":
        engine = make_engine(
            settings.get_database_url(),
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        store: AttendanceStore = SqlStore(engine)
    else:
        store = MemoryStore()

    logger.info("storage_initialized", backend=store.backend_name)
    return store


__all__ = ["AttendanceStore", "MemoryStore", "SqlStore", "build_store"]
