import logging

from ...application.ports.storage_repo import KeyValueStorage
from ...core.config import Settings
from .local_storage import LocalFileStorage
from .memory_storage import InMemoryStorage

logger = logging.getLogger(__name__)


def build_storage(config: Settings) -> KeyValueStorage:
    backend = config.STORAGE_BACKEND.strip().lower()
    logger.info(f"Using {backend} storage backend for history")
    if backend == "memory":
        return InMemoryStorage(quota_bytes=config.STORAGE_QUOTA_BYTES)
    if backend == "file":
        return LocalFileStorage(config.STORAGE_DIR, quota_bytes=config.STORAGE_QUOTA_BYTES)
    if backend == "sql":
        from ...database import create_db_and_tables, create_engine_for
        from ..persistence.sqlalchemy.repositories.slot_repository_sql import SqlSlotStorage

        engine = create_engine_for(config.DATABASE_URL)
        create_db_and_tables(engine)
        return SqlSlotStorage(engine, quota_bytes=config.STORAGE_QUOTA_BYTES)
    raise ValueError(f"Unknown STORAGE_BACKEND '{config.STORAGE_BACKEND}' (expected memory, file or sql)")


__all__ = ["build_storage", "InMemoryStorage", "LocalFileStorage"]
