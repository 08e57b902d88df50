"""
Record store layer.

The store is built once by the application lifespan (``build_storage``) and
handed to request handlers through the ``get_storage`` dependency in
``bizpulse.dependencies``. ``None`` means no store is configured.
"""

from typing import Optional

import structlog

from bizpulse.config import Settings

from .base import ReadResult, RecordStore, StorageError
from .duckdb_storage import DuckDBStorage

logger = structlog.get_logger(__name__)


def build_storage(settings: Settings) -> Optional[RecordStore]:
    """
    Construct the configured record store.

    Returns:
        RecordStore implementation, or None when no backend is configured or
        the backend cannot be opened
    """
    if not settings.store_configured:
        logger.warning("record_store_not_configured", backend=settings.store_backend)
        return None

    backend = settings.store_backend.lower()
    if backend != "duckdb":
        logger.error("record_store_unknown_backend", backend=backend)
        return None

    try:
        return DuckDBStorage(db_path=settings.db_path)
    except StorageError as e:
        logger.error("record_store_open_failed", backend=backend, error=str(e))
        return None


__all__ = [
    "DuckDBStorage",
    "ReadResult",
    "RecordStore",
    "StorageError",
    "build_storage",
]
