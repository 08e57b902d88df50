"""
FastAPI dependencies wiring the record store into request handlers.

The store instance lives on ``app.state`` and is owned by the application
lifespan; tests replace ``get_storage`` through ``dependency_overrides``.
"""

from typing import Optional

from fastapi import Depends, Request

from bizpulse.config import get_settings
from bizpulse.engine.dashboard import DashboardService
from bizpulse.engine.ingestor import MetricIngestor
from bizpulse.storage.base import RecordStore


def get_storage(request: Request) -> Optional[RecordStore]:
    """Record store built at startup, or None when none is configured."""
    return getattr(request.app.state, "storage", None)


def get_dashboard_service(
    storage: Optional[RecordStore] = Depends(get_storage),
) -> DashboardService:
    settings = get_settings()
    return DashboardService(storage=storage, read_limit=settings.dashboard_read_limit)


def get_metric_ingestor(
    storage: Optional[RecordStore] = Depends(get_storage),
) -> MetricIngestor:
    return MetricIngestor(storage=storage)
