"""
System health router.

Wired to:
- RecordStore health check
- Settings for configuration
"""

import time
from typing import Optional

from fastapi import APIRouter, Depends

from bizpulse import __version__
from bizpulse.config import get_settings
from bizpulse.dependencies import get_storage
from bizpulse.storage.base import RecordStore
from bizpulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()

# Track startup time for uptime calculation
_startup_time = time.time()


@router.get("/health")
async def system_health(storage: Optional[RecordStore] = Depends(get_storage)):
    """
    Report service and record store status.

    Store problems show up as ``degraded``; this endpoint never fails.
    """
    settings = get_settings()

    if storage is None:
        store_status = "not_configured"
    elif storage.health_check():
        store_status = "healthy"
    else:
        store_status = "unhealthy"

    if store_status != "healthy":
        logger.warning("system_health_degraded", store=store_status)

    return {
        "success": True,
        "data": {
            "status": "healthy" if store_status == "healthy" else "degraded",
            "version": __version__,
            "uptime_seconds": round(time.time() - _startup_time, 1),
            "store": store_status,
            "store_backend": settings.store_backend,
        },
    }
