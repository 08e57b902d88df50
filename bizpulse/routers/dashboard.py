"""
Dashboard router: combined insight feed, summary, recommendations and KPIs.

Wired to:
- DashboardService for degrade-tolerant reads over Metrics / Products / Sales
"""

from fastapi import APIRouter, Depends

from bizpulse.dependencies import get_dashboard_service
from bizpulse.engine.dashboard import DashboardService
from bizpulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/users/{user_id}/dashboard")
async def get_dashboard(
    user_id: str,
    service: DashboardService = Depends(get_dashboard_service),
):
    """
    Dashboard data for a user.

    Always answers 200. When the record store is unconfigured or unhealthy
    the payload is the all-empty shape and ``degradedSources`` says why.
    """
    logger.info("dashboard_requested", user_id=user_id)
    return service.build_dashboard(user_id).to_api()
