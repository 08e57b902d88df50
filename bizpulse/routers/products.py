"""
Products router: product list for the sales entry dropdown.
"""

from fastapi import APIRouter, Depends

from bizpulse.dependencies import get_dashboard_service
from bizpulse.engine.dashboard import DashboardService
from bizpulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/users/{user_id}/products")
async def get_user_products(
    user_id: str,
    service: DashboardService = Depends(get_dashboard_service),
):
    """List a user's products, newest first. Degrades to an empty list."""
    logger.info("products_requested", user_id=user_id)
    products = service.list_products(user_id)
    return {"success": True, "products": [p.to_api() for p in products]}
