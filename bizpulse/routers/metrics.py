"""
Metrics router: add a metric / product / sale, and list stored metrics.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from bizpulse.dependencies import get_dashboard_service, get_metric_ingestor
from bizpulse.engine.dashboard import DashboardService
from bizpulse.engine.ingestor import MetricIngestor
from bizpulse.errors import ValidationError
from bizpulse.models.enums import RecordKind
from bizpulse.models.records import CamelModel
from bizpulse.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class AddMetricRequest(CamelModel):
    """
    Form submission from the "add information" dialog.

    Every field is accepted as sent; the ingestor does the coercion so that
    a numeric product name or date is stored as text instead of rejected.
    """

    metric_type: Any = None
    value: Any = None
    date: Any = None
    product_name: Any = None
    price: Any = None
    quantity: Any = None
    material_cost: Any = None
    selling_price: Any = None
    description: Any = None
    metadata: Any = None


@router.post("/users/{user_id}/metrics")
async def add_metric(
    user_id: str,
    payload: Optional[AddMetricRequest] = None,
    ingestor: MetricIngestor = Depends(get_metric_ingestor),
):
    """
    Store one submission as a product, sale or generic metric.

    400 when metricType or value is missing, 503 when the store is down.
    """
    payload = payload or AddMetricRequest()
    if not payload.metric_type or payload.value is None:
        raise ValidationError(
            "Metric type and value are required",
            fields=["metricType", "value"],
        )

    logger.info("add_metric_requested", user_id=user_id, metric_type=payload.metric_type)

    record = ingestor.ingest(
        user_id=user_id,
        metric_type=payload.metric_type,
        value=payload.value,
        date=payload.date,
        product_name=payload.product_name,
        price=payload.price,
        quantity=payload.quantity,
        material_cost=payload.material_cost,
        selling_price=payload.selling_price,
        description=payload.description,
        metadata=payload.metadata,
    )
    label = RecordKind.from_metric_type(str(payload.metric_type)).label

    return {
        "success": True,
        "message": f"{label} added successfully",
        "data": record.to_api(),
    }


@router.get("/users/{user_id}/metrics")
async def list_metrics(
    user_id: str,
    metric_type: Optional[str] = Query(None, alias="metricType", description="Only this metric type"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Max records to read"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Stored metrics for a user with ai_insight records split out."""
    logger.info("metrics_list_requested", user_id=user_id, metric_type=metric_type, limit=limit)
    return {
        "success": True,
        "data": service.list_metrics(user_id, metric_type=metric_type, limit=limit),
    }
