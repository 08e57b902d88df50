"""
Dashboard Service: assembles the per-user dashboard from three collections.

Metrics, Products and Sales are read independently and are not transactional.
A failed read is logged and replaced by an empty, degraded ReadResult; the
response lists which sources were degraded, so a dashboard may combine a
fresh Metrics snapshot with an empty Sales list. Reads never raise.
"""

from datetime import datetime
from typing import Optional, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from bizpulse.engine.aggregation import market_trends, summarize
from bizpulse.engine.financials import daily_sales, inventory_rows, product_breakdown, sales_kpis
from bizpulse.engine.insight_extractor import extract_insights, split_metrics
from bizpulse.engine.recommendation_bucketer import (
    RecommendationSource,
    bucket,
    no_recommendations,
)
from bizpulse.models.enums import Collection
from bizpulse.models.insights import DashboardResponse, ProductListing
from bizpulse.models.records import MetricRecord, ProductRecord, SaleRecord
from bizpulse.storage.base import ReadResult, RecordStore

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

STORE_SOURCE = "store"


class DashboardService:
    """
    Read-side orchestration for the dashboard, metrics and product views.

    Args:
        storage: Record store, or None when no store is configured
        read_limit: Max records read per collection
        recommendation_source: Callable producing recommendations for a user
    """

    def __init__(
        self,
        storage: Optional[RecordStore],
        read_limit: Optional[int] = None,
        recommendation_source: RecommendationSource = no_recommendations,
    ):
        self.storage = storage
        self.read_limit = read_limit
        self.recommendation_source = recommendation_source

    def store_available(self) -> bool:
        if self.storage is None:
            return False
        try:
            return self.storage.health_check()
        except Exception as e:
            logger.warning("store_health_check_raised", error=str(e))
            return False

    def read(
        self,
        collection: Collection,
        user_id: str,
        filters: Optional[dict] = None,
        limit: Optional[int] = None,
    ) -> ReadResult:
        """Read one collection, converting any failure into a degraded result."""
        if self.storage is None:
            return ReadResult.failed("Record store not configured")
        try:
            records = self.storage.find_by_user_id(
                collection, user_id, filters=filters, limit=limit or self.read_limit
            )
            return ReadResult(records=records)
        except Exception as e:
            logger.warning(
                "dashboard_read_degraded",
                collection=collection.value,
                user_id=user_id,
                error=str(e),
            )
            return ReadResult.failed(str(e))

    @staticmethod
    def parse(result: ReadResult, model: type[ModelT]) -> list[ModelT]:
        """Parse raw records into models, skipping records that cannot be read."""
        parsed = []
        for raw in result.records:
            try:
                parsed.append(model.model_validate(raw))
            except ModelValidationError as e:
                logger.warning(
                    "record_skipped_invalid",
                    model=model.__name__,
                    record_id=raw.get("id"),
                    errors=e.error_count(),
                )
        return parsed

    def build_dashboard(self, user_id: str, now: Optional[datetime] = None) -> DashboardResponse:
        if not self.store_available():
            logger.info("dashboard_store_unavailable", user_id=user_id)
            return DashboardResponse.empty(degraded_sources=[STORE_SOURCE])

        results = {
            Collection.METRICS: self.read(Collection.METRICS, user_id),
            Collection.PRODUCTS: self.read(Collection.PRODUCTS, user_id),
            Collection.SALES: self.read(Collection.SALES, user_id),
        }
        metrics = self.parse(results[Collection.METRICS], MetricRecord)
        products = self.parse(results[Collection.PRODUCTS], ProductRecord)
        sales = self.parse(results[Collection.SALES], SaleRecord)

        business_metrics, _ = split_metrics(metrics)
        response = DashboardResponse(
            insights=extract_insights(metrics),
            summary=summarize(metrics),
            recommendations=bucket(self.recommendation_source(user_id)),
            business_metrics=business_metrics,
            market_trends=market_trends(business_metrics),
            inventory=inventory_rows(products),
            kpis=sales_kpis(sales, products, now=now),
            sales_data=daily_sales(sales, now=now),
            product_data=product_breakdown(sales, products),
            degraded_sources=[c.value for c, r in results.items() if r.degraded],
        )

        logger.info(
            "dashboard_built",
            user_id=user_id,
            insights=len(response.insights),
            products=len(products),
            sales=len(sales),
            degraded_sources=response.degraded_sources,
        )
        return response

    def list_metrics(
        self,
        user_id: str,
        metric_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """
        Business metrics and ai_insight records for a user, kept apart.

        Args:
            user_id: Owning user
            metric_type: Only return metrics of this type
            limit: Max records read, overriding the service read limit
        """
        filters = {"metric_type": metric_type} if metric_type else None
        result = self.read(Collection.METRICS, user_id, filters=filters, limit=limit)
        metrics = self.parse(result, MetricRecord)
        business, insight_records = split_metrics(metrics)
        return {
            "businessMetrics": [m.to_api() for m in business],
            "aiInsights": [m.to_api() for m in insight_records],
            "total": len(metrics),
        }

    def list_products(self, user_id: str) -> list[ProductListing]:
        """
        Products for the sales dropdown.

        Falls back to ``metricType == "products"`` records kept in the
        Metrics collection when the Products collection cannot be read.
        """
        result = self.read(Collection.PRODUCTS, user_id)
        if result.degraded:
            fallback = self.read(Collection.METRICS, user_id, filters={"metric_type": "products"})
            logger.info(
                "products_fallback_to_metrics",
                user_id=user_id,
                fallback_degraded=fallback.degraded,
            )
            products = self.parse(fallback, ProductRecord)
        else:
            products = self.parse(result, ProductRecord)

        return [
            ProductListing(
                id=p.id,
                name=p.product_name or "Unnamed Product",
                price=p.selling_price,
                quantity=p.quantity,
                date_added=p.created_at,
                material_cost=p.material_cost,
                selling_price=p.selling_price,
            )
            for p in products
        ]
