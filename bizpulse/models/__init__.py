"""
Pydantic v2 data models for BizPulse.

Model Organization:
    - enums: Collections, record kinds and the closed analytics vocabularies
    - records: Stored Product / Sale / Metric records and insight metadata
    - insights: Derived dashboard views (insights, summary, recommendations,
      inventory rows, KPIs, product listings)

Usage:
    >>> from bizpulse.models import MetricRecord, Insight
    >>> record = MetricRecord(
    ...     id="m1", user_id="u1", metric_type="ai_insight", value=82,
    ...     metadata={"priority": "high", "category": "pricing"},
    ... )
    >>> Insight.from_metric(record).priority
    <Priority.HIGH: 'high'>
"""

from .enums import (
    AI_INSIGHT_METRIC_TYPE,
    Collection,
    Impact,
    Priority,
    RecordKind,
    StockStatus,
    Timeframe,
)
from .insights import (
    BusinessKpis,
    DailySales,
    DashboardResponse,
    DashboardSummary,
    Insight,
    InventoryItem,
    MarketTrends,
    ProductListing,
    ProductPerformance,
    Recommendation,
    RecommendationBuckets,
)
from .records import (
    CamelModel,
    InsightMetadata,
    MetricRecord,
    ProductRecord,
    SaleRecord,
    StoredRecord,
)

__all__ = [
    "AI_INSIGHT_METRIC_TYPE",
    "Collection",
    "Impact",
    "Priority",
    "RecordKind",
    "StockStatus",
    "Timeframe",
    "BusinessKpis",
    "DailySales",
    "DashboardResponse",
    "DashboardSummary",
    "Insight",
    "InventoryItem",
    "MarketTrends",
    "ProductListing",
    "ProductPerformance",
    "Recommendation",
    "RecommendationBuckets",
    "CamelModel",
    "InsightMetadata",
    "MetricRecord",
    "ProductRecord",
    "SaleRecord",
    "StoredRecord",
]
