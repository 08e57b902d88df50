"""
Derived analytics models returned by the dashboard.

None of these are persisted; they are recomputed from stored records on
every read.
"""

from typing import Optional

from pydantic import Field

from .enums import Impact, Priority, StockStatus, Timeframe
from .records import CamelModel, MetricRecord


class Insight(CamelModel):
    """Normalized, user-facing view of an ai_insight metric record."""

    id: str
    type: str
    title: str
    description: str = ""
    priority: Priority
    date: Optional[str] = None
    actionable: bool
    category: str
    confidence: float
    source: str
    tags: list[str] = Field(default_factory=list)
    suggested_actions: list[str] = Field(default_factory=list)
    estimated_impact: Impact
    timeframe: Timeframe

    @classmethod
    def from_metric(cls, record: MetricRecord) -> "Insight":
        """Build an insight, filling every absent metadata field with its default."""
        meta = record.metadata
        return cls(
            id=meta.insight_id or record.id,
            type=meta.type or "insight",
            title=meta.title or "AI Insight",
            description=record.description or "",
            priority=meta.priority or Priority.MEDIUM,
            date=record.date_recorded,
            actionable=meta.actionable,
            category=meta.category or "general",
            confidence=record.value,
            source=meta.source or "ai_analysis",
            tags=list(meta.tags) if meta.tags is not None else [],
            suggested_actions=list(meta.suggested_actions) if meta.suggested_actions is not None else [],
            estimated_impact=meta.estimated_impact or Impact.MEDIUM,
            timeframe=meta.timeframe or Timeframe.SHORT_TERM,
        )


class DashboardSummary(CamelModel):
    """Headline counters for the insight feed."""

    total_insights: int = 0
    high_priority_count: int = 0
    actionable_count: int = 0
    weekly_growth: float = 0.0
    top_categories: list[str] = Field(default_factory=list, max_length=3)


class Recommendation(CamelModel):
    """
    Actionable suggestion grouped by urgency.

    ``timeframe`` is kept as the raw string supplied by the producer; the
    bucketer rejects values outside the known timeframes.
    """

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None
    estimated_impact: Optional[Impact] = None
    timeframe: Optional[str] = None
    actions: list[str] = Field(default_factory=list)


class RecommendationBuckets(CamelModel):
    """Recommendations split into immediate / short-term / long-term."""

    immediate: list[Recommendation] = Field(default_factory=list)
    short_term: list[Recommendation] = Field(default_factory=list)
    long_term: list[Recommendation] = Field(default_factory=list)


class InventoryItem(CamelModel):
    """Inventory table row with valuation, margin and stock band."""

    id: str
    product_name: str
    quantity: int
    material_cost: float
    selling_price: float
    total_value: float
    profit_margin: float
    stock_status: StockStatus
    last_updated: Optional[str] = None


class BusinessKpis(CamelModel):
    """Sales and inventory headline figures."""

    products_sold: int = 0
    total_revenue: float = 0.0
    top_seller: str = "No data"
    sales_growth: float = 0.0
    product_growth: float = 0.0
    average_order_value: float = 0.0
    inventory_value: float = 0.0


class ProductPerformance(CamelModel):
    """Per-product sales breakdown for the product chart."""

    name: str
    units_sold: int = 0
    revenue: float = 0.0
    profit: float = 0.0


class DailySales(CamelModel):
    """Units and revenue sold on one calendar day."""

    date: str
    sales: int = 0
    revenue: float = 0.0


class MarketTrends(CamelModel):
    """Rule-based notes derived from plain business metrics."""

    trending_products: list[str] = Field(default_factory=list)
    seasonal_opportunities: list[str] = Field(default_factory=list)
    competitor_insights: list[str] = Field(default_factory=list)


class ProductListing(CamelModel):
    """Product as presented to the sales dropdown."""

    id: str
    name: str
    price: float
    quantity: int
    date_added: Optional[str] = None
    material_cost: float
    selling_price: float


class DashboardResponse(CamelModel):
    """Combined dashboard payload."""

    insights: list[Insight] = Field(default_factory=list)
    summary: DashboardSummary = Field(default_factory=DashboardSummary)
    recommendations: RecommendationBuckets = Field(default_factory=RecommendationBuckets)
    business_metrics: list[MetricRecord] = Field(default_factory=list)
    market_trends: MarketTrends = Field(default_factory=MarketTrends)
    inventory: list[InventoryItem] = Field(default_factory=list)
    kpis: BusinessKpis = Field(default_factory=BusinessKpis)
    sales_data: list[DailySales] = Field(default_factory=list)
    product_data: list[ProductPerformance] = Field(default_factory=list)
    degraded_sources: list[str] = Field(default_factory=list)

    @classmethod
    def empty(cls, degraded_sources: Optional[list[str]] = None) -> "DashboardResponse":
        """All-zero response served when the store cannot be read at all."""
        return cls(degraded_sources=degraded_sources or [])
