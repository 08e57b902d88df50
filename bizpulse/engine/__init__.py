"""
BizPulse analytics core.

- ingestor: routes "add metric" submissions into Products / Sales / Metrics
- aggregation: summary counters, top-category ranking and market trends
- insight_extractor: ai_insight metric records -> normalized Insights
- recommendation_bucketer: urgency grouping of recommendations
- financials: margin, valuation, stock bands, sales KPIs and breakdowns
- dashboard: degrade-tolerant read orchestration for the dashboard views

Everything except the ingestor and dashboard service is a pure function over
already-loaded records.
"""

from bizpulse.engine.aggregation import market_trends, rank_categories, summarize
from bizpulse.engine.dashboard import DashboardService
from bizpulse.engine.financials import (
    daily_sales,
    inventory_rows,
    inventory_value,
    product_breakdown,
    product_growth_percent,
    profit_margin_percent,
    sales_growth_percent,
    sales_kpis,
    stock_status,
)
from bizpulse.engine.ingestor import MetricIngestor
from bizpulse.engine.insight_extractor import extract_insights, split_metrics
from bizpulse.engine.recommendation_bucketer import bucket

__all__ = [
    "DashboardService",
    "MetricIngestor",
    "bucket",
    "daily_sales",
    "extract_insights",
    "inventory_rows",
    "inventory_value",
    "market_trends",
    "product_breakdown",
    "product_growth_percent",
    "profit_margin_percent",
    "rank_categories",
    "sales_growth_percent",
    "sales_kpis",
    "split_metrics",
    "stock_status",
    "summarize",
]
