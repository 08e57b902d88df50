"""
Aggregation Engine: dashboard summary and market trends over metric records.

Only ai_insight records contribute to the summary. Categories are ranked by
how many insights carry them; equal counts keep the order in which each
category was first seen in the input (store read order, newest first).
Market trends read the plain business metrics instead.
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable

import structlog

from bizpulse.models.insights import DashboardSummary, MarketTrends
from bizpulse.models.records import MetricRecord
from bizpulse.utils.coercion import parse_timestamp

logger = structlog.get_logger(__name__)

TOP_CATEGORY_LIMIT = 3

# Growth is not derived from history yet; the summary reports a flat zero.
WEEKLY_GROWTH_PLACEHOLDER = 0.0

PREMIUM_REVENUE_THRESHOLD = 1000
CUSTOMER_GROWTH_THRESHOLD = 50

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def rank_categories(metrics: Iterable[MetricRecord], limit: int = TOP_CATEGORY_LIMIT) -> list[str]:
    """Most frequent insight categories, highest count first, first-seen on ties."""
    counts: Counter = Counter(
        m.metadata.category for m in metrics if m.is_ai_insight and m.metadata.category
    )
    return [category for category, _ in counts.most_common(limit)]


def summarize(metrics: Iterable[MetricRecord]) -> DashboardSummary:
    """Compute insight counters and the top categories. Does not modify input."""
    insight_records = [m for m in metrics if m.is_ai_insight]

    summary = DashboardSummary(
        total_insights=len(insight_records),
        high_priority_count=sum(1 for m in insight_records if m.metadata.priority == "high"),
        actionable_count=sum(1 for m in insight_records if m.metadata.actionable),
        weekly_growth=WEEKLY_GROWTH_PLACEHOLDER,
        top_categories=rank_categories(insight_records),
    )

    logger.debug(
        "dashboard_summary_computed",
        total_insights=summary.total_insights,
        high_priority=summary.high_priority_count,
        actionable=summary.actionable_count,
    )
    return summary


def market_trends(metrics: Iterable[MetricRecord]) -> MarketTrends:
    """
    Rule-based trend notes over plain business metrics.

    - average ``revenue`` value above 1000 -> trending product note
    - latest ``customers`` value (by date recorded) above 50 -> seasonal note
    """
    metrics = list(metrics)
    trends = MarketTrends()

    revenue = [m.value for m in metrics if m.metric_type == "revenue"]
    if revenue and sum(revenue) / len(revenue) > PREMIUM_REVENUE_THRESHOLD:
        trends.trending_products.append("Premium products showing strong demand")

    customers = [m for m in metrics if m.metric_type == "customers"]
    if customers:
        latest = max(customers, key=_recorded_at)
        if latest.value > CUSTOMER_GROWTH_THRESHOLD:
            trends.seasonal_opportunities.append(
                "Customer base growing - consider seasonal promotions"
            )

    return trends


def _recorded_at(metric: MetricRecord) -> datetime:
    return parse_timestamp(metric.date_recorded) or _EPOCH
