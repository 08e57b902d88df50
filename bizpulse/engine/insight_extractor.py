"""
Insight Extractor: normalizes ai_insight metric records into Insights.

Output order follows input order; nothing is re-sorted here.
"""

from typing import Iterable

import structlog

from bizpulse.models.insights import Insight
from bizpulse.models.records import MetricRecord

logger = structlog.get_logger(__name__)


def extract_insights(metrics: Iterable[MetricRecord]) -> list[Insight]:
    insights = [Insight.from_metric(m) for m in metrics if m.is_ai_insight]
    logger.debug("insights_extracted", count=len(insights))
    return insights


def split_metrics(metrics: Iterable[MetricRecord]) -> tuple[list[MetricRecord], list[MetricRecord]]:
    """Separate plain business metrics from ai_insight records, keeping order."""
    business, insight_records = [], []
    for m in metrics:
        (insight_records if m.is_ai_insight else business).append(m)
    return business, insight_records
