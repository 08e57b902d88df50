"""
Recommendation Bucketer: groups recommendations by urgency.

Producers of recommendations must set ``timeframe``; unlike insights,
there is no default bucket, and an unknown or missing timeframe is rejected.
"""

from typing import Callable, Iterable

import structlog

from bizpulse.errors import BucketingError
from bizpulse.models.enums import Timeframe
from bizpulse.models.insights import Recommendation, RecommendationBuckets

logger = structlog.get_logger(__name__)

RecommendationSource = Callable[[str], list[Recommendation]]


def no_recommendations(user_id: str) -> list[Recommendation]:
    """Default source: recommendation generation is not wired in yet."""
    return []


def bucket(recommendations: Iterable[Recommendation]) -> RecommendationBuckets:
    """
    Partition recommendations strictly by timeframe, preserving order.

    Raises:
        BucketingError: A recommendation has no timeframe, or one outside
            immediate / short_term / long_term
    """
    buckets = RecommendationBuckets()
    targets = {
        Timeframe.IMMEDIATE.value: buckets.immediate,
        Timeframe.SHORT_TERM.value: buckets.short_term,
        Timeframe.LONG_TERM.value: buckets.long_term,
    }

    for rec in recommendations:
        target = targets.get(rec.timeframe) if rec.timeframe is not None else None
        if target is None:
            logger.error("recommendation_timeframe_invalid", recommendation_id=rec.id, timeframe=rec.timeframe)
            raise BucketingError(
                f"Recommendation {rec.id!r} has unsupported timeframe {rec.timeframe!r}",
                detail={"recommendation_id": rec.id, "timeframe": rec.timeframe},
            )
        target.append(rec)

    return buckets
