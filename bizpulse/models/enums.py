"""
Enumeration types for the BizPulse analytics core.

All enums inherit from str so they serialize to their plain values in JSON
responses and compare equal to the raw strings stored on records.
"""

from enum import Enum

AI_INSIGHT_METRIC_TYPE = "ai_insight"


class Collection(str, Enum):
    """Logical collections exposed by the record store."""

    PRODUCTS = "products"
    SALES = "sales"
    METRICS = "business_metrics"


class RecordKind(str, Enum):
    """
    Closed set of record shapes an "add metric" request can produce.

    ``metricType`` is resolved to exactly one kind before any field is
    coerced: "products" and "sales" select their dedicated collections and
    every other non-empty type is an explicit generic metric.
    """

    PRODUCT = "product"
    SALE = "sale"
    GENERIC_METRIC = "generic_metric"

    @classmethod
    def from_metric_type(cls, metric_type: str) -> "RecordKind":
        if metric_type == "products":
            return cls.PRODUCT
        if metric_type == "sales":
            return cls.SALE
        return cls.GENERIC_METRIC

    @property
    def collection(self) -> Collection:
        if self is RecordKind.PRODUCT:
            return Collection.PRODUCTS
        if self is RecordKind.SALE:
            return Collection.SALES
        return Collection.METRICS

    @property
    def label(self) -> str:
        if self is RecordKind.PRODUCT:
            return "Product"
        if self is RecordKind.SALE:
            return "Sale"
        return "Metric"


class Priority(str, Enum):
    """Priority of an insight or recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Impact(str, Enum):
    """Estimated business impact of acting on an insight."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Timeframe(str, Enum):
    """Urgency bucket used to group insights and recommendations."""

    IMMEDIATE = "immediate"
    SHORT_TERM = "short_term"
    LONG_TERM = "long_term"


class StockStatus(str, Enum):
    """Inventory display band for a product's on-hand quantity."""

    OUT = "out"
    LOW = "low"
    MEDIUM = "medium"
    GOOD = "good"
