"""
Stored record models for the three logical collections.

Records are persisted with snake_case keys and exposed over the API in
camelCase. Reading is lenient: numeric columns written by older clients as
strings or left empty are coerced to numbers on the way in, so downstream
calculators always see numbers.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bizpulse.utils.coercion import parse_float, parse_int

from .enums import AI_INSIGHT_METRIC_TYPE, Impact, Priority, Timeframe


class CamelModel(BaseModel):
    """Base model accepting snake_case or camelCase keys, dumping camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_api(self) -> dict:
        """JSON-ready camelCase representation."""
        return self.model_dump(by_alias=True, mode="json")


def _timestamp_to_str(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class StoredRecord(CamelModel):
    """Fields every collection shares: identity, owner and store timestamps."""

    id: str
    user_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v: Any) -> Any:
        return _timestamp_to_str(v)


class ProductRecord(StoredRecord):
    """Inventory line created when ``metricType == "products"``."""

    product_name: str = ""
    quantity: int = 0
    material_cost: float = 0.0
    selling_price: float = 0.0
    added_date: Optional[str] = None

    @field_validator("product_name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return parse_int(v)

    @field_validator("material_cost", "selling_price", mode="before")
    @classmethod
    def coerce_money(cls, v: Any) -> float:
        return parse_float(v)

    @field_validator("added_date", mode="before")
    @classmethod
    def normalize_added_date(cls, v: Any) -> Any:
        return _timestamp_to_str(v)


class SaleRecord(StoredRecord):
    """Single sale created when ``metricType == "sales"``."""

    product_name: str = ""
    quantity: int = 0
    price_per_unit: float = 0.0
    sale_date: Optional[str] = None

    @field_validator("product_name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return parse_int(v)

    @field_validator("price_per_unit", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> float:
        return parse_float(v)

    @field_validator("sale_date", mode="before")
    @classmethod
    def normalize_sale_date(cls, v: Any) -> Any:
        return _timestamp_to_str(v)

    @property
    def revenue(self) -> float:
        return self.price_per_unit * self.quantity


class InsightMetadata(CamelModel):
    """
    Insight-relevant fields carried on an ai_insight metric record.

    Every field is optional. Empty strings, unknown enum values and
    non-list tag/action collections are read as absent so that the
    insight defaulting rules apply to them uniformly.
    """

    insight_id: Optional[str] = None
    type: Optional[str] = None
    title: Optional[str] = None
    priority: Optional[Priority] = None
    actionable: bool = False
    category: Optional[str] = None
    source: Optional[str] = None
    tags: Optional[list[str]] = None
    suggested_actions: Optional[list[str]] = None
    estimated_impact: Optional[Impact] = None
    timeframe: Optional[Timeframe] = None

    @field_validator("insight_id", "type", "title", "category", "source", mode="before")
    @classmethod
    def blank_as_absent(cls, v: Any) -> Optional[str]:
        if v is None or v == "" or isinstance(v, (dict, list)):
            return None
        return str(v)

    @field_validator("priority", mode="before")
    @classmethod
    def known_priority(cls, v: Any) -> Optional[str]:
        return v if v in [p.value for p in Priority] else None

    @field_validator("estimated_impact", mode="before")
    @classmethod
    def known_impact(cls, v: Any) -> Optional[str]:
        return v if v in [i.value for i in Impact] else None

    @field_validator("timeframe", mode="before")
    @classmethod
    def known_timeframe(cls, v: Any) -> Optional[str]:
        return v if v in [t.value for t in Timeframe] else None

    @field_validator("actionable", mode="before")
    @classmethod
    def truthy(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("tags", "suggested_actions", mode="before")
    @classmethod
    def list_or_absent(cls, v: Any) -> Optional[list[str]]:
        if not isinstance(v, list):
            return None
        return [str(item) for item in v]


class MetricRecord(StoredRecord):
    """
    Generic numeric metric, including AI-tagged insight records.

    ``value`` is the only required numeric field; the product-style fields
    are optional pass-throughs that default to zero.
    """

    metric_type: str
    value: float
    date_recorded: Optional[str] = None
    product_name: str = ""
    price: float = 0.0
    quantity: int = 0
    material_cost: float = 0.0
    selling_price: float = 0.0
    description: Optional[str] = None
    metadata: InsightMetadata = Field(default_factory=InsightMetadata)

    @field_validator("product_name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> int:
        return parse_int(v)

    @field_validator("price", "material_cost", "selling_price", mode="before")
    @classmethod
    def coerce_money(cls, v: Any) -> float:
        return parse_float(v)

    @field_validator("metadata", mode="before")
    @classmethod
    def metadata_mapping(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, InsightMetadata)) else {}

    @field_validator("date_recorded", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _timestamp_to_str(v)

    @property
    def is_ai_insight(self) -> bool:
        return self.metric_type == AI_INSIGHT_METRIC_TYPE
