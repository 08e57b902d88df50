"""
Metric Ingestor: validates an "add metric" submission and routes it.

Every submission becomes exactly one stored record:

- ``metricType == "products"`` -> Products collection (inventory line)
- ``metricType == "sales"``    -> Sales collection
- anything else                -> Metrics collection (generic numeric metric)

Numeric form fields are coerced leniently (see ``bizpulse.utils.coercion``):
absent or unreadable values become 0. The generic metric ``value`` is the
exception and must be present and numeric.
"""

from datetime import datetime, timezone
from typing import Any, Optional, Union

import structlog

from bizpulse.errors import UnavailableError, ValidationError
from bizpulse.models.enums import RecordKind
from bizpulse.models.records import MetricRecord, ProductRecord, SaleRecord
from bizpulse.storage.base import RecordStore
from bizpulse.utils.coercion import as_text, parse_float, parse_float_or_none, parse_int

logger = structlog.get_logger(__name__)

StoredRecordModel = Union[ProductRecord, SaleRecord, MetricRecord]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_product_data(
    user_id: str,
    product_name: Optional[str],
    quantity: Any,
    material_cost: Any,
    selling_price: Any,
    date: Optional[str],
) -> dict:
    return {
        "user_id": user_id,
        "product_name": product_name or "",
        "quantity": parse_int(quantity),
        "material_cost": parse_float(material_cost),
        "selling_price": parse_float(selling_price),
        "added_date": date or _now_iso(),
    }


def build_sale_data(
    user_id: str,
    product_name: Optional[str],
    quantity: Any,
    price: Any,
    date: Optional[str],
) -> dict:
    if not product_name or parse_int(quantity) <= 0:
        raise ValidationError(
            "Product name and valid quantity are required for sales",
            fields=["productName", "quantity"],
        )
    return {
        "user_id": user_id,
        "product_name": product_name,
        "quantity": parse_int(quantity),
        "price_per_unit": parse_float(price),
        "sale_date": date or _now_iso(),
    }


def build_metric_data(
    user_id: str,
    metric_type: str,
    value: Any,
    date: Optional[str],
    product_name: Optional[str] = None,
    price: Any = None,
    quantity: Any = None,
    material_cost: Any = None,
    selling_price: Any = None,
    description: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> dict:
    if value is None:
        raise ValidationError("Metric value is required", fields=["value"])
    number = parse_float_or_none(value)
    if number is None:
        raise ValidationError("Metric value must be numeric", fields=["value"])
    if metadata is not None and not isinstance(metadata, dict):
        raise ValidationError("Metric metadata must be an object", fields=["metadata"])

    data = {
        "user_id": user_id,
        "metric_type": metric_type,
        "value": number,
        "date_recorded": date or _now_iso(),
        "product_name": product_name or "",
        "price": parse_float(price),
        "quantity": parse_int(quantity),
        "material_cost": parse_float(material_cost),
        "selling_price": parse_float(selling_price),
    }
    if description is not None:
        data["description"] = description
    if metadata is not None:
        data["metadata"] = metadata
    return data


class MetricIngestor:
    """
    Turns one submission into one stored record.

    No deduplication is attempted: submitting the same entity twice stores
    two records.
    """

    def __init__(self, storage: Optional[RecordStore]):
        self.storage = storage

    def ingest(
        self,
        user_id: Optional[str],
        metric_type: Any,
        value: Any = None,
        date: Any = None,
        product_name: Any = None,
        price: Any = None,
        quantity: Any = None,
        material_cost: Any = None,
        selling_price: Any = None,
        description: Any = None,
        metadata: Any = None,
    ) -> StoredRecordModel:
        """
        Validate, route and store a submission.

        Returns:
            The stored record parsed into its collection's model

        Raises:
            ValidationError: Missing user, missing metric type, or an unusable
                value for the selected record kind
            UnavailableError: No record store configured, or it is unhealthy
            StorageError: The write itself failed
        """
        if not user_id:
            raise ValidationError("User ID is required", fields=["userId"])
        if not metric_type:
            raise ValidationError("Metric type is required", fields=["metricType"])

        # Form text fields may arrive as numbers
        metric_type = str(metric_type)
        product_name = as_text(product_name)
        date = as_text(date)
        description = as_text(description)

        kind = RecordKind.from_metric_type(metric_type)

        if kind is RecordKind.PRODUCT:
            data = build_product_data(
                user_id, product_name, quantity, material_cost, selling_price, date
            )
            model = ProductRecord
        elif kind is RecordKind.SALE:
            data = build_sale_data(user_id, product_name, quantity, price, date)
            model = SaleRecord
        elif kind is RecordKind.GENERIC_METRIC:
            data = build_metric_data(
                user_id,
                metric_type,
                value,
                date,
                product_name=product_name,
                price=price,
                quantity=quantity,
                material_cost=material_cost,
                selling_price=selling_price,
                description=description,
                metadata=metadata,
            )
            model = MetricRecord
        else:
            raise ValueError(f"Unhandled record kind: {kind}")

        if self.storage is None or not self.storage.health_check():
            logger.warning("metric_ingest_store_unavailable", user_id=user_id, kind=kind.value)
            raise UnavailableError("Record store not available")

        stored = self.storage.create(kind.collection, data)

        logger.info(
            "metric_ingested",
            user_id=user_id,
            kind=kind.value,
            collection=kind.collection.value,
            record_id=stored.get("id"),
        )
        return model.model_validate(stored)
