"""
Pytest configuration and shared fixtures for the BizPulse test suite.

Provides record factories, an in-memory MockStorage, a DuckDB-backed store on
a temp path, and a FastAPI test client whose record store can be swapped per
test through ``dependency_overrides``.
"""

import os
import tempfile
import uuid as _uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

# Set testing environment BEFORE importing app
# Use temp path (must not exist - DuckDB creates the file).
_test_db_path = os.path.join(tempfile.gettempdir(), f"bizpulse_test_{_uuid.uuid4().hex[:8]}.duckdb")
os.environ["TESTING"] = "true"
os.environ["DB_PATH"] = _test_db_path
os.environ["STORE_BACKEND"] = "duckdb"


from bizpulse.models.enums import Collection
from bizpulse.models.records import MetricRecord, ProductRecord, SaleRecord
from bizpulse.storage.base import RecordStore, StorageError
from bizpulse.storage.duckdb_storage import DuckDBStorage

TEST_USER = "user_test_001"


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


def _iso(offset_minutes: int = 0) -> str:
    return (datetime.now(timezone.utc) - timedelta(minutes=offset_minutes)).isoformat()


def make_metric_record(
    metric_type: str = "revenue",
    value: float = 100.0,
    user_id: str = TEST_USER,
    **overrides,
) -> MetricRecord:
    """Factory for plain business metric records."""
    defaults = dict(
        id=str(uuid4()),
        user_id=user_id,
        metric_type=metric_type,
        value=value,
        date_recorded=_iso(),
        created_at=_iso(),
    )
    defaults.update(overrides)
    return MetricRecord.model_validate(defaults)


def make_insight_record(
    category: Optional[str] = "pricing",
    priority: Optional[str] = "medium",
    actionable: bool = False,
    value: float = 0.8,
    metadata: Optional[dict] = None,
    **overrides,
) -> MetricRecord:
    """Factory for ai_insight metric records."""
    meta: dict[str, Any] = {"category": category, "priority": priority, "actionable": actionable}
    if metadata is not None:
        meta = metadata
    return make_metric_record(metric_type="ai_insight", value=value, metadata=meta, **overrides)


def make_product_record(
    product_name: str = "Walnut Desk",
    quantity: int = 8,
    material_cost: float = 40.0,
    selling_price: float = 100.0,
    user_id: str = TEST_USER,
    **overrides,
) -> ProductRecord:
    """Factory for product (inventory) records."""
    defaults = dict(
        id=str(uuid4()),
        user_id=user_id,
        product_name=product_name,
        quantity=quantity,
        material_cost=material_cost,
        selling_price=selling_price,
        added_date=_iso(),
        created_at=_iso(),
        updated_at=_iso(),
    )
    defaults.update(overrides)
    return ProductRecord.model_validate(defaults)


def make_sale_record(
    product_name: str = "Walnut Desk",
    quantity: int = 2,
    price_per_unit: float = 100.0,
    sale_date: Optional[str] = None,
    user_id: str = TEST_USER,
    **overrides,
) -> SaleRecord:
    """Factory for sale records."""
    defaults = dict(
        id=str(uuid4()),
        user_id=user_id,
        product_name=product_name,
        quantity=quantity,
        price_per_unit=price_per_unit,
        sale_date=sale_date or _iso(),
        created_at=_iso(),
    )
    defaults.update(overrides)
    return SaleRecord.model_validate(defaults)


# ---------------------------------------------------------------------------
# Mock storage
# ---------------------------------------------------------------------------


class MockStorage(RecordStore):
    """
    In-memory record store for unit tests.

    ``failing`` names collections whose reads raise StorageError;
    ``healthy`` controls the health check.
    """

    def __init__(self, failing: Optional[set] = None, healthy: bool = True):
        self._records: dict[Collection, list[dict]] = {c: [] for c in Collection}
        self.failing = set(failing or ())
        self.healthy = healthy
        self.create_calls: list[tuple[Collection, dict]] = []
        self._counter = 0

    def create(self, collection, data):
        self._counter += 1
        # Monotonic timestamps keep newest-first ordering deterministic
        now = (datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=self._counter)).isoformat()
        record = {"id": str(uuid4()), **data, "created_at": now, "updated_at": now}
        self._records[Collection(collection)].append(record)
        self.create_calls.append((Collection(collection), data))
        return dict(record)

    def add(self, collection, record) -> None:
        """Seed a parsed model or raw dict directly."""
        raw = record.model_dump(mode="json") if hasattr(record, "model_dump") else dict(record)
        self._records[Collection(collection)].append(raw)

    def find_by_user_id(self, collection, user_id, filters=None, limit=None):
        collection = Collection(collection)
        if collection in self.failing:
            raise StorageError(f"{collection.value} unavailable")
        results = [r for r in self._records[collection] if r.get("user_id") == user_id]
        for field, value in (filters or {}).items():
            results = [r for r in results if r.get(field) == value]
        results = sorted(results, key=lambda r: r.get("created_at") or "", reverse=True)
        if limit:
            results = results[:limit]
        return results

    def health_check(self):
        return self.healthy


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_storage():
    """Fresh MockStorage instance for each test."""
    return MockStorage()


@pytest.fixture
def duckdb_storage(tmp_path):
    """DuckDB store on a per-test file."""
    storage = DuckDBStorage(db_path=str(tmp_path / "records.duckdb"))
    yield storage
    storage.close()


@pytest.fixture
def sample_insights():
    """Insight records: pricing x2, marketing x1, two high priority, one actionable."""
    return [
        make_insight_record(category="pricing", priority="high", actionable=True),
        make_insight_record(category="pricing", priority="high", actionable=False),
        make_insight_record(category="marketing", priority="low", actionable=False),
    ]


@pytest.fixture
def client():
    """
    FastAPI test client.

    Yields a (client, set_storage) pair; ``set_storage`` replaces the record
    store every route sees for the rest of the test.
    """
    from bizpulse.dependencies import get_storage
    from bizpulse.main import app

    with TestClient(app) as c:
        def set_storage(storage: Optional[RecordStore]) -> None:
            app.dependency_overrides[get_storage] = lambda: storage

        yield c, set_storage

    app.dependency_overrides.clear()
