"""
Integration tests for the DuckDB record store against a real database file.
"""

import pytest

from bizpulse.config import Settings
from bizpulse.models.enums import Collection
from bizpulse.storage import DuckDBStorage, StorageError, build_storage


class TestDuckDBCreate:
    def test_create_assigns_id_and_timestamps(self, duckdb_storage):
        record = duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "metric_type": "revenue", "value": 4.0})

        assert record["id"]
        assert record["user_id"] == "u1"
        assert record["metric_type"] == "revenue"
        assert record["created_at"] == record["updated_at"]

    def test_create_ignores_caller_supplied_identity(self, duckdb_storage):
        record = duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "id": "forged", "value": 1})
        assert record["id"] != "forged"

    def test_create_requires_user_id(self, duckdb_storage):
        with pytest.raises(StorageError):
            duckdb_storage.create(Collection.METRICS, {"metric_type": "revenue"})

    def test_created_ids_are_unique(self, duckdb_storage):
        ids = {duckdb_storage.create(Collection.SALES, {"user_id": "u1"})["id"] for _ in range(5)}
        assert len(ids) == 5


class TestDuckDBFind:
    def test_newest_first(self, duckdb_storage):
        for i in range(3):
            duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "value": i})

        values = [r["value"] for r in duckdb_storage.find_by_user_id(Collection.METRICS, "u1")]

        assert values == [2, 1, 0]

    def test_scoped_by_user_and_collection(self, duckdb_storage):
        duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "value": 1})
        duckdb_storage.create(Collection.METRICS, {"user_id": "u2", "value": 2})
        duckdb_storage.create(Collection.PRODUCTS, {"user_id": "u1", "product_name": "Desk"})

        records = duckdb_storage.find_by_user_id(Collection.METRICS, "u1")

        assert [r["value"] for r in records] == [1]

    def test_filters_match_payload_fields(self, duckdb_storage):
        duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "metric_type": "products", "value": 1})
        duckdb_storage.create(Collection.METRICS, {"user_id": "u1", "metric_type": "revenue", "value": 2})

        records = duckdb_storage.find_by_user_id(Collection.METRICS, "u1", filters={"metric_type": "products"})

        assert [r["metric_type"] for r in records] == ["products"]

    def test_limit(self, duckdb_storage):
        for i in range(5):
            duckdb_storage.create(Collection.SALES, {"user_id": "u1", "quantity": i})

        assert len(duckdb_storage.find_by_user_id(Collection.SALES, "u1", limit=2)) == 2

    def test_invalid_filter_field(self, duckdb_storage):
        with pytest.raises(StorageError):
            duckdb_storage.find_by_user_id(Collection.METRICS, "u1", filters={"x; DROP TABLE records": 1})

    def test_nested_payload_round_trips(self, duckdb_storage):
        duckdb_storage.create(
            Collection.METRICS,
            {"user_id": "u1", "metric_type": "ai_insight", "value": 0.5, "metadata": {"tags": ["a", "b"]}},
        )

        record = duckdb_storage.find_by_user_id(Collection.METRICS, "u1")[0]

        assert record["metadata"] == {"tags": ["a", "b"]}

    def test_records_survive_reopen(self, tmp_path):
        path = str(tmp_path / "reopen.duckdb")
        first = DuckDBStorage(db_path=path)
        first.create(Collection.PRODUCTS, {"user_id": "u1", "product_name": "Lamp"})
        first.close()

        second = DuckDBStorage(db_path=path)
        try:
            assert [r["product_name"] for r in second.find_by_user_id(Collection.PRODUCTS, "u1")] == ["Lamp"]
        finally:
            second.close()


class TestBuildStorage:
    def test_health_check(self, duckdb_storage):
        assert duckdb_storage.health_check() is True

    def test_backend_none_is_not_configured(self):
        assert build_storage(Settings(store_backend="none")) is None

    def test_unknown_backend(self):
        assert build_storage(Settings(store_backend="firestore")) is None

    def test_duckdb_backend(self, tmp_path):
        storage = build_storage(Settings(store_backend="duckdb", db_path=str(tmp_path / "b.duckdb")))
        try:
            assert isinstance(storage, DuckDBStorage)
        finally:
            storage.close()
