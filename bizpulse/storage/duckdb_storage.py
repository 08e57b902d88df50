"""
DuckDB implementation of the record store.

All three logical collections share one ``records`` table. Record fields are
kept verbatim in a JSON ``payload`` column; identity, ownership, ordering and
timestamps live in real columns so the per-user listing stays an indexed scan.

Key features:
- Per-thread cursors over a single database instance
- Idempotent schema creation on first use
- Exact-match filtering on payload fields via ``json_extract_string``
- Stable newest-first ordering (``created_at`` then insertion sequence)
"""

import json
import re
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

import duckdb
import structlog

from bizpulse.models.enums import Collection

from .base import RecordStore, StorageError

logger = structlog.get_logger(__name__)

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_RESERVED_FIELDS = ("id", "user_id", "created_at", "updated_at")


def _filter_value(value: Any) -> str:
    """Render a filter value the way json_extract_string renders payload scalars."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DuckDBStorage(RecordStore):
    """
    DuckDB-backed record store.

    Attributes:
        db_path: Database file path, or ``:memory:``
        _root: Connection owning the database instance
        _local: Thread-local storage for per-thread cursors
        _lock: Guards schema initialization
    """

    def __init__(self, db_path: str = "./data/bizpulse.duckdb"):
        """
        Initialize DuckDB storage backend.

        Args:
            db_path: Path to DuckDB database file, or ``:memory:``
        """
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._local = threading.local()
        self._lock = threading.Lock()
        self._initialized = False

        try:
            self._root = duckdb.connect(db_path)
        except Exception as e:
            logger.error("duckdb_connection_failed", db_path=db_path, error=str(e))
            raise StorageError(f"Failed to connect to DuckDB: {e}") from e

        logger.info("duckdb_storage_initialized", db_path=db_path)
        self._initialize_schema()

    @contextmanager
    def _get_connection(self):
        """
        Get a thread-local cursor on the shared database.

        Yields:
            DuckDB connection instance
        """
        if not hasattr(self._local, "connection"):
            self._local.connection = self._root.cursor()
            logger.debug("duckdb_cursor_created", thread_id=threading.get_ident())
        yield self._local.connection

    def _initialize_schema(self) -> None:
        """Create the records table, its sequence and indexes if missing."""
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return
            try:
                with self._get_connection() as conn:
                    conn.execute("CREATE SEQUENCE IF NOT EXISTS record_seq START 1")
                    conn.execute("""
                        CREATE TABLE IF NOT EXISTS records (
                            id VARCHAR PRIMARY KEY,
                            seq BIGINT NOT NULL,
                            collection VARCHAR NOT NULL,
                            user_id VARCHAR NOT NULL,
                            payload JSON NOT NULL,
                            created_at VARCHAR NOT NULL,
                            updated_at VARCHAR NOT NULL
                        )
                    """)
                    conn.execute("""
                        CREATE INDEX IF NOT EXISTS idx_records_owner
                        ON records(collection, user_id)
                    """)
                self._initialized = True
                logger.info("duckdb_schema_initialized")
            except Exception as e:
                logger.error("duckdb_schema_initialization_failed", error=str(e))
                raise StorageError(f"Failed to initialize schema: {e}") from e

    def clear_for_testing(self) -> None:
        """Delete every record. Used by integration tests between cases."""
        with self._get_connection() as conn:
            conn.execute("DELETE FROM records")

    def create(self, collection: Collection, data: dict) -> dict:
        """Insert one record and return it with id and timestamps."""
        user_id = data.get("user_id")
        if not user_id:
            raise StorageError("Cannot create a record without user_id")

        name = Collection(collection).value
        record_id = str(uuid4())
        now = datetime.now(timezone.utc).isoformat()
        payload = {k: v for k, v in data.items() if k not in _RESERVED_FIELDS}

        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO records (
                        id, seq, collection, user_id, payload, created_at, updated_at
                    ) VALUES (?, nextval('record_seq'), ?, ?, ?, ?, ?)
                    """,
                    [
                        record_id,
                        name,
                        str(user_id),
                        json.dumps(payload, default=str),
                        now,
                        now,
                    ],
                )
        except Exception as e:
            logger.error("record_create_failed", collection=name, error=str(e))
            raise StorageError(f"Failed to create record in {name}: {e}") from e

        logger.debug("record_created", collection=name, record_id=record_id)
        return {
            "id": record_id,
            **payload,
            "user_id": str(user_id),
            "created_at": now,
            "updated_at": now,
        }

    def find_by_user_id(
        self,
        collection: Collection,
        user_id: str,
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Read a user's records newest first, optionally filtered and limited."""
        name = Collection(collection).value
        query = """
            SELECT id, user_id, payload, created_at, updated_at
            FROM records
            WHERE collection = ? AND user_id = ?
        """
        params: list[Any] = [name, user_id]

        for field, value in (filters or {}).items():
            if not _FIELD_NAME.match(field):
                raise StorageError(f"Invalid filter field: {field!r}")
            query += " AND json_extract_string(payload, ?) = ?"
            params.extend([f"$.{field}", _filter_value(value)])

        query += " ORDER BY created_at DESC, seq DESC"
        if limit:
            query += " LIMIT ?"
            params.append(int(limit))

        try:
            with self._get_connection() as conn:
                rows = conn.execute(query, params).fetchall()
        except Exception as e:
            logger.error("record_read_failed", collection=name, error=str(e))
            raise StorageError(f"Failed to read {name}: {e}") from e

        records = []
        for row in rows:
            payload = json.loads(row[2]) if isinstance(row[2], str) else (row[2] or {})
            records.append({
                "id": row[0],
                **payload,
                "user_id": row[1],
                "created_at": row[3],
                "updated_at": row[4],
            })

        logger.debug("records_read", collection=name, count=len(records))
        return records

    def health_check(self) -> bool:
        try:
            with self._get_connection() as conn:
                conn.execute("SELECT 1").fetchone()
            return True
        except Exception as e:
            logger.warning("duckdb_health_check_failed", error=str(e))
            return False

    def close(self) -> None:
        try:
            self._root.close()
        except Exception as e:
            logger.warning("duckdb_close_failed", error=str(e))
