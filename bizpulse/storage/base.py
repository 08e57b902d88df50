"""
Abstract record store interface.

The analytics core only ever needs three operations from persistence: create a
record in a collection, list a user's records newest first, and report whether
the backend is reachable. Implementations own id generation and the
``created_at`` / ``updated_at`` timestamps.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, Field

from bizpulse.models.enums import Collection


class StorageError(Exception):
    """Base exception for all storage operation failures."""

    pass


class ReadResult(BaseModel):
    """
    Outcome of a read that is allowed to degrade.

    A failed read is reported as an empty, ``degraded`` result instead of an
    exception so callers can keep serving partial data and still tell the
    difference between "no records" and "could not read records".
    """

    records: list[dict[str, Any]] = Field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "ReadResult":
        return cls(records=[], degraded=True, error=error)


class RecordStore(ABC):
    """
    Abstract base class for record store implementations.

    Implementations should ensure:
    - Every created record gets a unique string ``id``
    - ``find_by_user_id`` returns records ordered by ``created_at`` descending
    - Failures surface as ``StorageError`` with the original cause chained
    """

    @abstractmethod
    def create(self, collection: Collection, data: dict) -> dict:
        """
        Persist a new record.

        Args:
            collection: Target logical collection
            data: Record fields (snake_case keys, must include ``user_id``)

        Returns:
            The stored record: generated ``id``, every input field, and the
            store-assigned ``created_at`` / ``updated_at`` ISO timestamps

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def find_by_user_id(
        self,
        collection: Collection,
        user_id: str,
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """
        List a user's records in a collection, newest first.

        Args:
            collection: Logical collection to read
            user_id: Owning user
            filters: Optional exact-match conditions on top-level record fields
            limit: Maximum number of records to return

        Returns:
            Records ordered by ``created_at`` descending

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Return True when the backend can serve reads and writes."""
        pass

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""
        return None
