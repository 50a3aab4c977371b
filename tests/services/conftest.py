from __future__ import annotations

from typing import Any

import pytest

from condo_billing.core.errors import PersistenceError
from condo_billing.repositories import InMemoryRecordStore


class FlakyStore(InMemoryRecordStore):
    """In-memory store that fails chosen operations once."""

    def __init__(self) -> None:
        super().__init__()
        self._failures: set[tuple[str, str]] = set()

    def fail_next(self, collection: str, operation: str) -> None:
        self._failures.add((collection, operation))

    def _maybe_fail(self, collection: str, operation: str) -> None:
        if (collection, operation) in self._failures:
            self._failures.discard((collection, operation))
            raise PersistenceError(collection, operation, ConnectionError("connection reset"))

    def upsert(self, collection: str, key: Any, fields: Any):
        self._maybe_fail(collection, "upsert")
        return super().upsert(collection, key, fields)

    def delete_where(self, collection: str, filter: Any) -> int:
        self._maybe_fail(collection, "delete_where")
        return super().delete_where(collection, filter)

    def insert_many(self, collection: str, records: Any) -> None:
        self._maybe_fail(collection, "insert_many")
        super().insert_many(collection, records)


@pytest.fixture()
def flaky_store() -> FlakyStore:
    return FlakyStore()
