"""Dictionary backed record store for tests and database-less callers."""
from __future__ import annotations

import copy
import uuid
from typing import Any, Callable, Iterable, Mapping, Sequence

from condo_billing.core.errors import PersistenceError

from .base import Filter, Record, matches, parse_order, require_filter

DEFAULT_UNIQUE_KEYS: dict[str, tuple[str, ...]] = {
    "employee_condominiums": ("employee_id", "condominium_id"),
    "provider_condominiums": ("provider_id", "condominium_id"),
}


def _sort_key(field: str) -> Callable[[Record], tuple[bool, Any]]:
    def key(record: Record) -> tuple[bool, Any]:
        value = record.get(field)
        return (value is None, value)

    return key


class InMemoryRecordStore:
    """``RecordStore`` keeping collections in process memory.

    Records are copied on the way in and out so callers never share mutable
    state with the store. Unique keys mirror the join table constraints of the
    SQL schema.
    """

    def __init__(
        self,
        *,
        unique_keys: Mapping[str, tuple[str, ...]] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._collections: dict[str, dict[str, Record]] = {}
        self._unique_keys = dict(DEFAULT_UNIQUE_KEYS if unique_keys is None else unique_keys)
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    def _rows(self, collection: str) -> dict[str, Record]:
        return self._collections.setdefault(collection, {})

    def _check_unique(self, collection: str, candidate: Record, operation: str) -> None:
        fields = self._unique_keys.get(collection)
        if not fields:
            return
        signature = tuple(candidate.get(name) for name in fields)
        for row_id, row in self._rows(collection).items():
            if row_id == candidate["id"]:
                continue
            if tuple(row.get(name) for name in fields) == signature:
                raise PersistenceError(
                    collection,
                    operation,
                    ValueError(f"duplicate {dict(zip(fields, signature))}"),
                )

    def find_one(self, collection: str, filter: Filter) -> Record | None:
        for row in self._rows(collection).values():
            if matches(row, filter):
                return copy.deepcopy(row)
        return None

    def find_all(
        self,
        collection: str,
        filter: Filter,
        order_by: Sequence[str] = (),
    ) -> list[Record]:
        rows = [copy.deepcopy(row) for row in self._rows(collection).values() if matches(row, filter)]
        for field, descending in reversed(parse_order(order_by)):
            rows.sort(key=_sort_key(field), reverse=descending)
        return rows

    def upsert(self, collection: str, key: Filter, fields: Mapping[str, Any]) -> Record:
        rows = self._rows(collection)
        existing = next((row for row in rows.values() if matches(row, key)), None)
        if existing is not None:
            candidate = {**existing, **copy.deepcopy(dict(fields)), "id": existing["id"]}
        else:
            record_id = str(key["id"]) if "id" in key else self._new_id()
            candidate = {**copy.deepcopy(dict(key)), **copy.deepcopy(dict(fields)), "id": record_id}
        self._check_unique(collection, candidate, "upsert")
        rows[candidate["id"]] = candidate
        return copy.deepcopy(candidate)

    def delete_where(self, collection: str, filter: Filter) -> int:
        require_filter(filter, "delete_where")
        rows = self._rows(collection)
        doomed = [row_id for row_id, row in rows.items() if matches(row, filter)]
        for row_id in doomed:
            del rows[row_id]
        return len(doomed)

    def insert_many(self, collection: str, records: Iterable[Mapping[str, Any]]) -> None:
        rows = self._rows(collection)
        staged: dict[str, Record] = {}
        for record in records:
            candidate = copy.deepcopy(dict(record))
            candidate.setdefault("id", self._new_id())
            if candidate["id"] in rows or candidate["id"] in staged:
                raise PersistenceError(
                    collection, "insert_many", ValueError(f"duplicate id {candidate['id']}")
                )
            staged[candidate["id"]] = candidate
        # check every row before inserting any
        pending = dict(rows)
        for row_id, candidate in staged.items():
            fields = self._unique_keys.get(collection)
            if fields:
                signature = tuple(candidate.get(name) for name in fields)
                if any(tuple(row.get(name) for name in fields) == signature for row in pending.values()):
                    raise PersistenceError(
                        collection,
                        "insert_many",
                        ValueError(f"duplicate {dict(zip(fields, signature))}"),
                    )
            pending[row_id] = candidate
        rows.update(staged)

    def count(self, collection: str) -> int:
        return len(self._rows(collection))
