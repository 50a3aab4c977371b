"""Record store contract shared by the billing services."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, Sequence

Record = dict[str, Any]
Filter = Mapping[str, Any]

_MULTI_VALUE_TYPES = (set, frozenset, list, tuple)


class RecordStore(Protocol):
    """Per-collection CRUD with unique ids and single-row atomic writes.

    Filters are equality maps; a set, list, or tuple value matches any of its
    members. Implementations raise ``PersistenceError`` annotated with the
    collection and the operation on any store-level failure.
    """

    def find_one(self, collection: str, filter: Filter) -> Record | None: ...

    def find_all(
        self,
        collection: str,
        filter: Filter,
        order_by: Sequence[str] = (),
    ) -> list[Record]: ...

    def upsert(self, collection: str, key: Filter, fields: Mapping[str, Any]) -> Record: ...

    def delete_where(self, collection: str, filter: Filter) -> int: ...

    def insert_many(self, collection: str, records: Iterable[Mapping[str, Any]]) -> None: ...


def is_multi_value(value: object) -> bool:
    return isinstance(value, _MULTI_VALUE_TYPES)


def matches(record: Mapping[str, Any], filter: Filter) -> bool:
    """Return whether ``record`` satisfies every clause of ``filter``."""

    for field, expected in filter.items():
        actual = record.get(field)
        if is_multi_value(expected):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def parse_order(order_by: Sequence[str]) -> list[tuple[str, bool]]:
    """Split ``["-year", "month"]`` into ``[("year", True), ("month", False)]``."""

    return [
        (name[1:], True) if name.startswith("-") else (name, False)
        for name in order_by
    ]


def require_filter(filter: Filter, operation: str) -> None:
    if not filter:
        raise ValueError(f"{operation} requires a non-empty filter")
