"""SQLAlchemy backed record store over the billing tables."""
from __future__ import annotations

import uuid
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import MetaData, Table, delete, insert, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from condo_billing.core.errors import PersistenceError
from condo_billing.core.logger import get_logger
from condo_billing.models import Base

from .base import Filter, Record, is_multi_value, parse_order, require_filter

LOGGER = get_logger(__name__)


class SqlRecordStore:
    """``RecordStore`` issuing one committed statement group per operation.

    Nothing spans two operations: the billing services assume single-row
    atomicity only, so every call commits (or rolls back) before returning.
    """

    def __init__(self, session: Session, metadata: MetaData | None = None) -> None:
        self._session = session
        self._metadata = metadata or Base.metadata

    def _table(self, collection: str, operation: str) -> Table:
        try:
            return self._metadata.tables[collection]
        except KeyError:
            raise PersistenceError(
                collection, operation, LookupError(f"unknown collection {collection!r}")
            ) from None

    @staticmethod
    def _where(table: Table, filter: Filter) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        for field, expected in filter.items():
            column = table.c[field]
            if is_multi_value(expected):
                clauses.append(column.in_(list(expected)))
            elif expected is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == expected)
        return clauses or [true()]

    def _fail(self, collection: str, operation: str, exc: SQLAlchemyError) -> PersistenceError:
        self._session.rollback()
        LOGGER.warning("Store %s on %s failed: %s", operation, collection, exc)
        return PersistenceError(collection, operation, exc)

    def find_one(self, collection: str, filter: Filter) -> Record | None:
        table = self._table(collection, "find_one")
        try:
            row = (
                self._session.execute(select(table).where(*self._where(table, filter)).limit(1))
                .mappings()
                .first()
            )
        except SQLAlchemyError as exc:
            raise self._fail(collection, "find_one", exc) from exc
        return None if row is None else dict(row)

    def find_all(
        self,
        collection: str,
        filter: Filter,
        order_by: Sequence[str] = (),
    ) -> list[Record]:
        table = self._table(collection, "find_all")
        statement = select(table).where(*self._where(table, filter))
        for field, descending in parse_order(order_by):
            column = table.c[field]
            statement = statement.order_by(column.desc() if descending else column.asc())
        try:
            rows = self._session.execute(statement).mappings().all()
        except SQLAlchemyError as exc:
            raise self._fail(collection, "find_all", exc) from exc
        return [dict(row) for row in rows]

    def upsert(self, collection: str, key: Filter, fields: Mapping[str, Any]) -> Record:
        table = self._table(collection, "upsert")
        try:
            record_id = self._session.execute(
                select(table.c.id).where(*self._where(table, key)).limit(1)
            ).scalar()
            if record_id is not None:
                values = {name: value for name, value in fields.items() if name != "id"}
                if values:
                    self._session.execute(
                        update(table).where(table.c.id == record_id).values(**values)
                    )
            else:
                record_id = str(key["id"]) if "id" in key else str(uuid.uuid4())
                self._session.execute(
                    insert(table).values(**{**dict(key), **dict(fields), "id": record_id})
                )
            self._session.commit()
            row = (
                self._session.execute(select(table).where(table.c.id == record_id))
                .mappings()
                .one()
            )
        except SQLAlchemyError as exc:
            raise self._fail(collection, "upsert", exc) from exc
        return dict(row)

    def delete_where(self, collection: str, filter: Filter) -> int:
        require_filter(filter, "delete_where")
        table = self._table(collection, "delete_where")
        try:
            result = self._session.execute(delete(table).where(*self._where(table, filter)))
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(collection, "delete_where", exc) from exc
        return int(result.rowcount or 0)

    def insert_many(self, collection: str, records: Iterable[Mapping[str, Any]]) -> None:
        rows = [{"id": str(uuid.uuid4()), **dict(record)} for record in records]
        if not rows:
            return
        table = self._table(collection, "insert_many")
        try:
            self._session.execute(insert(table), rows)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(collection, "insert_many", exc) from exc
