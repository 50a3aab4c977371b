"""Record store contract and its implementations."""

from .base import RecordStore
from .memory_store import InMemoryRecordStore
from .sql_store import SqlRecordStore

__all__ = ["InMemoryRecordStore", "RecordStore", "SqlRecordStore"]
