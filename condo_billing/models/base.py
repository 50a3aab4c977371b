"""Base declarative class for SQLAlchemy models."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase

ID_TYPE = String(36)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass
