"""Entities owned by the administrative screens, referenced by billing rows."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class Condominium(Base):
    __tablename__ = "condominiums"

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    position: Mapped[str | None] = mapped_column(String(120))


class Provider(Base):
    __tablename__ = "providers"

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
