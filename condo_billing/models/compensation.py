"""ORM models for monthly employee compensations and their payments."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base

_AMOUNT = Numeric(18, 4)
_TOTAL = Numeric(18, 2)


class EmployeeCompensation(Base):
    """Itemised compensation of one employee for one month.

    ``total_compensation`` is always written by the ledger from the itemised
    amounts.
    """

    __tablename__ = "employee_compensations"

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    net_salary: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    social_security: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    union_contribution: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    total_compensation: Mapped[Decimal] = mapped_column(_TOTAL, nullable=False)
    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class EmployeePayment(Base):
    """Payment projection of an ``EmployeeCompensation``.

    ``compensation_id`` carries no foreign key: rows written before paired
    deletes existed may point at compensations that are gone.
    """

    __tablename__ = "employee_payments"

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    compensation_id: Mapped[str | None] = mapped_column(ID_TYPE, index=True)
    employee_id: Mapped[str] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    condominium_id: Mapped[str] = mapped_column(
        ForeignKey("condominiums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    social_security: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    union_fee: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    deductions: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(_TOTAL, nullable=False)
    payment_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
