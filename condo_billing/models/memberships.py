"""Join tables linking employees and providers to condominiums."""
from __future__ import annotations

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class EmployeeCondominium(Base):
    """Membership of an employee in a condominium's staff."""

    __tablename__ = "employee_condominiums"
    __table_args__ = (UniqueConstraint("employee_id", "condominium_id"),)

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    condominium_id: Mapped[str] = mapped_column(
        ForeignKey("condominiums.id", ondelete="CASCADE"), nullable=False, index=True
    )


class ProviderCondominium(Base):
    """Condominium served by a provider."""

    __tablename__ = "provider_condominiums"
    __table_args__ = (UniqueConstraint("provider_id", "condominium_id"),)

    id: Mapped[str] = mapped_column(ID_TYPE, primary_key=True)
    provider_id: Mapped[str] = mapped_column(
        ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    condominium_id: Mapped[str] = mapped_column(
        ForeignKey("condominiums.id", ondelete="CASCADE"), nullable=False, index=True
    )
