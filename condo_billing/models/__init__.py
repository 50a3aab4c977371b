"""Database models for the billing tables."""
from __future__ import annotations

from .base import Base
from .compensation import EmployeeCompensation, EmployeePayment
from .directory import Condominium, Employee, Provider
from .memberships import EmployeeCondominium, ProviderCondominium

__all__ = [
    "Base",
    "Condominium",
    "Employee",
    "EmployeeCompensation",
    "EmployeeCondominium",
    "EmployeePayment",
    "Provider",
    "ProviderCondominium",
]
