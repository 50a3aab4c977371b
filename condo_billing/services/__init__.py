"""Billing services and the use cases wrapping them."""

from .association_reconciler import (
    EMPLOYEE_CONDOMINIUMS,
    PROVIDER_CONDOMINIUMS,
    AssociationKind,
    AssociationReconciler,
)
from .compensation_ledger import CompensationLedger
from .payroll_report import PayrollReportService, filter_by_period, total_salaries
from .use_cases import (
    DeleteCompensation,
    ReconcileEmployeeCondominiums,
    ReconcileProviderCondominiums,
    SaveCompensation,
    SummarizePayroll,
)

__all__ = [
    "EMPLOYEE_CONDOMINIUMS",
    "PROVIDER_CONDOMINIUMS",
    "AssociationKind",
    "AssociationReconciler",
    "CompensationLedger",
    "DeleteCompensation",
    "PayrollReportService",
    "ReconcileEmployeeCondominiums",
    "ReconcileProviderCondominiums",
    "SaveCompensation",
    "SummarizePayroll",
    "filter_by_period",
    "total_salaries",
]
