"""Entry points called by the console's form handlers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from sqlalchemy.orm import Session

from condo_billing.core.config import get_settings
from condo_billing.domain.records import (
    CompensationPeriod,
    DeletedCompensation,
    PayrollSummary,
    ReconcileResult,
    SavedCompensation,
)
from condo_billing.repositories.sql_store import SqlRecordStore

from .association_reconciler import (
    EMPLOYEE_CONDOMINIUMS,
    PROVIDER_CONDOMINIUMS,
    AssociationReconciler,
)
from .compensation_ledger import CompensationLedger
from .payroll_report import PayrollReportService


@dataclass
class SaveCompensation:
    session: Session

    def execute(
        self,
        employee_id: str,
        period: CompensationPeriod | str | Mapping[str, Any],
        fields: Mapping[str, Any],
        *,
        compensation_id: str | None = None,
        condominium_id: str | None = None,
    ) -> SavedCompensation:
        ledger = CompensationLedger(SqlRecordStore(self.session))
        return ledger.save(
            employee_id,
            period,
            fields,
            compensation_id,
            condominium_id=condominium_id,
        )


@dataclass
class DeleteCompensation:
    session: Session

    def execute(self, compensation_id: str) -> DeletedCompensation:
        ledger = CompensationLedger(SqlRecordStore(self.session))
        return ledger.delete(compensation_id)


@dataclass
class ReconcileEmployeeCondominiums:
    session: Session

    def execute(self, employee_id: str, condominium_ids: Iterable[str]) -> ReconcileResult:
        reconciler = AssociationReconciler(SqlRecordStore(self.session), EMPLOYEE_CONDOMINIUMS)
        return reconciler.reconcile(employee_id, condominium_ids)


@dataclass
class ReconcileProviderCondominiums:
    session: Session

    def execute(self, provider_id: str, condominium_ids: Iterable[str]) -> ReconcileResult:
        reconciler = AssociationReconciler(SqlRecordStore(self.session), PROVIDER_CONDOMINIUMS)
        return reconciler.reconcile(provider_id, condominium_ids)


@dataclass
class SummarizePayroll:
    session: Session

    def execute(
        self,
        condominium_id: str,
        *,
        month: int | None = None,
        year: int | None = None,
    ) -> PayrollSummary:
        service = PayrollReportService(
            SqlRecordStore(self.session),
            currency_symbol=get_settings().billing.currency_symbol,
        )
        return service.summarize(condominium_id, month=month, year=year)
