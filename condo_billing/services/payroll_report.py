"""Read side aggregation of employee payments per condominium."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from condo_billing.core.errors import ValidationError
from condo_billing.core.logger import get_logger
from condo_billing.core.money import format_currency, round_currency
from condo_billing.domain.records import (
    MONTH_NAMES,
    PaymentRecord,
    PaymentStatus,
    PayrollSummary,
)
from condo_billing.repositories.base import RecordStore

from .association_reconciler import EMPLOYEE_CONDOMINIUMS, AssociationReconciler
from .compensation_ledger import PAYMENTS

LOGGER = get_logger(__name__)


def filter_by_period(
    payments: Iterable[PaymentRecord],
    month: int | None = None,
    year: int | None = None,
) -> list[PaymentRecord]:
    """Keep payments of ``month`` and/or ``year``; ``None`` matches any."""

    return [
        payment
        for payment in payments
        if (month is None or payment.month == month)
        and (year is None or payment.year == year)
    ]


def total_salaries(payments: Iterable[PaymentRecord]) -> Decimal:
    return round_currency(sum((payment.total_amount for payment in payments), Decimal(0)))


def period_label(month: int | None, year: int | None) -> str:
    if month is None and year is None:
        return "Todos los períodos"
    if month is None:
        return str(year)
    name = MONTH_NAMES[month - 1]
    return name if year is None else f"{name} {year}"


class PayrollReportService:
    """Totals of what a condominium paid its staff."""

    def __init__(
        self,
        store: RecordStore,
        *,
        currency_symbol: str = "$",
        payments: str = PAYMENTS,
    ) -> None:
        self._store = store
        self._staff = AssociationReconciler(store, EMPLOYEE_CONDOMINIUMS)
        self._currency_symbol = currency_symbol
        self._payments = payments

    def payments_for_condominium(self, condominium_id: str) -> list[PaymentRecord]:
        """Return paid payments of the condominium's staff, newest first."""

        if not condominium_id:
            raise ValidationError("condominium_id is required", field="condominium_id")
        employee_ids = self._staff.members(condominium_id)
        if not employee_ids:
            LOGGER.debug("Condominium %s has no employees", condominium_id)
            return []
        rows = self._store.find_all(
            self._payments,
            {"employee_id": employee_ids, "status": PaymentStatus.PAID.value},
            order_by=("-payment_date",),
        )
        return [PaymentRecord.from_row(row) for row in rows]

    def summarize(
        self,
        condominium_id: str,
        month: int | None = None,
        year: int | None = None,
    ) -> PayrollSummary:
        if month is not None and not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12", field="month")
        payments = filter_by_period(self.payments_for_condominium(condominium_id), month, year)
        total = total_salaries(payments)
        return PayrollSummary(
            condominium_id=condominium_id,
            period_label=period_label(month, year),
            payment_count=len(payments),
            total=total,
            formatted_total=format_currency(total, self._currency_symbol),
        )
