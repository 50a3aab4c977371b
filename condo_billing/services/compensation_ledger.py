"""Monthly employee compensation and its paired payment record."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping

from condo_billing.core.errors import (
    AmbiguousAssociationError,
    NotFoundError,
    PersistenceError,
    UnassignedEmployeeError,
    ValidationError,
)
from condo_billing.core.logger import get_logger, log_context, timeit
from condo_billing.domain.records import (
    CompensationInput,
    CompensationPeriod,
    CompensationRecord,
    DeletedCompensation,
    PaymentRecord,
    PaymentStatus,
    SavedCompensation,
)
from condo_billing.repositories.base import RecordStore

from .association_reconciler import EMPLOYEE_CONDOMINIUMS, AssociationKind

LOGGER = get_logger(__name__)

COMPENSATIONS = "employee_compensations"
PAYMENTS = "employee_payments"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(value: object, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value)


def _period_of(row: Mapping[str, Any]) -> CompensationPeriod:
    return CompensationPeriod(year=int(row["year"]), month=int(row["month"]))


class CompensationLedger:
    """Computes compensations and keeps each one paired with its payment.

    The two records live in independent collections and no cross-record
    transaction is assumed. ``save`` always writes the compensation first and
    the payment second, both as keyed upserts, so replaying a failed call with
    the same arguments repairs whichever half is missing.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        clock: Callable[[], datetime] | None = None,
        compensations: str = COMPENSATIONS,
        payments: str = PAYMENTS,
        memberships: AssociationKind = EMPLOYEE_CONDOMINIUMS,
    ) -> None:
        self._store = store
        self._clock = clock or _utcnow
        self._compensations = compensations
        self._payments = payments
        self._memberships = memberships

    def compute(self, fields: Mapping[str, Any]) -> Decimal:
        """Validate raw form values and return the rounded compensation total.

        The result may be negative when deductions exceed the credited amounts.
        """

        CompensationPeriod.of(fields.get("month"), fields.get("year"))
        return CompensationInput.from_fields(fields).total

    def save(
        self,
        employee_id: str,
        period: CompensationPeriod | str | Mapping[str, Any],
        fields: Mapping[str, Any],
        existing_compensation_id: str | None = None,
        *,
        condominium_id: str | None = None,
    ) -> SavedCompensation:
        """Upsert the compensation for ``period`` and then its payment.

        ``existing_compensation_id`` selects the record being edited; without it
        the compensation is keyed by employee and period. ``condominium_id``
        picks the paying condominium when the employee is linked to several.
        """

        employee_id = _require_id(employee_id, "employee_id")
        period = CompensationPeriod.parse(period)
        self._check_period_fields(fields, period)
        amounts = CompensationInput.from_fields(fields)
        total = amounts.total

        with log_context.scoped(employee=employee_id, period=period.key):
            resolved_condominium = self._resolve_condominium(employee_id, condominium_id)
            existing = self._existing_compensation(employee_id, period, existing_compensation_id)
            if existing is None:
                paired = self._paired_payment(None, employee_id, period)
            else:
                paired = self._paired_payment(existing["id"], employee_id, _period_of(existing))

            now = self._clock()
            compensation_fields: dict[str, Any] = {
                "employee_id": employee_id,
                "net_salary": amounts.net_salary,
                "social_security": amounts.social_security,
                "union_contribution": amounts.union_contribution,
                "other_deductions": amounts.other_deductions,
                "total_compensation": total,
                "month": period.month,
                "year": period.year,
                "updated_at": now,
            }
            if existing is None:
                compensation_fields["created_at"] = now
                key: dict[str, Any] = {
                    "employee_id": employee_id,
                    "month": period.month,
                    "year": period.year,
                }
            else:
                key = {"id": existing["id"]}

            with timeit("Compensation save", logger=LOGGER) as timer:
                try:
                    compensation_row = self._store.upsert(
                        self._compensations, key, compensation_fields
                    )
                except PersistenceError:
                    LOGGER.exception("Compensation write failed; nothing was saved")
                    raise
                timer.add()

                payment_fields = {
                    "compensation_id": compensation_row["id"],
                    "employee_id": employee_id,
                    "condominium_id": resolved_condominium,
                    "month": period.month,
                    "year": period.year,
                    "base_salary": amounts.net_salary,
                    "social_security": amounts.social_security,
                    "union_fee": amounts.union_contribution,
                    "deductions": amounts.other_deductions,
                    "total_amount": total,
                    "payment_date": now.date(),
                    "status": PaymentStatus.PAID.value,
                }
                if paired is None:
                    payment_key: dict[str, Any] = {"compensation_id": compensation_row["id"]}
                else:
                    payment_key = {"id": paired["id"]}
                try:
                    payment_row = self._store.upsert(self._payments, payment_key, payment_fields)
                except PersistenceError as exc:
                    LOGGER.exception(
                        "Payment write failed after compensation %s was saved; "
                        "replay the save to repair",
                        compensation_row["id"],
                    )
                    raise exc.with_applied((self._compensations,)) from exc
                timer.add()

            LOGGER.info(
                "Saved compensation %s for condominium %s (total %s)",
                compensation_row["id"],
                resolved_condominium,
                total,
            )
        return SavedCompensation(
            compensation=CompensationRecord.from_row(compensation_row),
            payment=PaymentRecord.from_row(payment_row),
            created=existing is None,
        )

    def delete(self, compensation_id: str) -> DeletedCompensation:
        """Delete a compensation together with its payment.

        Payments go first, including a legacy payment matched on employee and
        period. If the compensation delete then fails, calling ``delete``
        again finishes the job.
        """

        compensation = self._compensation_row(compensation_id)
        compensation_id = str(compensation["id"])

        payment_ids = [
            row["id"]
            for row in self._store.find_all(self._payments, {"compensation_id": compensation_id})
        ]
        legacy = self._paired_payment(
            None, str(compensation["employee_id"]), _period_of(compensation)
        )
        if legacy is not None:
            payment_ids.append(legacy["id"])

        payments_deleted = 0
        if payment_ids:
            try:
                payments_deleted = self._store.delete_where(self._payments, {"id": payment_ids})
            except PersistenceError:
                LOGGER.exception(
                    "Payment delete failed; compensation %s was left in place", compensation_id
                )
                raise
        try:
            self._store.delete_where(self._compensations, {"id": compensation_id})
        except PersistenceError as exc:
            LOGGER.exception(
                "Compensation %s survived after its payments were deleted", compensation_id
            )
            raise exc.with_applied((self._payments,)) from exc

        LOGGER.info(
            "Deleted compensation %s and %d payment(s)", compensation_id, payments_deleted
        )
        return DeletedCompensation(
            compensation_id=compensation_id, payments_deleted=payments_deleted
        )

    def get(self, compensation_id: str) -> CompensationRecord:
        return CompensationRecord.from_row(self._compensation_row(compensation_id))

    def history(self, employee_id: str) -> list[CompensationRecord]:
        """Return the employee's compensations, newest period first."""

        employee_id = _require_id(employee_id, "employee_id")
        rows = self._store.find_all(
            self._compensations,
            {"employee_id": employee_id},
            order_by=("-year", "-month"),
        )
        return [CompensationRecord.from_row(row) for row in rows]

    def set_payment_status(self, compensation_id: str, status: object) -> PaymentRecord:
        """Mark the payment of a compensation as paid or pending."""

        new_status = PaymentStatus.parse(status)
        compensation = self._compensation_row(compensation_id)
        payment = self._paired_payment(
            compensation["id"], str(compensation["employee_id"]), _period_of(compensation)
        )
        if payment is None:
            raise NotFoundError(self._payments, compensation_id)

        payment_date = self._clock().date() if new_status is PaymentStatus.PAID else None
        row = self._store.upsert(
            self._payments,
            {"id": payment["id"]},
            {
                "compensation_id": compensation["id"],
                "status": new_status.value,
                "payment_date": payment_date,
            },
        )
        LOGGER.info("Payment %s marked %s", row["id"], new_status.value)
        return PaymentRecord.from_row(row)

    def find_orphaned_payments(self) -> list[PaymentRecord]:
        """Return payments left without their compensation.

        Rows without a ``compensation_id`` are matched on employee and period
        instead.
        """

        compensations = self._store.find_all(self._compensations, {})
        compensation_ids = {row["id"] for row in compensations}
        periods = {(row["employee_id"], row["month"], row["year"]) for row in compensations}

        orphans: list[PaymentRecord] = []
        for row in self._store.find_all(self._payments, {}, order_by=("year", "month")):
            linked = row.get("compensation_id")
            if linked is None:
                if (row["employee_id"], row["month"], row["year"]) in periods:
                    continue
            elif linked in compensation_ids:
                continue
            orphans.append(PaymentRecord.from_row(row))
        return orphans

    def purge_orphaned_payments(self) -> int:
        orphan_ids = [payment.id for payment in self.find_orphaned_payments()]
        if not orphan_ids:
            return 0
        deleted = self._store.delete_where(self._payments, {"id": orphan_ids})
        LOGGER.warning("Purged %d orphaned payment(s)", deleted)
        return deleted

    def _compensation_row(self, compensation_id: str) -> dict[str, Any]:
        compensation_id = _require_id(compensation_id, "compensation_id")
        row = self._store.find_one(self._compensations, {"id": compensation_id})
        if row is None:
            raise NotFoundError(self._compensations, compensation_id)
        return row

    def _paired_payment(
        self,
        compensation_id: str | None,
        employee_id: str,
        period: CompensationPeriod,
    ) -> dict[str, Any] | None:
        """Return the payment paired with a compensation.

        Payments written before the link existed have no ``compensation_id``
        and are matched on employee and period instead.
        """

        if compensation_id is not None:
            payment = self._store.find_one(self._payments, {"compensation_id": compensation_id})
            if payment is not None:
                return payment
        return self._store.find_one(
            self._payments,
            {
                "compensation_id": None,
                "employee_id": employee_id,
                "month": period.month,
                "year": period.year,
            },
        )

    def _resolve_condominium(self, employee_id: str, requested: str | None) -> str:
        kind = self._memberships
        rows = self._store.find_all(kind.join_collection, {kind.owner_field: employee_id})
        linked = {str(row[kind.target_field]) for row in rows}
        if not linked:
            raise UnassignedEmployeeError(employee_id)
        if requested is not None:
            if requested not in linked:
                raise UnassignedEmployeeError(
                    employee_id,
                    f"Employee {employee_id} is not assigned to condominium {requested}",
                )
            return requested
        if len(linked) > 1:
            raise AmbiguousAssociationError(employee_id, linked)
        return next(iter(linked))

    def _existing_compensation(
        self,
        employee_id: str,
        period: CompensationPeriod,
        compensation_id: str | None,
    ) -> dict[str, Any] | None:
        by_period = self._store.find_one(
            self._compensations,
            {"employee_id": employee_id, "month": period.month, "year": period.year},
        )
        if compensation_id is None:
            return by_period

        existing = self._store.find_one(self._compensations, {"id": compensation_id})
        if existing is None:
            raise NotFoundError(self._compensations, compensation_id)
        if str(existing["employee_id"]) != employee_id:
            raise ValidationError(
                f"Compensation {compensation_id} belongs to another employee",
                field="existing_compensation_id",
            )
        if by_period is not None and by_period["id"] != existing["id"]:
            raise ValidationError(
                f"A compensation for {period.label} already exists", field="period"
            )
        return existing

    @staticmethod
    def _check_period_fields(fields: Mapping[str, Any], period: CompensationPeriod) -> None:
        month = fields.get("month")
        year = fields.get("year")
        if month is None and year is None:
            return
        stated = CompensationPeriod.of(
            period.month if month is None else month,
            period.year if year is None else year,
        )
        if stated != period:
            raise ValidationError(
                f"fields describe {stated.key} but the period is {period.key}",
                field="period",
            )
