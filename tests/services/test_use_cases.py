"""End-to-end use cases against an in-memory SQLite database."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from condo_billing.core.errors import UnassignedEmployeeError
from condo_billing.core.money import round_currency
from condo_billing.models import (
    Condominium,
    Employee,
    EmployeeCompensation,
    EmployeeCondominium,
    EmployeePayment,
    Provider,
    ProviderCondominium,
)
from condo_billing.services.use_cases import (
    DeleteCompensation,
    ReconcileEmployeeCondominiums,
    ReconcileProviderCondominiums,
    SaveCompensation,
    SummarizePayroll,
)

FIELDS = {
    "net_salary": "2000",
    "social_security": "300",
    "union_contribution": "100",
    "other_deductions": "0",
}


@pytest.fixture()
def directory(session: Session) -> Session:
    session.add_all(
        [
            Condominium(id="condo-x", name="Torre X"),
            Condominium(id="condo-y", name="Torre Y"),
            Condominium(id="condo-z", name="Torre Z"),
            Employee(id="emp-1", name="Ana Gómez", position="Encargada"),
            Provider(id="prov-1", name="Limpieza SRL"),
        ]
    )
    session.commit()
    return session


def _count(session: Session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def test_employee_flow_round_trip(directory: Session) -> None:
    """Assign, pay, report, and delete through the SQL store."""

    ReconcileEmployeeCondominiums(directory).execute("emp-1", ["condo-x"])

    saved = SaveCompensation(directory).execute("emp-1", "2024-03", FIELDS)

    assert saved.compensation.total_compensation == Decimal("2400.00")
    assert saved.payment.total_amount == Decimal("2400.00")
    assert saved.payment.condominium_id == "condo-x"
    assert saved.payment.status.value == "paid"
    assert _count(directory, EmployeeCompensation) == 1
    assert _count(directory, EmployeePayment) == 1

    edited = SaveCompensation(directory).execute(
        "emp-1",
        "2024-03",
        {**FIELDS, "other_deductions": "400.50"},
        compensation_id=saved.compensation.id,
    )
    assert edited.payment.id == saved.payment.id
    assert edited.payment.total_amount == Decimal("1999.50")
    assert _count(directory, EmployeePayment) == 1

    summary = SummarizePayroll(directory).execute("condo-x", month=3, year=2024)
    assert summary.payment_count == 1
    assert summary.total == Decimal("1999.50")
    assert summary.formatted_total.endswith("1.999,50")

    deleted = DeleteCompensation(directory).execute(saved.compensation.id)
    assert deleted.payments_deleted == 1
    assert _count(directory, EmployeeCompensation) == 0
    assert _count(directory, EmployeePayment) == 0


def test_unassigned_employee_leaves_tables_empty(directory: Session) -> None:
    with pytest.raises(UnassignedEmployeeError):
        SaveCompensation(directory).execute("emp-1", "2024-03", FIELDS)

    assert _count(directory, EmployeeCompensation) == 0
    assert _count(directory, EmployeePayment) == 0


def test_provider_reconciliation_keeps_unchanged_rows(directory: Session) -> None:
    use_case = ReconcileProviderCondominiums(directory)
    use_case.execute("prov-1", {"condo-x", "condo-y"})
    kept_id = directory.execute(
        select(ProviderCondominium.id).where(ProviderCondominium.condominium_id == "condo-y")
    ).scalar_one()

    result = use_case.execute("prov-1", {"condo-y", "condo-z"})

    assert result.added == {"condo-z"}
    assert result.removed == {"condo-x"}
    rows = directory.execute(
        select(ProviderCondominium.id, ProviderCondominium.condominium_id)
    ).all()
    assert {condominium for _, condominium in rows} == {"condo-y", "condo-z"}
    assert kept_id in {row_id for row_id, _ in rows}
    assert use_case.execute("prov-1", {"condo-y", "condo-z"}).changed is False
    assert _count(directory, EmployeeCondominium) == 0


def test_stored_total_matches_stored_amounts(directory: Session) -> None:
    """Amounts finer than the column scale are rounded before the total."""

    ReconcileEmployeeCondominiums(directory).execute("emp-1", ["condo-x"])
    fields = {
        "net_salary": "0.00496",
        "social_security": "0",
        "union_contribution": "0",
        "other_deductions": "0",
    }

    saved = SaveCompensation(directory).execute("emp-1", "2024-03", fields)

    directory.expire_all()
    stored = directory.get(EmployeeCompensation, saved.compensation.id)
    itemised = (
        stored.net_salary
        + stored.social_security
        + stored.union_contribution
        - stored.other_deductions
    )
    assert stored.net_salary == Decimal("0.0050")
    assert stored.total_compensation == round_currency(itemised) == Decimal("0.01")
    payment = directory.execute(select(EmployeePayment)).scalar_one()
    assert payment.total_amount == stored.total_compensation
