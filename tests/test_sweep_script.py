import importlib.util
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from condo_billing.models import Base, EmployeePayment

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "sweep_orphaned_payments.py"


@pytest.fixture()
def sweep_module():
    spec = importlib.util.spec_from_file_location("sweep_orphaned_payments", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    url = f"sqlite:///{tmp_path / 'billing.db'}"
    engine = create_engine(url, future=True)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(
            EmployeePayment(
                id="pay-orphan",
                compensation_id="gone",
                employee_id="emp-1",
                condominium_id="condo-1",
                month=1,
                year=2024,
                base_salary=Decimal("10"),
                social_security=Decimal("0"),
                union_fee=Decimal("0"),
                deductions=Decimal("0"),
                total_amount=Decimal("10"),
                status="paid",
            )
        )
        session.commit()
    engine.dispose()
    return url


def _payment_ids(url: str) -> set[str]:
    engine = create_engine(url, future=True)
    with Session(engine) as session:
        ids = set(session.execute(select(EmployeePayment.id)).scalars())
    engine.dispose()
    return ids


def test_sweep_reports_without_purging(sweep_module, database_url: str) -> None:
    """Without --purge the orphan stays in place."""

    assert sweep_module.main(["--database-url", database_url]) == 0
    assert _payment_ids(database_url) == {"pay-orphan"}


def test_sweep_purges_orphans(sweep_module, database_url: str) -> None:
    assert sweep_module.main(["--database-url", database_url, "--purge"]) == 0
    assert _payment_ids(database_url) == set()
