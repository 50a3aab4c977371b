from condo_billing.core.errors import (
    AmbiguousAssociationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


def test_errors_render_code_and_message() -> None:
    error = NotFoundError("employee_compensations", "comp-1")

    assert error.to_dict() == {
        "code": "not_found",
        "message": "No record comp-1 in employee_compensations",
        "recoverable": False,
    }


def test_validation_error_names_the_field() -> None:
    payload = ValidationError("net_salary is required", field="net_salary").to_dict()

    assert payload["code"] == "validation_error"
    assert payload["field"] == "net_salary"


def test_ambiguous_association_lists_sorted_condominiums() -> None:
    error = AmbiguousAssociationError("emp-1", {"condo-b", "condo-a"})

    assert error.condominium_ids == ("condo-a", "condo-b")
    assert error.to_dict()["code"] == "ambiguous_association"


def test_persistence_error_reports_the_applied_half() -> None:
    """with_applied keeps the failing operation and records what was written."""

    cause = ConnectionError("connection reset")
    error = PersistenceError("employee_payments", "upsert", cause)

    annotated = error.with_applied(["employee_compensations"])

    assert annotated.__cause__ is cause
    assert annotated.to_dict() == {
        "code": "persistence_error",
        "message": "upsert on employee_payments failed: connection reset",
        "recoverable": True,
        "collection": "employee_payments",
        "operation": "upsert",
        "applied": ["employee_compensations"],
    }
