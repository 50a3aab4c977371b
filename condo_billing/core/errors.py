"""Typed failures raised by the billing core.

Every error carries a stable ``code`` and a ``recoverable`` flag so callers can
decide between re-prompting, refreshing, or replaying the operation. None of
them is process-fatal.
"""
from __future__ import annotations

from typing import Iterable


class BillingError(Exception):
    """Base exception for every failure surfaced by the billing core."""

    code = "billing_error"
    recoverable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Serialisable shape handed to the console for rendering."""

        return {
            "code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
        }


class ValidationError(BillingError):
    """Caller supplied data violates a precondition."""

    code = "validation_error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["field"] = self.field
        return payload


class UnassignedEmployeeError(BillingError):
    """The employee has no usable condominium association."""

    code = "unassigned_employee"

    def __init__(self, employee_id: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Employee {employee_id} is not assigned to any condominium"
        )
        self.employee_id = employee_id


class AmbiguousAssociationError(BillingError):
    """The employee is linked to several condominiums and none was chosen."""

    code = "ambiguous_association"

    def __init__(self, employee_id: str, condominium_ids: Iterable[str]) -> None:
        self.employee_id = employee_id
        self.condominium_ids = tuple(sorted(condominium_ids))
        super().__init__(
            f"Employee {employee_id} is linked to {len(self.condominium_ids)} "
            "condominiums; pass the condominium explicitly"
        )


class NotFoundError(BillingError):
    """A referenced record no longer exists."""

    code = "not_found"

    def __init__(self, collection: str, record_id: object) -> None:
        super().__init__(f"No record {record_id} in {collection}")
        self.collection = collection
        self.record_id = record_id


class PersistenceError(BillingError):
    """Wraps an underlying store failure.

    ``applied`` lists the collections already written by the failing operation,
    which tells the caller which half of a paired write went through.
    """

    code = "persistence_error"
    recoverable = True

    def __init__(
        self,
        collection: str,
        operation: str,
        cause: BaseException | None = None,
        applied: Iterable[str] = (),
    ) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} on {collection} failed{detail}")
        self.collection = collection
        self.operation = operation
        self.cause = cause
        self.applied = tuple(applied)

    def with_applied(self, applied: Iterable[str]) -> "PersistenceError":
        """Return a copy annotated with the collections already written."""

        error = PersistenceError(self.collection, self.operation, self.cause, applied)
        error.__cause__ = self.__cause__ or self.cause
        return error

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload.update(
            {
                "collection": self.collection,
                "operation": self.operation,
                "applied": list(self.applied),
            }
        )
        return payload
