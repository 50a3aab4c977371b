"""Value objects of the billing domain."""

from .records import (
    CompensationInput,
    CompensationPeriod,
    CompensationRecord,
    DeletedCompensation,
    PaymentRecord,
    PaymentStatus,
    PayrollSummary,
    ReconcileResult,
    SavedCompensation,
)

__all__ = [
    "CompensationInput",
    "CompensationPeriod",
    "CompensationRecord",
    "DeletedCompensation",
    "PaymentRecord",
    "PaymentStatus",
    "PayrollSummary",
    "ReconcileResult",
    "SavedCompensation",
]
