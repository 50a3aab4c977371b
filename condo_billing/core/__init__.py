"""Core utilities shared across the billing package."""

from .config import Settings, get_settings  # noqa: F401
from .errors import (  # noqa: F401
    AmbiguousAssociationError,
    BillingError,
    NotFoundError,
    PersistenceError,
    UnassignedEmployeeError,
    ValidationError,
)
from .logger import get_logger  # noqa: F401

__all__ = [
    "AmbiguousAssociationError",
    "BillingError",
    "NotFoundError",
    "PersistenceError",
    "Settings",
    "UnassignedEmployeeError",
    "ValidationError",
    "get_logger",
    "get_settings",
]
