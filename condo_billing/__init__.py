"""Billing reconciliation core of the condominium management console."""

from .core import get_logger, get_settings
from .services import AssociationReconciler, CompensationLedger

__all__ = ["AssociationReconciler", "CompensationLedger", "get_logger", "get_settings"]
