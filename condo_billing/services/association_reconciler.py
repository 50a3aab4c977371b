"""Diff based reconciliation of owner to condominium memberships."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from condo_billing.core.errors import PersistenceError, ValidationError
from condo_billing.core.logger import get_logger, log_context
from condo_billing.domain.records import ReconcileResult
from condo_billing.repositories.base import RecordStore

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AssociationKind:
    """Join collection linking an owning entity to condominiums."""

    join_collection: str
    owner_field: str
    target_field: str = "condominium_id"


EMPLOYEE_CONDOMINIUMS = AssociationKind("employee_condominiums", "employee_id")
PROVIDER_CONDOMINIUMS = AssociationKind("provider_condominiums", "provider_id")


def _normalize_ids(values: Iterable[object], field: str) -> frozenset[str]:
    if isinstance(values, (str, bytes)):
        raise ValidationError(f"{field} must be a collection of ids", field=field)
    normalized: set[str] = set()
    for value in values:
        if value is None or not str(value).strip():
            raise ValidationError(f"{field} contains a blank id", field=field)
        normalized.add(str(value))
    return frozenset(normalized)


class AssociationReconciler:
    """Applies the minimal add/remove writes turning one membership set into another.

    The reconciler holds no state between calls; the join collection is the
    only source of truth. Ids present in both sets are never touched, which
    makes a repeated ``reconcile`` with the same desired set a no-op.
    """

    def __init__(self, store: RecordStore, kind: AssociationKind) -> None:
        self._store = store
        self._kind = kind

    @property
    def kind(self) -> AssociationKind:
        return self._kind

    def current(self, entity_id: str) -> frozenset[str]:
        """Return the condominium ids currently linked to ``entity_id``."""

        kind = self._kind
        rows = self._store.find_all(kind.join_collection, {kind.owner_field: entity_id})
        return frozenset(str(row[kind.target_field]) for row in rows)

    def members(self, condominium_id: str) -> frozenset[str]:
        """Return the owners linked to ``condominium_id``."""

        kind = self._kind
        rows = self._store.find_all(kind.join_collection, {kind.target_field: condominium_id})
        return frozenset(str(row[kind.owner_field]) for row in rows)

    def reconcile(self, entity_id: str, desired: Iterable[object]) -> ReconcileResult:
        """Make the memberships of ``entity_id`` equal to ``desired``.

        Removals are issued as one batched delete, additions as one batched
        insert. A failing write is reported as is; replaying the call is safe.
        """

        if entity_id is None or not str(entity_id).strip():
            raise ValidationError(f"{self._kind.owner_field} is required", field=self._kind.owner_field)
        entity_id = str(entity_id)
        wanted = _normalize_ids(desired, self._kind.target_field)
        kind = self._kind

        with log_context.scoped(**{kind.owner_field: entity_id}):
            existing = self.current(entity_id)
            to_add = wanted - existing
            to_remove = existing - wanted

            if to_remove:
                try:
                    self._store.delete_where(
                        kind.join_collection,
                        {kind.owner_field: entity_id, kind.target_field: to_remove},
                    )
                except PersistenceError:
                    LOGGER.exception("Removing %d membership(s) failed", len(to_remove))
                    raise

            if to_add:
                try:
                    self._store.insert_many(
                        kind.join_collection,
                        [
                            {kind.owner_field: entity_id, kind.target_field: target}
                            for target in sorted(to_add)
                        ],
                    )
                except PersistenceError as exc:
                    LOGGER.exception("Adding %d membership(s) failed", len(to_add))
                    if to_remove:
                        raise exc.with_applied((kind.join_collection,)) from exc
                    raise

            if to_add or to_remove:
                LOGGER.info(
                    "Reconciled %s: +%d -%d",
                    kind.join_collection,
                    len(to_add),
                    len(to_remove),
                )
            else:
                LOGGER.debug("Memberships already up to date")

        return ReconcileResult(added=frozenset(to_add), removed=frozenset(to_remove))
