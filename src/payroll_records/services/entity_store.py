"""In-memory entity collections.

The store is the single owner of the five payroll collections for the
lifetime of a session. It assigns no ids itself beyond offering
``next_id`` as a fallback for callers; reads never fail and a missing id
on replace/remove is reported by returning None.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

from payroll_records.models.entities import (
    Allowance,
    AllowanceType,
    AuditLog,
    Employee,
    EntityKind,
    Payslip,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", AllowanceType, Employee, Payslip, Allowance, AuditLog)


class Collection(Generic[T]):
    """Ordered, id-unique collection of one entity kind."""

    def __init__(self, kind: EntityKind, items: Iterable[T] = ()):
        self.kind = kind
        self._items: dict[int, T] = {}
        for item in items:
            self.insert(item)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items

    def list(self) -> list[T]:
        """All entities in insertion order."""
        return list(self._items.values())

    def get_by_id(self, entity_id: int) -> T | None:
        return self._items.get(entity_id)

    def next_id(self) -> int:
        """Local fallback id: ``max(ids) + 1``, or 1 when empty."""
        return max(self._items, default=0) + 1

    def insert(self, entity: T) -> T:
        """Add an entity. An existing entry with the same id is replaced."""
        if entity.id in self._items:
            logger.warning("%s id %s already present; replacing", self.kind.value, entity.id)
            del self._items[entity.id]
        self._items[entity.id] = entity
        return entity

    def replace(self, entity_id: int, changes: dict[str, Any]) -> T | None:
        """Apply partial changes; the id itself never changes."""
        current = self._items.get(entity_id)
        if current is None:
            return None
        fields = {k: v for k, v in changes.items() if k != "id"}
        updated = dataclasses.replace(current, **fields)
        self._items[entity_id] = updated
        return updated

    def remove(self, entity_id: int) -> T | None:
        return self._items.pop(entity_id, None)

    def load(self, items: Iterable[T]) -> None:
        """Replace the whole collection (initial hydration)."""
        self._items = {}
        for item in items:
            self.insert(item)


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable point-in-time view of every collection.

    ``audit_logs`` is newest-first.
    """

    allowance_types: tuple[AllowanceType, ...] = ()
    employees: tuple[Employee, ...] = ()
    payslips: tuple[Payslip, ...] = ()
    allowances: tuple[Allowance, ...] = ()
    audit_logs: tuple[AuditLog, ...] = ()

    def employee(self, employee_id: int) -> Employee | None:
        return next((e for e in self.employees if e.id == employee_id), None)


class EntityStore:
    """Owner of all payroll collections."""

    def __init__(self) -> None:
        self.allowance_types: Collection[AllowanceType] = Collection(EntityKind.ALLOWANCE_TYPE)
        self.employees: Collection[Employee] = Collection(EntityKind.EMPLOYEE)
        self.payslips: Collection[Payslip] = Collection(EntityKind.PAYSLIP)
        self.allowances: Collection[Allowance] = Collection(EntityKind.ALLOWANCE)
        self.audit_logs: Collection[AuditLog] = Collection(EntityKind.AUDIT_LOG)

    def collection(self, kind: EntityKind) -> Collection[Any]:
        return {
            EntityKind.ALLOWANCE_TYPE: self.allowance_types,
            EntityKind.EMPLOYEE: self.employees,
            EntityKind.PAYSLIP: self.payslips,
            EntityKind.ALLOWANCE: self.allowances,
            EntityKind.AUDIT_LOG: self.audit_logs,
        }[kind]

    def audit_trail(self) -> list[AuditLog]:
        """Audit entries, newest first."""
        return list(reversed(self.audit_logs.list()))

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            allowance_types=tuple(self.allowance_types.list()),
            employees=tuple(self.employees.list()),
            payslips=tuple(self.payslips.list()),
            allowances=tuple(self.allowances.list()),
            audit_logs=tuple(self.audit_trail()),
        )

    def clear(self) -> None:
        for kind in EntityKind:
            self.collection(kind).load(())
