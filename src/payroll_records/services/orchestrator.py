"""Mutation orchestrator.

Sequences every create/update/delete of the four editable entity kinds:

1. Validate caller input and derive computed fields
2. Call the matching remote operation (one attempt)
3. On success, update the entity store and record one audit entry
4. On failure, leave the store untouched and expose an error message

Failures never escape as exceptions; callers get a ``MutationResult`` and
the orchestrator's ``error`` attribute holds the last message.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from payroll_records.calculators.tax_calculator import derive_payslip_figures, net_salary
from payroll_records.config import Settings
from payroll_records.models.entities import (
    Allowance,
    AllowanceType,
    AuditLog,
    Employee,
    EntityKind,
    Operation,
    Payslip,
)
from payroll_records.models.inputs import (
    AllowanceCreate,
    AllowanceTypeCreate,
    AllowanceTypeUpdate,
    AllowanceUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    PayslipCreate,
    PayslipUpdate,
)
from payroll_records.remote.base import Department, RemoteError, RemoteGateway, RemoteNotFoundError
from payroll_records.remote.mapping import (
    allowance_to_remote,
    allowance_type_to_remote,
    employee_create_payload,
    employee_to_remote,
    payslip_to_remote,
    remote_id,
)
from payroll_records.services.audit_recorder import AuditRecorder
from payroll_records.services.entity_store import EntityStore
from payroll_records.services.state_machine import InvalidTransitionError, PayslipStateMachine

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

FAILURE_VERBS = {
    Operation.CREATE: "add",
    Operation.UPDATE: "update",
    Operation.DELETE: "delete",
}


class EntityNotFoundError(Exception):
    """Raised when a mutation targets an id missing from the local store."""

    def __init__(self, kind: EntityKind, entity_id: int):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.label} {entity_id} not found")


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one orchestrated mutation."""

    kind: EntityKind
    operation: Operation
    ok: bool
    entity: Any = None
    error: str | None = None
    not_found: bool = False
    audit_entry: AuditLog | None = None


def describe_error(exc: Exception) -> str:
    """Short human-readable reason for a failure."""
    if isinstance(exc, ValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
        return "; ".join(parts)
    return str(exc)


def _coerce(model: type[M], data: M | Mapping[str, Any]) -> M:
    if isinstance(data, model):
        return data
    if isinstance(data, Mapping):
        data = dict(data)
    return model.model_validate(data)


class MutationOrchestrator:
    """Coordinates remote calls, store updates and audit emission.

    Mutations are serialised on ``lock``; the remote calls are the only
    suspension points and a hung call holds the lock until the remote gives
    up. Anything else that writes the store (session loads, direct audit
    entries) must hold the same lock.

    ``error`` is the single error slot of the session: the last failure
    message, cleared by the next successful mutation.
    """

    def __init__(
        self,
        store: EntityStore,
        gateway: RemoteGateway,
        audit: AuditRecorder,
        settings: Settings,
    ):
        self.store = store
        self.gateway = gateway
        self.audit = audit
        self.settings = settings
        self.error: str | None = None
        self.loading = False
        self.lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Shared flow
    # ------------------------------------------------------------------

    async def _run(
        self,
        kind: EntityKind,
        operation: Operation,
        action: Callable[[], Awaitable[tuple[Any, str]]],
        performed_by: str | None,
    ) -> MutationResult:
        async with self.lock:
            self.loading = True
            try:
                try:
                    entity, details = await action()
                except (EntityNotFoundError, RemoteNotFoundError) as e:
                    return self._fail(kind, operation, e, not_found=True)
                except (RemoteError, ValidationError, InvalidTransitionError, ValueError) as e:
                    return self._fail(kind, operation, e)

                entry = await self.audit.record(
                    operation.verb,
                    details,
                    performed_by or self.settings.audit_actor,
                )
                self.error = None
                return MutationResult(
                    kind=kind,
                    operation=operation,
                    ok=True,
                    entity=entity,
                    audit_entry=entry,
                )
            finally:
                self.loading = False

    def _fail(
        self,
        kind: EntityKind,
        operation: Operation,
        exc: Exception,
        *,
        not_found: bool = False,
    ) -> MutationResult:
        message = f"Failed to {FAILURE_VERBS[operation]} {kind.label}: {describe_error(exc)}"
        if isinstance(exc, RemoteError):
            logger.error(message, exc_info=exc)
        else:
            logger.warning(message)
        self.error = message
        return MutationResult(
            kind=kind,
            operation=operation,
            ok=False,
            error=message,
            not_found=not_found,
        )

    def _require(self, kind: EntityKind, entity_id: int) -> Any:
        entity = self.store.collection(kind).get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(kind, entity_id)
        return entity

    def _assigned_id(self, kind: EntityKind, response: Any) -> int:
        assigned = remote_id(response) if isinstance(response, Mapping) else None
        if assigned is None:
            assigned = self.store.collection(kind).next_id()
            logger.warning("Remote returned no id for new %s; using local id %s", kind.label, assigned)
        return assigned

    async def _remove(self, kind: EntityKind, entity_id: int, resource: Any) -> tuple[Any, str]:
        self._require(kind, entity_id)
        await resource.delete(entity_id)
        removed = self.store.collection(kind).remove(entity_id)
        return removed, f"Deleted {kind.label} ID: {entity_id}"

    # ------------------------------------------------------------------
    # Department lookup (degraded fallback)
    # ------------------------------------------------------------------

    async def resolve_department(self, name: str) -> int:
        """Map a department name to its remote id.

        Unknown names resolve to the first listed department. If the lookup
        itself fails, the configured default id is used.
        """
        try:
            records = await self.gateway.departments.list()
            departments = [Department.from_remote(r) for r in records]
        except (RemoteError, KeyError, TypeError, ValueError):
            logger.warning(
                "Department lookup failed; using default department id %s",
                self.settings.default_department_id,
                exc_info=True,
            )
            return self.settings.default_department_id

        for department in departments:
            if department.name == name:
                return department.id
        if departments:
            logger.info("Department %r not found; using %r", name, departments[0].name)
            return departments[0].id
        return self.settings.default_department_id

    # ------------------------------------------------------------------
    # Allowance types
    # ------------------------------------------------------------------

    async def add_allowance_type(
        self,
        data: AllowanceTypeCreate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.ALLOWANCE_TYPE

        async def action() -> tuple[AllowanceType, str]:
            fields = _coerce(AllowanceTypeCreate, data).model_dump()
            response = await self.gateway.allowance_types.create(allowance_type_to_remote(fields))
            entity = AllowanceType(id=self._assigned_id(kind, response), **fields)
            self.store.allowance_types.insert(entity)
            return entity, f"Created allowance type: {entity.name}"

        return await self._run(kind, Operation.CREATE, action, performed_by)

    async def update_allowance_type(
        self,
        allowance_type_id: int,
        data: AllowanceTypeUpdate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.ALLOWANCE_TYPE

        async def action() -> tuple[AllowanceType, str]:
            self._require(kind, allowance_type_id)
            changes = _coerce(AllowanceTypeUpdate, data).changes()
            if changes.get("description", "") is None:
                changes["description"] = ""
            await self.gateway.allowance_types.update(
                allowance_type_id, allowance_type_to_remote(changes)
            )
            entity = self.store.allowance_types.replace(allowance_type_id, changes)
            return entity, f"Updated allowance type ID: {allowance_type_id}"

        return await self._run(kind, Operation.UPDATE, action, performed_by)

    async def delete_allowance_type(
        self,
        allowance_type_id: int,
        performed_by: str | None = None,
    ) -> MutationResult:
        """Delete an allowance type. Allowances referencing it are kept."""
        kind = EntityKind.ALLOWANCE_TYPE
        return await self._run(
            kind,
            Operation.DELETE,
            lambda: self._remove(kind, allowance_type_id, self.gateway.allowance_types),
            performed_by,
        )

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    async def add_employee(
        self,
        data: EmployeeCreate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.EMPLOYEE

        async def action() -> tuple[Employee, str]:
            fields = _coerce(EmployeeCreate, data).model_dump()
            department_id = await self.resolve_department(fields["department"])
            payload = employee_create_payload(
                fields,
                department_id,
                self.settings.default_employee_password,
            )
            response = await self.gateway.employees.create(payload)
            entity = Employee(id=self._assigned_id(kind, response), **fields)
            self.store.employees.insert(entity)
            return entity, f"Created employee: {entity.full_name}"

        return await self._run(kind, Operation.CREATE, action, performed_by)

    async def update_employee(
        self,
        employee_id: int,
        data: EmployeeUpdate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        """Update an employee.

        Existing payslips keep their ``employee_name`` snapshot.
        """
        kind = EntityKind.EMPLOYEE

        async def action() -> tuple[Employee, str]:
            self._require(kind, employee_id)
            changes = _coerce(EmployeeUpdate, data).changes()
            payload = employee_to_remote(changes)
            if "department" in changes:
                payload["department"] = await self.resolve_department(changes["department"])
            await self.gateway.employees.update(employee_id, payload)
            entity = self.store.employees.replace(employee_id, changes)
            return entity, f"Updated employee ID: {employee_id}"

        return await self._run(kind, Operation.UPDATE, action, performed_by)

    async def delete_employee(
        self,
        employee_id: int,
        performed_by: str | None = None,
    ) -> MutationResult:
        """Delete an employee. Payslips and allowances are not cascaded."""
        kind = EntityKind.EMPLOYEE
        return await self._run(
            kind,
            Operation.DELETE,
            lambda: self._remove(kind, employee_id, self.gateway.employees),
            performed_by,
        )

    # ------------------------------------------------------------------
    # Payslips
    # ------------------------------------------------------------------

    def _existing_employee(self, employee_id: int) -> Employee:
        employee = self.store.employees.get_by_id(employee_id)
        if employee is None:
            raise ValueError(f"employee {employee_id} does not exist")
        return employee

    async def add_payslip(
        self,
        data: PayslipCreate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        """Create a payslip with tax and net salary derived from the employee."""
        kind = EntityKind.PAYSLIP

        async def action() -> tuple[Payslip, str]:
            fields = _coerce(PayslipCreate, data).model_dump()
            employee = self._existing_employee(fields["employee_id"])
            fields["payment_date"] = PayslipStateMachine.resolve_payment_date(
                fields["status"], fields["payment_date"]
            )
            tax, net = derive_payslip_figures(
                fields["gross_salary"],
                fields["total_deductions"],
                employee.marital_status,
            )
            fields.update(employee_name=employee.full_name, tax_amount=tax, net_salary=net)

            response = await self.gateway.payslips.create(payslip_to_remote(fields, defaults=True))
            entity = Payslip(id=self._assigned_id(kind, response), **fields)
            self.store.payslips.insert(entity)
            return entity, f"Created payslip for employee ID: {entity.employee_id}"

        return await self._run(kind, Operation.CREATE, action, performed_by)

    async def update_payslip(
        self,
        payslip_id: int,
        data: PayslipUpdate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        """Update a payslip; tax and net salary are always recomputed."""
        kind = EntityKind.PAYSLIP

        async def action() -> tuple[Payslip, str]:
            current: Payslip = self._require(kind, payslip_id)
            changes = _coerce(PayslipUpdate, data).changes()

            employee_id = changes.get("employee_id", current.employee_id)
            if employee_id != current.employee_id:
                changes["employee_name"] = self._existing_employee(employee_id).full_name

            status = changes.get("status", current.status)
            PayslipStateMachine.validate_transition(current.status, status)
            changes["payment_date"] = PayslipStateMachine.resolve_payment_date(
                status, changes.get("payment_date", current.payment_date)
            )

            gross = changes.get("gross_salary", current.gross_salary)
            deductions = changes.get("total_deductions", current.total_deductions)
            employee = self.store.employees.get_by_id(employee_id)
            if employee is not None:
                tax, net = derive_payslip_figures(gross, deductions, employee.marital_status)
            else:
                logger.warning(
                    "Employee %s of payslip %s is gone; keeping stored tax", employee_id, payslip_id
                )
                tax = current.tax_amount
                net = net_salary(gross, deductions, tax)
            changes.update(tax_amount=tax, net_salary=net)

            await self.gateway.payslips.update(payslip_id, payslip_to_remote(changes))
            entity = self.store.payslips.replace(payslip_id, changes)
            return entity, f"Updated payslip ID: {payslip_id}"

        return await self._run(kind, Operation.UPDATE, action, performed_by)

    async def delete_payslip(
        self,
        payslip_id: int,
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.PAYSLIP
        return await self._run(
            kind,
            Operation.DELETE,
            lambda: self._remove(kind, payslip_id, self.gateway.payslips),
            performed_by,
        )

    # ------------------------------------------------------------------
    # Allowances
    # ------------------------------------------------------------------

    def _allowance_type(self, allowance_type_id: int) -> AllowanceType:
        allowance_type = self.store.allowance_types.get_by_id(allowance_type_id)
        if allowance_type is None:
            raise ValueError(f"allowance type {allowance_type_id} does not exist")
        return allowance_type

    async def add_allowance(
        self,
        data: AllowanceCreate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        """Create an allowance, snapshotting the type's name and percentage flag."""
        kind = EntityKind.ALLOWANCE

        async def action() -> tuple[Allowance, str]:
            fields = _coerce(AllowanceCreate, data).model_dump()
            self._existing_employee(fields["employee_id"])
            allowance_type = self._allowance_type(fields["allowance_type_id"])
            fields.update(
                allowance_type_name=allowance_type.name,
                is_percentage=allowance_type.is_percentage,
            )

            response = await self.gateway.allowances.create(allowance_to_remote(fields))
            entity = Allowance(id=self._assigned_id(kind, response), **fields)
            self.store.allowances.insert(entity)
            return entity, f"Created allowance for employee ID: {entity.employee_id}"

        return await self._run(kind, Operation.CREATE, action, performed_by)

    async def update_allowance(
        self,
        allowance_id: int,
        data: AllowanceUpdate | Mapping[str, Any],
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.ALLOWANCE

        async def action() -> tuple[Allowance, str]:
            current: Allowance = self._require(kind, allowance_id)
            changes = _coerce(AllowanceUpdate, data).changes()
            if changes.get("employee_id", current.employee_id) != current.employee_id:
                self._existing_employee(changes["employee_id"])
            type_id = changes.get("allowance_type_id", current.allowance_type_id)
            if type_id != current.allowance_type_id:
                allowance_type = self._allowance_type(type_id)
                changes.update(
                    allowance_type_name=allowance_type.name,
                    is_percentage=allowance_type.is_percentage,
                )

            await self.gateway.allowances.update(allowance_id, allowance_to_remote(changes))
            entity = self.store.allowances.replace(allowance_id, changes)
            return entity, f"Updated allowance ID: {allowance_id}"

        return await self._run(kind, Operation.UPDATE, action, performed_by)

    async def delete_allowance(
        self,
        allowance_id: int,
        performed_by: str | None = None,
    ) -> MutationResult:
        kind = EntityKind.ALLOWANCE
        return await self._run(
            kind,
            Operation.DELETE,
            lambda: self._remove(kind, allowance_id, self.gateway.allowances),
            performed_by,
        )
