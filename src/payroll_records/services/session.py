"""Payroll session facade.

A ``PayrollSession`` is the one owned state object for a user session. It
wires the entity store, audit recorder and orchestrator to a remote
gateway, hydrates the store on ``load`` and releases the gateway on
``close``.

Usage:
    async with PayrollSession(gateway, settings) as session:
        await session.load()
        result = await session.add_employee({...})
        summary = session.payroll_summary(period="2024-03")
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable

from payroll_records.calculators.currency import format_currency
from payroll_records.calculators.tax_calculator import Number, compute_tax
from payroll_records.config import Settings
from payroll_records.models.entities import AuditLog, EntityKind, MaritalStatus
from payroll_records.remote.base import RemoteError, RemoteGateway, RemoteResource
from payroll_records.remote.mapping import (
    allowance_from_remote,
    allowance_type_from_remote,
    audit_log_from_remote,
    employee_from_remote,
    payslip_from_remote,
)
from payroll_records.services import report_aggregator
from payroll_records.services.audit_recorder import AuditRecorder, Clock, utc_now
from payroll_records.services.entity_store import EntityStore, StoreSnapshot
from payroll_records.services.orchestrator import MutationOrchestrator, MutationResult

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load data from server"


class PayrollSession:
    """Owns the payroll state for one session."""

    def __init__(
        self,
        gateway: RemoteGateway,
        settings: Settings,
        clock: Clock = utc_now,
    ):
        self.gateway = gateway
        self.settings = settings
        self.store = EntityStore()
        self.audit = AuditRecorder(self.store.audit_logs, gateway.audit_logs, clock=clock)
        self.orchestrator = MutationOrchestrator(self.store, gateway, self.audit, settings)
        self._loading = False
        self.closed = False

    async def __aenter__(self) -> PayrollSession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self._loading or self.orchestrator.loading

    @property
    def error(self) -> str | None:
        return self.orchestrator.error

    def snapshot(self) -> StoreSnapshot:
        return self.store.snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Hydrate every collection from the remote.

        Each kind loads independently; a failing kind keeps its current
        contents and sets the session error. Runs under the mutation lock so
        a listing never overwrites a concurrent write. Returns True if all
        loaded.
        """
        async with self.orchestrator.lock:
            self._loading = True
            ok = True
            try:
                loaders: list[tuple[EntityKind, RemoteResource, Callable[[Any], Any]]] = [
                    (EntityKind.EMPLOYEE, self.gateway.employees, employee_from_remote),
                    (EntityKind.ALLOWANCE_TYPE, self.gateway.allowance_types, allowance_type_from_remote),
                    (EntityKind.PAYSLIP, self.gateway.payslips, payslip_from_remote),
                    (EntityKind.ALLOWANCE, self.gateway.allowances, allowance_from_remote),
                    (EntityKind.AUDIT_LOG, self.gateway.audit_logs, audit_log_from_remote),
                ]
                for kind, resource, convert in loaders:
                    ok = await self._load_kind(kind, resource, convert) and ok

                try:
                    departments = await self.gateway.departments.list()
                    logger.info("Departments loaded: %d", len(departments))
                except RemoteError:
                    logger.warning("Department listing unavailable", exc_info=True)
            finally:
                self._loading = False

            self.orchestrator.error = None if ok else LOAD_ERROR
            return ok

    async def _load_kind(
        self,
        kind: EntityKind,
        resource: RemoteResource,
        convert: Callable[[Any], Any],
    ) -> bool:
        try:
            entities = [convert(record) for record in await resource.list()]
        except (RemoteError, KeyError, TypeError, ValueError):
            logger.exception("Error fetching %s records", kind.label)
            return False
        if kind == EntityKind.AUDIT_LOG:
            entities.sort(key=lambda log: log.id)
        self.store.collection(kind).load(entities)
        logger.debug("Loaded %d %s records", len(entities), kind.label)
        return True

    async def close(self) -> None:
        """Release the remote gateway and drop cached state."""
        if self.closed:
            return
        await self.gateway.close()
        self.store.clear()
        self.closed = True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_allowance_type(self, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.add_allowance_type(data, performed_by)

    async def update_allowance_type(self, allowance_type_id: int, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.update_allowance_type(allowance_type_id, data, performed_by)

    async def delete_allowance_type(self, allowance_type_id: int, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.delete_allowance_type(allowance_type_id, performed_by)

    async def add_employee(self, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.add_employee(data, performed_by)

    async def update_employee(self, employee_id: int, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.update_employee(employee_id, data, performed_by)

    async def delete_employee(self, employee_id: int, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.delete_employee(employee_id, performed_by)

    async def add_payslip(self, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.add_payslip(data, performed_by)

    async def update_payslip(self, payslip_id: int, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.update_payslip(payslip_id, data, performed_by)

    async def delete_payslip(self, payslip_id: int, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.delete_payslip(payslip_id, performed_by)

    async def add_allowance(self, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.add_allowance(data, performed_by)

    async def update_allowance(self, allowance_id: int, data: Any, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.update_allowance(allowance_id, data, performed_by)

    async def delete_allowance(self, allowance_id: int, performed_by: str | None = None) -> MutationResult:
        return await self.orchestrator.delete_allowance(allowance_id, performed_by)

    async def log_action(self, action: str, details: str, performed_by: str | None = None) -> AuditLog:
        async with self.orchestrator.lock:
            return await self.audit.record(action, details, performed_by or self.settings.audit_actor)

    # ------------------------------------------------------------------
    # Derived figures and reports
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_tax(annual_income: Number, marital_status: MaritalStatus | str) -> Decimal:
        return compute_tax(annual_income, marital_status)

    @staticmethod
    def format_currency(amount: Number) -> str:
        return format_currency(amount)

    def audit_logs(self) -> list[AuditLog]:
        """Audit entries, newest first."""
        return self.audit.entries()

    def payroll_summary(self, period: str | None = None, department: str | None = None) -> report_aggregator.PayrollSummary:
        return report_aggregator.payroll_summary(self.snapshot(), period=period, department=department)

    def employee_report(self, department: str | None = None) -> report_aggregator.EmployeeReport:
        return report_aggregator.employee_report(self.snapshot(), department=department)

    def allowance_report(self, employee_id: int | None = None) -> report_aggregator.AllowanceReport:
        return report_aggregator.allowance_report(self.snapshot(), employee_id=employee_id)

    def dashboard(self, recent: int = 5) -> report_aggregator.DashboardSummary:
        return report_aggregator.dashboard_summary(self.snapshot(), recent=recent)

    def audit_trail(
        self,
        action: str | None = None,
        date: str | None = None,
        performed_by: str | None = None,
    ) -> report_aggregator.AuditTrail:
        return report_aggregator.audit_trail(
            self.snapshot(), action=action, date=date, performed_by=performed_by
        )
