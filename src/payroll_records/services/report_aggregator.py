"""Report aggregation over a store snapshot.

All functions are pure: they read a ``StoreSnapshot`` and return frozen
result objects. Filters match department names exactly and periods by
string prefix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from payroll_records.calculators.tax_calculator import CENTS
from payroll_records.models.entities import (
    Allowance,
    AuditLog,
    Employee,
    Payslip,
    PayslipStatus,
)
from payroll_records.services.entity_store import StoreSnapshot

UNKNOWN_EMPLOYEE = "Unknown"


@dataclass(frozen=True)
class Totals:
    """Gross, deduction and net sums over a set of payslips."""

    payslip_count: int = 0
    gross: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    net: Decimal = Decimal("0")

    @classmethod
    def of(cls, payslips: list[Payslip] | tuple[Payslip, ...]) -> Totals:
        return cls(
            payslip_count=len(payslips),
            gross=sum((p.gross_salary for p in payslips), Decimal("0")),
            deductions=sum((p.total_deductions for p in payslips), Decimal("0")),
            net=sum((p.net_salary for p in payslips), Decimal("0")),
        )

    def __add__(self, other: Totals) -> Totals:
        return Totals(
            payslip_count=self.payslip_count + other.payslip_count,
            gross=self.gross + other.gross,
            deductions=self.deductions + other.deductions,
            net=self.net + other.net,
        )


@dataclass(frozen=True)
class DepartmentTotals:
    department: str
    employee_count: int
    totals: Totals


@dataclass(frozen=True)
class PayrollSummary:
    period: str | None
    department: str | None
    departments: tuple[DepartmentTotals, ...]
    grand_total: Totals


@dataclass(frozen=True)
class EmployeeReport:
    department: str | None
    employees: tuple[Employee, ...]
    headcount: int
    average_salary: Decimal


@dataclass(frozen=True)
class AllowanceRow:
    allowance: Allowance
    employee_name: str


@dataclass(frozen=True)
class AllowanceReport:
    rows: tuple[AllowanceRow, ...]
    count: int


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int
    total_payslips: int
    pending_payslips: int
    total_allowance_types: int
    recent_payslips: tuple[Payslip, ...] = field(default_factory=tuple)
    recent_employees: tuple[Employee, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AuditTrail:
    entries: tuple[AuditLog, ...]
    actions: tuple[str, ...]


def departments_of(employees: tuple[Employee, ...] | list[Employee]) -> list[str]:
    """Distinct department names in order of first appearance."""
    return list(dict.fromkeys(e.department for e in employees))


def filter_payslips_by_period(payslips: tuple[Payslip, ...], period: str | None) -> list[Payslip]:
    if not period:
        return list(payslips)
    return [p for p in payslips if p.period.startswith(period)]


def payroll_summary(
    snapshot: StoreSnapshot,
    period: str | None = None,
    department: str | None = None,
) -> PayrollSummary:
    """Payslip totals per department plus a grand total.

    Payslips are grouped by the current department of their employee.
    Payslips whose employee no longer exists belong to no department and
    are left out of every rollup, so the department totals always add up
    to the grand total.
    """
    payslips = filter_payslips_by_period(snapshot.payslips, period)
    by_employee: dict[int, list[Payslip]] = {}
    for payslip in payslips:
        by_employee.setdefault(payslip.employee_id, []).append(payslip)

    rows: list[DepartmentTotals] = []
    for name in departments_of(snapshot.employees):
        if department and name != department:
            continue
        members = [e for e in snapshot.employees if e.department == name]
        dept_payslips = [p for e in members for p in by_employee.get(e.id, [])]
        rows.append(
            DepartmentTotals(
                department=name,
                employee_count=len(members),
                totals=Totals.of(dept_payslips),
            )
        )

    grand_total = sum((row.totals for row in rows), Totals())
    return PayrollSummary(
        period=period or None,
        department=department or None,
        departments=tuple(rows),
        grand_total=grand_total,
    )


def employee_report(snapshot: StoreSnapshot, department: str | None = None) -> EmployeeReport:
    """Employees, headcount and average monthly salary."""
    employees = tuple(
        e for e in snapshot.employees if not department or e.department == department
    )
    if employees:
        total = sum((e.salary for e in employees), Decimal("0"))
        average = (total / len(employees)).quantize(CENTS, rounding=ROUND_HALF_UP)
    else:
        average = Decimal("0.00")
    return EmployeeReport(
        department=department or None,
        employees=employees,
        headcount=len(employees),
        average_salary=average,
    )


def allowance_report(snapshot: StoreSnapshot, employee_id: int | None = None) -> AllowanceReport:
    """Allowances joined to the current employee name."""
    names = {e.id: e.full_name for e in snapshot.employees}
    rows = tuple(
        AllowanceRow(allowance=a, employee_name=names.get(a.employee_id, UNKNOWN_EMPLOYEE))
        for a in snapshot.allowances
        if employee_id is None or a.employee_id == employee_id
    )
    return AllowanceReport(rows=rows, count=len(rows))


def dashboard_summary(snapshot: StoreSnapshot, recent: int = 5) -> DashboardSummary:
    """Headline counts and the most recently added payslips and employees."""
    return DashboardSummary(
        total_employees=len(snapshot.employees),
        total_payslips=len(snapshot.payslips),
        pending_payslips=sum(1 for p in snapshot.payslips if p.status == PayslipStatus.DRAFT),
        total_allowance_types=len(snapshot.allowance_types),
        recent_payslips=tuple(reversed(snapshot.payslips[-recent:])) if recent else (),
        recent_employees=tuple(reversed(snapshot.employees[-recent:])) if recent else (),
    )


def audit_trail(
    snapshot: StoreSnapshot,
    action: str | None = None,
    date: str | None = None,
    performed_by: str | None = None,
) -> AuditTrail:
    """Audit entries (newest first) filtered by action, date prefix and user."""
    needle = (performed_by or "").lower()
    entries = tuple(
        log
        for log in snapshot.audit_logs
        if (not action or log.action == action)
        and (not date or log.timestamp.isoformat().startswith(date))
        and (not needle or needle in log.performed_by.lower())
    )
    actions = tuple(dict.fromkeys(log.action for log in snapshot.audit_logs))
    return AuditTrail(entries=entries, actions=actions)
