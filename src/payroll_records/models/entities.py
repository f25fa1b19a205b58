"""Payroll entity types held by the entity store.

Entities are immutable snapshots. Updates produce a new instance via
``dataclasses.replace``; the store swaps the old instance for the new one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class MaritalStatus(str, Enum):
    """Marital status used to pick the tax threshold."""

    SINGLE = "single"
    MARRIED = "married"


class PayslipStatus(str, Enum):
    """Payslip lifecycle status."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class EntityKind(str, Enum):
    """Entity collections owned by the store."""

    ALLOWANCE_TYPE = "allowance_type"
    EMPLOYEE = "employee"
    PAYSLIP = "payslip"
    ALLOWANCE = "allowance"
    AUDIT_LOG = "audit_log"

    @property
    def label(self) -> str:
        """Human-readable name used in messages."""
        return self.value.replace("_", " ")


class Operation(str, Enum):
    """Mutation operations."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def verb(self) -> str:
        """Audit action verb (Create/Update/Delete)."""
        return self.value.capitalize()


@dataclass(frozen=True)
class AllowanceType:
    """Allowance definition (e.g. Degree, Risk)."""

    id: int
    name: str
    is_percentage: bool
    description: str = ""


@dataclass(frozen=True)
class Employee:
    """Employee record.

    ``department`` is a department name at this layer, not a foreign key.
    ``salary`` is monthly.
    """

    id: int
    first_name: str
    last_name: str
    email: str
    position: str
    department: str
    date_hired: date
    salary: Decimal
    marital_status: MaritalStatus

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Payslip:
    """Payslip for one employee and one ``YYYY-MM`` period.

    ``employee_name`` is a snapshot taken at write time and is never
    refreshed when the employee is renamed.
    """

    id: int
    employee_id: int
    employee_name: str
    period: str
    gross_salary: Decimal
    total_deductions: Decimal
    tax_amount: Decimal
    net_salary: Decimal
    status: PayslipStatus = PayslipStatus.DRAFT
    payment_date: date | None = None


@dataclass(frozen=True)
class Allowance:
    """Allowance granted to an employee.

    ``allowance_type_name`` and ``is_percentage`` are copied from the
    allowance type at creation time.
    """

    id: int
    employee_id: int
    allowance_type_id: int
    allowance_type_name: str
    amount: Decimal
    is_percentage: bool


@dataclass(frozen=True)
class AuditLog:
    """Append-only audit record."""

    id: int
    action: str
    details: str
    performed_by: str
    timestamp: datetime
