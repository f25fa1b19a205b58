"""Payroll record models."""

from payroll_records.models.entities import (
    Allowance,
    AllowanceType,
    AuditLog,
    Employee,
    EntityKind,
    MaritalStatus,
    Operation,
    Payslip,
    PayslipStatus,
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

__all__ = [
    "Allowance",
    "AllowanceCreate",
    "AllowanceType",
    "AllowanceTypeCreate",
    "AllowanceTypeUpdate",
    "AllowanceUpdate",
    "AuditLog",
    "Employee",
    "EmployeeCreate",
    "EmployeeUpdate",
    "EntityKind",
    "MaritalStatus",
    "Operation",
    "Payslip",
    "PayslipCreate",
    "PayslipStatus",
    "PayslipUpdate",
]
