"""Pydantic schemas for API responses.

Request bodies reuse the input models from ``payroll_records.models``.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from payroll_records.models.entities import MaritalStatus, PayslipStatus


class ORMBase(BaseModel):
    """Base schema populated from entity dataclasses."""

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    detail: str


# ============================================================================
# Entity schemas
# ============================================================================


class AllowanceTypeResponse(ORMBase):
    id: int
    name: str
    is_percentage: bool
    description: str


class EmployeeResponse(ORMBase):
    id: int
    first_name: str
    last_name: str
    email: str
    position: str
    department: str
    date_hired: date
    salary: Decimal
    marital_status: MaritalStatus


class PayslipResponse(ORMBase):
    id: int
    employee_id: int
    employee_name: str
    period: str
    gross_salary: Decimal
    total_deductions: Decimal
    tax_amount: Decimal
    net_salary: Decimal
    status: PayslipStatus
    payment_date: date | None = None


class AllowanceResponse(ORMBase):
    id: int
    employee_id: int
    allowance_type_id: int
    allowance_type_name: str
    amount: Decimal
    is_percentage: bool


class AuditLogResponse(ORMBase):
    id: int
    action: str
    details: str
    performed_by: str
    timestamp: datetime


# ============================================================================
# Report schemas
# ============================================================================


class TotalsResponse(ORMBase):
    payslip_count: int
    gross: Decimal
    deductions: Decimal
    net: Decimal


class DepartmentTotalsResponse(ORMBase):
    department: str
    employee_count: int
    totals: TotalsResponse


class PayrollSummaryResponse(ORMBase):
    period: str | None = None
    department: str | None = None
    departments: list[DepartmentTotalsResponse]
    grand_total: TotalsResponse


class EmployeeReportResponse(ORMBase):
    department: str | None = None
    employees: list[EmployeeResponse]
    headcount: int
    average_salary: Decimal


class AllowanceRowResponse(ORMBase):
    allowance: AllowanceResponse
    employee_name: str


class AllowanceReportResponse(ORMBase):
    rows: list[AllowanceRowResponse]
    count: int


class DashboardResponse(ORMBase):
    total_employees: int
    total_payslips: int
    pending_payslips: int
    total_allowance_types: int
    recent_payslips: list[PayslipResponse]
    recent_employees: list[EmployeeResponse]


class AuditTrailResponse(ORMBase):
    entries: list[AuditLogResponse]
    actions: list[str]


class TaxResponse(BaseModel):
    annual_income: Decimal
    marital_status: MaritalStatus
    threshold: Decimal
    annual_tax: Decimal
    monthly_tax: Decimal
    formatted: str
