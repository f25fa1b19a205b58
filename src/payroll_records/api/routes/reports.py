"""Report, audit trail and tax computation endpoints."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from fastapi import APIRouter, Query

from payroll_records.api.dependencies import Session
from payroll_records.api.schemas import (
    AllowanceReportResponse,
    AuditTrailResponse,
    DashboardResponse,
    EmployeeReportResponse,
    PayrollSummaryResponse,
    TaxResponse,
)
from payroll_records.calculators import CENTS, compute_tax, format_currency, tax_threshold
from payroll_records.models.entities import MaritalStatus
from payroll_records.models.inputs import PERIOD_PATTERN

router = APIRouter(tags=["reports"])


@router.get("/reports/payroll-summary", response_model=PayrollSummaryResponse)
async def payroll_summary(
    session: Session,
    period: Annotated[str | None, Query(pattern=PERIOD_PATTERN)] = None,
    department: str | None = None,
) -> PayrollSummaryResponse:
    """Department rollups and grand total for the selected payslips."""
    return PayrollSummaryResponse.model_validate(
        session.payroll_summary(period=period, department=department)
    )


@router.get("/reports/employees", response_model=EmployeeReportResponse)
async def employee_report(session: Session, department: str | None = None) -> EmployeeReportResponse:
    return EmployeeReportResponse.model_validate(session.employee_report(department=department))


@router.get("/reports/allowances", response_model=AllowanceReportResponse)
async def allowance_report(session: Session, employee_id: int | None = None) -> AllowanceReportResponse:
    return AllowanceReportResponse.model_validate(session.allowance_report(employee_id=employee_id))


@router.get("/reports/dashboard", response_model=DashboardResponse)
async def dashboard(
    session: Session,
    recent: Annotated[int, Query(ge=0, le=50)] = 5,
) -> DashboardResponse:
    return DashboardResponse.model_validate(session.dashboard(recent=recent))


@router.get("/audit-logs", response_model=AuditTrailResponse)
async def audit_logs(
    session: Session,
    action: str | None = None,
    date: str | None = None,
    performed_by: str | None = None,
) -> AuditTrailResponse:
    """Audit entries, newest first, with optional filters."""
    return AuditTrailResponse.model_validate(
        session.audit_trail(action=action, date=date, performed_by=performed_by)
    )


@router.get("/tax", response_model=TaxResponse)
async def tax(
    annual_income: Annotated[Decimal, Query(ge=0)],
    marital_status: MaritalStatus = MaritalStatus.SINGLE,
) -> TaxResponse:
    """Annual tax for an income under the two-bracket schedule."""
    annual_tax = compute_tax(annual_income, marital_status)
    return TaxResponse(
        annual_income=annual_income,
        marital_status=marital_status,
        threshold=tax_threshold(marital_status),
        annual_tax=annual_tax,
        monthly_tax=(annual_tax / 12).quantize(CENTS, rounding=ROUND_HALF_UP),
        formatted=format_currency(annual_tax),
    )
