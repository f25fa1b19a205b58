"""API routes."""

from payroll_records.api.routes.entities import (
    allowance_types_router,
    allowances_router,
    employees_router,
    payslips_router,
)
from payroll_records.api.routes.health import router as health_router
from payroll_records.api.routes.reports import router as reports_router

__all__ = [
    "allowance_types_router",
    "allowances_router",
    "employees_router",
    "health_router",
    "payslips_router",
    "reports_router",
]
