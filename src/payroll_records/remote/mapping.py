"""Field translation between local entities and remote records.

Local attributes are snake_case Python names (``first_name``,
``date_hired``); remote records follow the REST API (``user.first_name``,
``date_joined``, ``is_percentage``). Marital status travels as the remote
``gender`` code: ``M`` for married, ``S`` for single.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Mapping

from payroll_records.calculators.tax_calculator import to_decimal
from payroll_records.models.entities import (
    Allowance,
    AllowanceType,
    AuditLog,
    Employee,
    MaritalStatus,
    Payslip,
    PayslipStatus,
)
from payroll_records.remote.base import RemoteRecord

MARITAL_TO_GENDER = {
    MaritalStatus.MARRIED: "M",
    MaritalStatus.SINGLE: "S",
}

DEFAULT_DAYS_WORKED = 30


def gender_code(marital_status: MaritalStatus | str) -> str:
    return MARITAL_TO_GENDER[MaritalStatus(marital_status)]


def marital_status_from_gender(code: str | None) -> MaritalStatus:
    return MaritalStatus.MARRIED if code == "M" else MaritalStatus.SINGLE


def split_period(period: str) -> tuple[int, int]:
    """``"2024-03"`` -> ``(2024, 3)``."""
    year, month = period.split("-")
    return int(year), int(month)


def join_period(year: int, month: int) -> str:
    return f"{int(year):04d}-{int(month):02d}"


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    return to_decimal(value)


def _date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def remote_id(record: Mapping[str, Any] | None) -> int | None:
    """Id assigned by the remote, or None if the response carried none."""
    if not record:
        return None
    value = record.get("id")
    if value is None or value == "":
        return None
    return int(value)


# ============================================================================
# Allowance types
# ============================================================================


def allowance_type_to_remote(changes: Mapping[str, Any]) -> RemoteRecord:
    payload: RemoteRecord = {}
    if "name" in changes:
        payload["name"] = changes["name"]
    if "is_percentage" in changes:
        payload["is_percentage"] = changes["is_percentage"]
    if "description" in changes:
        payload["description"] = changes["description"] or ""
    return payload


def allowance_type_from_remote(record: Mapping[str, Any]) -> AllowanceType:
    return AllowanceType(
        id=int(record["id"]),
        name=record.get("name", ""),
        is_percentage=bool(record.get("is_percentage", False)),
        description=record.get("description") or "",
    )


# ============================================================================
# Employees
# ============================================================================


def employee_to_remote(changes: Mapping[str, Any]) -> RemoteRecord:
    """Translate employee changes; ``department`` must already be an id."""
    payload: RemoteRecord = {}
    simple = {
        "first_name": "first_name",
        "last_name": "last_name",
        "email": "email",
        "position": "position",
        "department": "department",
        "date_hired": "date_joined",
        "salary": "salary",
    }
    for local, remote in simple.items():
        if local in changes:
            payload[remote] = changes[local]
    if "marital_status" in changes:
        payload["gender"] = gender_code(changes["marital_status"])
    return payload


def employee_create_payload(
    data: Mapping[str, Any],
    department_id: int,
    password: str,
) -> RemoteRecord:
    """Full create payload including the remote user account fields."""
    payload = employee_to_remote(data)
    payload.update(
        username=str(data["email"]).split("@")[0],
        password=password,
        employee_id=f"EMP{random.randrange(10000)}",
        department=department_id,
    )
    return payload


def employee_from_remote(record: Mapping[str, Any]) -> Employee:
    user = record.get("user") or record
    return Employee(
        id=int(record["id"]),
        first_name=user.get("first_name", ""),
        last_name=user.get("last_name", ""),
        email=user.get("email", ""),
        position=record.get("position") or "",
        department=record.get("department_name") or "",
        date_hired=_date(record.get("date_joined")) or date.today(),
        salary=_decimal(record.get("salary")),
        marital_status=marital_status_from_gender(record.get("gender")),
    )


# ============================================================================
# Payslips (remote "payroll records")
# ============================================================================


def payslip_to_remote(changes: Mapping[str, Any], *, defaults: bool = False) -> RemoteRecord:
    payload: RemoteRecord = {}
    if "employee_id" in changes:
        payload["employee"] = changes["employee_id"]
    if "period" in changes:
        payload["year"], payload["month"] = split_period(changes["period"])
    if defaults:
        payload.update(days_worked=DEFAULT_DAYS_WORKED, overtime_hours=0, overtime_rate=0)
    simple = {
        "total_deductions": "deductions",
        "tax_amount": "tax",
        "net_salary": "net_salary",
    }
    for local, remote in simple.items():
        if local in changes:
            payload[remote] = changes[local]
    if "status" in changes:
        payload["status"] = PayslipStatus(changes["status"]).value
    if "payment_date" in changes:
        payload["payment_date"] = changes["payment_date"]
    return payload


def payslip_from_remote(record: Mapping[str, Any]) -> Payslip:
    deductions = _decimal(record.get("deductions"))
    tax = _decimal(record.get("tax"))
    net = _decimal(record.get("net_salary"))
    return Payslip(
        id=int(record["id"]),
        employee_id=int(record["employee"]),
        employee_name=record.get("employee_name") or "",
        period=join_period(record["year"], record["month"]),
        gross_salary=net + deductions + tax,
        total_deductions=deductions,
        tax_amount=tax,
        net_salary=net,
        status=PayslipStatus(record.get("status") or PayslipStatus.DRAFT),
        payment_date=_date(record.get("payment_date")),
    )


# ============================================================================
# Allowances
# ============================================================================


def allowance_to_remote(changes: Mapping[str, Any]) -> RemoteRecord:
    payload: RemoteRecord = {}
    simple = {
        "employee_id": "employee",
        "allowance_type_id": "allowance_type",
        "amount": "amount",
        "is_percentage": "is_percentage",
    }
    for local, remote in simple.items():
        if local in changes:
            payload[remote] = changes[local]
    return payload


def allowance_from_remote(record: Mapping[str, Any]) -> Allowance:
    return Allowance(
        id=int(record["id"]),
        employee_id=int(record["employee"]),
        allowance_type_id=int(record["allowance_type"]),
        allowance_type_name=record.get("allowance_type_name") or "",
        amount=_decimal(record.get("amount")),
        is_percentage=bool(record.get("is_percentage", False)),
    )


# ============================================================================
# Audit logs
# ============================================================================


def audit_log_to_remote(action: str, details: str, performed_by: str) -> RemoteRecord:
    return {"action": action, "details": details, "performed_by": performed_by}


def audit_log_from_remote(record: Mapping[str, Any]) -> AuditLog:
    return AuditLog(
        id=int(record["id"]),
        action=record.get("action", ""),
        details=record.get("details", ""),
        performed_by=record.get("performed_by", ""),
        timestamp=_datetime(record.get("timestamp") or record.get("created_at")),
    )
