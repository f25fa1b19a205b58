"""Pydantic models for caller-supplied entity data.

Create models describe a full new entity minus its id and any derived or
snapshot fields. Update models describe a partial change; only the fields
the caller actually set are applied.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from payroll_records.models.entities import MaritalStatus, PayslipStatus

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class InputModel(BaseModel):
    """Base for input models."""

    model_config = ConfigDict(str_strip_whitespace=True)


class UpdateModel(InputModel):
    """Base for partial updates.

    Fields default to None meaning "not provided". Explicit None is only
    accepted for fields listed in ``NULLABLE``.
    """

    NULLABLE: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "UpdateModel":
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.NULLABLE:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Fields the caller set, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


# ============================================================================
# Allowance types
# ============================================================================


class AllowanceTypeCreate(InputModel):
    name: str = Field(min_length=1)
    is_percentage: bool = False
    description: str = ""


class AllowanceTypeUpdate(UpdateModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"description"})

    name: str | None = Field(default=None, min_length=1)
    is_percentage: bool | None = None
    description: str | None = None


# ============================================================================
# Employees
# ============================================================================


class EmployeeCreate(InputModel):
    """New employee. ``email`` format is the caller's responsibility."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    position: str = ""
    department: str = ""
    date_hired: date
    salary: Decimal = Field(ge=0)
    marital_status: MaritalStatus = MaritalStatus.SINGLE


class EmployeeUpdate(UpdateModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)
    position: str | None = None
    department: str | None = None
    date_hired: date | None = None
    salary: Decimal | None = Field(default=None, ge=0)
    marital_status: MaritalStatus | None = None


# ============================================================================
# Payslips
# ============================================================================


class PayslipCreate(InputModel):
    """New payslip.

    Tax, net salary and employee name are derived by the orchestrator;
    any such values supplied by the caller are ignored.
    """

    employee_id: int
    period: str = Field(pattern=PERIOD_PATTERN)
    gross_salary: Decimal = Field(ge=0)
    total_deductions: Decimal = Field(default=Decimal("0"), ge=0)
    status: PayslipStatus = PayslipStatus.DRAFT
    payment_date: date | None = None


class PayslipUpdate(UpdateModel):
    NULLABLE: ClassVar[frozenset[str]] = frozenset({"payment_date"})

    employee_id: int | None = None
    period: str | None = Field(default=None, pattern=PERIOD_PATTERN)
    gross_salary: Decimal | None = Field(default=None, ge=0)
    total_deductions: Decimal | None = Field(default=None, ge=0)
    status: PayslipStatus | None = None
    payment_date: date | None = None


# ============================================================================
# Allowances
# ============================================================================


class AllowanceCreate(InputModel):
    employee_id: int
    allowance_type_id: int
    amount: Decimal = Field(ge=0)


class AllowanceUpdate(UpdateModel):
    employee_id: int | None = None
    allowance_type_id: int | None = None
    amount: Decimal | None = Field(default=None, ge=0)
