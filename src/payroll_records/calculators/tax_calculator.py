"""Tax and net-salary derivation.

Two-bracket progressive schedule selected by marital status:

    threshold = 500,000 (single) or 600,000 (married)
    income <= threshold:  income * 1%
    income >  threshold:  threshold * 1% + (income - threshold) * 1.5%

All functions are pure. Negative income is not rejected here.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from payroll_records.models.entities import MaritalStatus

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")
MONTHS_PER_YEAR = 12

BASE_RATE = Decimal("0.01")
EXCESS_RATE = Decimal("0.015")

TAX_THRESHOLDS: dict[MaritalStatus, Decimal] = {
    MaritalStatus.SINGLE: Decimal("500000"),
    MaritalStatus.MARRIED: Decimal("600000"),
}


def to_decimal(value: Number) -> Decimal:
    """Coerce a numeric input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def tax_threshold(marital_status: MaritalStatus | str) -> Decimal:
    """Return the upper bound of the base-rate bracket."""
    return TAX_THRESHOLDS[MaritalStatus(marital_status)]


def compute_tax(annual_income: Number, marital_status: MaritalStatus | str) -> Decimal:
    """Annual tax liability, unrounded."""
    income = to_decimal(annual_income)
    threshold = tax_threshold(marital_status)

    if income <= threshold:
        return income * BASE_RATE

    return threshold * BASE_RATE + (income - threshold) * EXCESS_RATE


def monthly_tax(gross_salary: Number, marital_status: MaritalStatus | str) -> Decimal:
    """Monthly tax for a payslip, rounded to cents.

    Annualises the monthly gross, applies the schedule and spreads the
    result back over twelve months.
    """
    annual = to_decimal(gross_salary) * MONTHS_PER_YEAR
    tax = compute_tax(annual, marital_status) / MONTHS_PER_YEAR
    return tax.quantize(CENTS, rounding=ROUND_HALF_UP)


def net_salary(gross_salary: Number, total_deductions: Number, tax_amount: Number) -> Decimal:
    """Net pay: gross minus deductions minus tax."""
    return to_decimal(gross_salary) - to_decimal(total_deductions) - to_decimal(tax_amount)


def derive_payslip_figures(
    gross_salary: Number,
    total_deductions: Number,
    marital_status: MaritalStatus | str,
) -> tuple[Decimal, Decimal]:
    """Return ``(tax_amount, net_salary)`` for a payslip write."""
    tax = monthly_tax(gross_salary, marital_status)
    return tax, net_salary(gross_salary, total_deductions, tax)
