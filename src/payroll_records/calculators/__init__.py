"""Payroll figure calculators."""

from payroll_records.calculators.currency import format_currency
from payroll_records.calculators.tax_calculator import (
    CENTS,
    TAX_THRESHOLDS,
    compute_tax,
    derive_payslip_figures,
    monthly_tax,
    net_salary,
    tax_threshold,
    to_decimal,
)

__all__ = [
    "CENTS",
    "TAX_THRESHOLDS",
    "compute_tax",
    "derive_payslip_figures",
    "format_currency",
    "monthly_tax",
    "net_salary",
    "tax_threshold",
    "to_decimal",
]
