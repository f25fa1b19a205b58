"""Currency display formatting (Indian rupee grouping)."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal

from payroll_records.calculators.tax_calculator import Number, to_decimal

CURRENCY_PREFIX = "Rs. "
MAX_FRACTION = Decimal("0.001")


def group_indian(digits: str) -> str:
    """Group an integer digit string as 12,34,56,789."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Number) -> str:
    """Format an amount as ``Rs. 1,23,456.5``.

    At most three fraction digits are kept and trailing zeros dropped.
    """
    value = to_decimal(amount).quantize(MAX_FRACTION, rounding=ROUND_HALF_EVEN)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    fraction = fraction.rstrip("0")

    text = group_indian(whole)
    if fraction:
        text = f"{text}.{fraction}"
    return f"{CURRENCY_PREFIX}{sign}{text}"
