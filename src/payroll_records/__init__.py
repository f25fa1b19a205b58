"""Payroll records: entity state, remote sync, tax math, audit trail and reports."""

__version__ = "0.1.0"
