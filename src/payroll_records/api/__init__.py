"""HTTP API for payroll records."""
