"""Tests for report aggregation over store snapshots."""

from datetime import date, datetime, timezone
from decimal import Decimal

from hypothesis import given, strategies as st

from payroll_records.models.entities import (
    Allowance,
    AuditLog,
    Employee,
    MaritalStatus,
    Payslip,
    PayslipStatus,
)
from payroll_records.services import report_aggregator
from payroll_records.services.entity_store import StoreSnapshot
from payroll_records.services.report_aggregator import Totals


def make_employee(employee_id: int, department: str, salary: str = "40000", **overrides) -> Employee:
    values = dict(
        id=employee_id,
        first_name=f"First{employee_id}",
        last_name=f"Last{employee_id}",
        email=f"e{employee_id}@example.edu",
        position="Teacher",
        department=department,
        date_hired=date(2020, 1, 1),
        salary=Decimal(salary),
        marital_status=MaritalStatus.SINGLE,
    )
    values.update(overrides)
    return Employee(**values)


def make_payslip(payslip_id: int, employee_id: int, period: str = "2024-03", gross: str = "1000", **overrides) -> Payslip:
    values = dict(
        id=payslip_id,
        employee_id=employee_id,
        employee_name=f"Employee {employee_id}",
        period=period,
        gross_salary=Decimal(gross),
        total_deductions=Decimal("100"),
        tax_amount=Decimal("10"),
        net_salary=Decimal(gross) - Decimal("110"),
    )
    values.update(overrides)
    return Payslip(**values)


def make_log(log_id: int, action: str, performed_by: str, when: datetime) -> AuditLog:
    return AuditLog(id=log_id, action=action, details=f"{action} {log_id}", performed_by=performed_by, timestamp=when)


EMPLOYEES = (
    make_employee(1, "Elementary", "40000"),
    make_employee(2, "Management", "55000"),
    make_employee(3, "Elementary", "45000"),
)

PAYSLIPS = (
    make_payslip(1, 1, "2024-03", "1000"),
    make_payslip(2, 2, "2024-03", "2000"),
    make_payslip(3, 3, "2024-02", "3000", status=PayslipStatus.PAID, payment_date=date(2024, 2, 28)),
    # employee 9 no longer exists
    make_payslip(4, 9, "2024-03", "5000"),
)


def snapshot(**overrides) -> StoreSnapshot:
    values = dict(employees=EMPLOYEES, payslips=PAYSLIPS)
    values.update(overrides)
    return StoreSnapshot(**values)


class TestPayrollSummary:
    """Department rollups and grand totals."""

    def test_groups_by_department(self):
        summary = report_aggregator.payroll_summary(snapshot())

        by_name = {row.department: row for row in summary.departments}
        assert list(by_name) == ["Elementary", "Management"]
        assert by_name["Elementary"].employee_count == 2
        assert by_name["Elementary"].totals.payslip_count == 2
        assert by_name["Elementary"].totals.gross == Decimal("4000")
        assert by_name["Management"].totals.net == Decimal("1890")

    def test_deleted_employee_payslips_are_excluded(self):
        summary = report_aggregator.payroll_summary(snapshot())

        assert summary.grand_total.payslip_count == 3
        assert summary.grand_total.gross == Decimal("6000")

    def test_period_prefix_filter(self):
        summary = report_aggregator.payroll_summary(snapshot(), period="2024-03")

        assert summary.period == "2024-03"
        assert summary.grand_total.payslip_count == 2
        assert report_aggregator.payroll_summary(snapshot(), period="2024").grand_total.payslip_count == 3

    def test_department_filter(self):
        summary = report_aggregator.payroll_summary(snapshot(), department="Management")

        assert [row.department for row in summary.departments] == ["Management"]
        assert summary.grand_total.gross == Decimal("2000")

    def test_empty_snapshot(self):
        summary = report_aggregator.payroll_summary(StoreSnapshot())

        assert summary.departments == ()
        assert summary.grand_total == Totals()

    @given(
        st.lists(
            st.tuples(
                st.integers(min_value=1, max_value=6),
                st.sampled_from(["2024-01", "2024-02", "2024-03"]),
                st.decimals(min_value=0, max_value=100000, places=2, allow_nan=False, allow_infinity=False),
            ),
            max_size=30,
        )
    )
    def test_department_totals_add_up_to_grand_total(self, rows):
        payslips = tuple(
            make_payslip(i + 1, employee_id, period, str(gross))
            for i, (employee_id, period, gross) in enumerate(rows)
        )
        summary = report_aggregator.payroll_summary(snapshot(payslips=payslips))

        added = sum((row.totals for row in summary.departments), Totals())
        assert added == summary.grand_total


class TestEmployeeReport:
    def test_all_employees(self):
        report = report_aggregator.employee_report(snapshot())

        assert report.headcount == 3
        assert report.average_salary == Decimal("46666.67")

    def test_department_filter(self):
        report = report_aggregator.employee_report(snapshot(), department="Elementary")

        assert [e.id for e in report.employees] == [1, 3]
        assert report.average_salary == Decimal("42500.00")

    def test_empty(self):
        report = report_aggregator.employee_report(snapshot(), department="Sports")

        assert report.headcount == 0
        assert report.average_salary == Decimal("0.00")


class TestAllowanceReport:
    def test_joins_current_employee_name(self):
        allowances = (
            Allowance(id=1, employee_id=1, allowance_type_id=1, allowance_type_name="Degree", amount=Decimal("10"), is_percentage=True),
            Allowance(id=2, employee_id=9, allowance_type_id=2, allowance_type_name="Risk", amount=Decimal("500"), is_percentage=False),
        )
        report = report_aggregator.allowance_report(snapshot(allowances=allowances))

        assert report.count == 2
        assert report.rows[0].employee_name == "First1 Last1"
        assert report.rows[1].employee_name == "Unknown"

    def test_employee_filter(self):
        allowances = (
            Allowance(id=1, employee_id=1, allowance_type_id=1, allowance_type_name="Degree", amount=Decimal("10"), is_percentage=True),
            Allowance(id=2, employee_id=2, allowance_type_id=1, allowance_type_name="Degree", amount=Decimal("5"), is_percentage=True),
        )
        report = report_aggregator.allowance_report(snapshot(allowances=allowances), employee_id=2)

        assert [row.allowance.id for row in report.rows] == [2]


class TestDashboard:
    def test_counts_and_recent(self):
        summary = report_aggregator.dashboard_summary(snapshot(), recent=2)

        assert summary.total_employees == 3
        assert summary.total_payslips == 4
        assert summary.pending_payslips == 3
        assert summary.total_allowance_types == 0
        assert [p.id for p in summary.recent_payslips] == [4, 3]
        assert [e.id for e in summary.recent_employees] == [3, 2]

    def test_recent_zero(self):
        summary = report_aggregator.dashboard_summary(snapshot(), recent=0)
        assert summary.recent_payslips == ()


class TestAuditTrail:
    LOGS = (
        make_log(3, "Delete", "hr.manager", datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)),
        make_log(2, "Update", "Admin", datetime(2024, 3, 14, 9, 0, tzinfo=timezone.utc)),
        make_log(1, "Create", "Admin", datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)),
    )

    def test_no_filters(self):
        trail = report_aggregator.audit_trail(StoreSnapshot(audit_logs=self.LOGS))

        assert [log.id for log in trail.entries] == [3, 2, 1]
        assert trail.actions == ("Delete", "Update", "Create")

    def test_action_filter(self):
        trail = report_aggregator.audit_trail(StoreSnapshot(audit_logs=self.LOGS), action="Update")
        assert [log.id for log in trail.entries] == [2]

    def test_date_prefix_filter(self):
        trail = report_aggregator.audit_trail(StoreSnapshot(audit_logs=self.LOGS), date="2024-03")
        assert [log.id for log in trail.entries] == [3, 2]

    def test_user_filter_is_case_insensitive_substring(self):
        trail = report_aggregator.audit_trail(StoreSnapshot(audit_logs=self.LOGS), performed_by="ADM")
        assert [log.id for log in trail.entries] == [2, 1]
