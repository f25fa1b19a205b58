"""Tests for session loading and lifecycle."""

from decimal import Decimal

import pytest

from payroll_records.models.entities import MaritalStatus, PayslipStatus
from payroll_records.remote.stub import StubRemoteGateway, StubResource
from payroll_records.services.session import LOAD_ERROR, PayrollSession

from .conftest import DEPARTMENTS

pytestmark = pytest.mark.asyncio


def remote_gateway() -> StubRemoteGateway:
    """Stub gateway pre-populated with remote-shaped records."""
    gateway = StubRemoteGateway(departments=DEPARTMENTS)
    gateway.employees = StubResource(
        "employees",
        [
            {
                "id": 7,
                "user": {"first_name": "Ana", "last_name": "Cruz", "email": "ana@example.edu"},
                "position": "Teacher",
                "department_name": "Elementary",
                "date_joined": "2020-08-01",
                "salary": "42000.00",
                "gender": "M",
            }
        ],
    )
    gateway.allowance_types = StubResource(
        "allowance-types",
        [{"id": 3, "name": "Risk", "is_percentage": False, "description": None}],
    )
    gateway.payslips = StubResource(
        "payroll-records",
        [
            {
                "id": 11,
                "employee": 7,
                "employee_name": "Ana Cruz",
                "year": 2024,
                "month": 2,
                "deductions": "200.00",
                "tax": "350.00",
                "net_salary": "41450.00",
                "status": "paid",
                "payment_date": "2024-02-29",
            }
        ],
    )
    gateway.allowances = StubResource(
        "allowances",
        [
            {
                "id": 5,
                "employee": 7,
                "allowance_type": 3,
                "allowance_type_name": "Risk",
                "amount": "1500",
                "is_percentage": False,
            }
        ],
    )
    gateway.audit_logs = StubResource(
        "audit-logs",
        [
            {"id": 4, "action": "Update", "details": "Updated employee ID: 7", "performed_by": "Admin", "timestamp": "2024-03-02T09:00:00Z"},
            {"id": 2, "action": "Create", "details": "Created employee: Ana Cruz", "performed_by": "Admin", "timestamp": "2024-03-01T09:00:00Z"},
        ],
    )
    return gateway


class TestLoad:
    async def test_load_hydrates_every_collection(self, settings):
        async with PayrollSession(remote_gateway(), settings) as session:
            assert await session.load() is True

            snap = session.snapshot()
            employee = snap.employee(7)
            assert employee.full_name == "Ana Cruz"
            assert employee.marital_status == MaritalStatus.MARRIED
            assert employee.salary == Decimal("42000.00")

            payslip = snap.payslips[0]
            assert payslip.period == "2024-02"
            assert payslip.gross_salary == Decimal("42000.00")
            assert payslip.status == PayslipStatus.PAID

            assert snap.allowance_types[0].description == ""
            assert snap.allowances[0].amount == Decimal("1500")
            assert [log.id for log in snap.audit_logs] == [4, 2]
            assert session.error is None
            assert session.loading is False

    async def test_mutation_after_load_continues_ids(self, settings):
        gateway = remote_gateway()
        gateway.audit_logs.fail("create")
        async with PayrollSession(gateway, settings) as session:
            await session.load()
            entry = await session.log_action("Login", "User signed in")
            assert entry.id == 5

    async def test_partial_failure_sets_error(self, settings):
        gateway = remote_gateway()
        gateway.payslips.fail("list")
        async with PayrollSession(gateway, settings) as session:
            assert await session.load() is False

            assert session.error == LOAD_ERROR
            assert session.snapshot().payslips == ()
            assert len(session.snapshot().employees) == 1
            assert len(session.snapshot().allowances) == 1

    async def test_failed_kind_keeps_existing_contents(self, settings):
        gateway = remote_gateway()
        async with PayrollSession(gateway, settings) as session:
            await session.load()
            gateway.employees.fail("list")

            assert await session.load() is False
            assert session.snapshot().employee(7) is not None

    async def test_reload_clears_error(self, settings):
        gateway = remote_gateway()
        gateway.allowances.fail("list")
        async with PayrollSession(gateway, settings) as session:
            await session.load()
            gateway.allowances.heal()

            assert await session.load() is True
            assert session.error is None

    async def test_malformed_record_fails_its_kind(self, settings):
        gateway = remote_gateway()
        gateway.allowances = StubResource("allowances", [{"id": 1, "employee": 7}])
        async with PayrollSession(gateway, settings) as session:
            assert await session.load() is False
            assert session.snapshot().allowances == ()

    async def test_department_failure_does_not_fail_load(self, settings):
        gateway = remote_gateway()
        gateway.departments.fail("list")
        async with PayrollSession(gateway, settings) as session:
            assert await session.load() is True


class TestClose:
    async def test_close_releases_gateway(self, settings):
        gateway = remote_gateway()
        session = PayrollSession(gateway, settings)
        await session.load()

        await session.close()

        assert gateway.closed is True
        assert session.closed is True
        assert session.snapshot().employees == ()

    async def test_close_is_idempotent(self, settings):
        gateway = StubRemoteGateway()
        session = PayrollSession(gateway, settings)
        await session.close()
        await session.close()
        assert session.closed is True


class TestHelpers:
    async def test_static_helpers(self, session: PayrollSession):
        assert session.calculate_tax(600000, "single") == Decimal("6500")
        assert session.format_currency(Decimal("1234567.5")) == "Rs. 12,34,567.5"

    async def test_reports_use_current_state(self, seeded: PayrollSession):
        summary = seeded.payroll_summary()
        assert [row.department for row in summary.departments] == ["Elementary", "Management"]
        assert seeded.employee_report().headcount == 2
        assert seeded.dashboard().total_allowance_types == 2
        assert seeded.audit_trail(action="Create").entries[0].details == "Created allowance type: Encourage"
