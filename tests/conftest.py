"""Pytest fixtures for payroll records tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from payroll_records.config import Settings
from payroll_records.models.entities import MaritalStatus
from payroll_records.remote.stub import StubRemoteGateway
from payroll_records.services.session import PayrollSession

FIXED_NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)

DEPARTMENTS = [
    {"id": 10, "name": "Elementary"},
    {"id": 20, "name": "Management"},
]


def make_settings(**overrides) -> Settings:
    values = dict(
        remote_api_url="http://payroll.test/api/",
        remote_backend="stub",
        remote_timeout_seconds=5.0,
        audit_actor="Admin",
        default_department_id=1,
        default_employee_password="secret-default",
        host="127.0.0.1",
        port=8080,
        debug=False,
    )
    values.update(overrides)
    return Settings(**values)


def employee_data(**overrides) -> dict:
    data = dict(
        first_name="John",
        last_name="Doe",
        email="john.doe@example.edu",
        position="Teacher",
        department="Elementary",
        date_hired=date(2022, 1, 15),
        salary=Decimal("45000"),
        marital_status=MaritalStatus.SINGLE,
    )
    data.update(overrides)
    return data


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def gateway() -> StubRemoteGateway:
    return StubRemoteGateway(departments=DEPARTMENTS)


@pytest_asyncio.fixture
async def session(gateway: StubRemoteGateway, settings: Settings) -> AsyncGenerator[PayrollSession, None]:
    """Empty session backed by the stub gateway."""
    async with PayrollSession(gateway, settings, clock=lambda: FIXED_NOW) as s:
        yield s


@pytest_asyncio.fixture
async def seeded(session: PayrollSession) -> PayrollSession:
    """Session with two employees and two allowance types."""
    await session.add_employee(employee_data())
    await session.add_employee(
        employee_data(
            first_name="Jane",
            last_name="Smith",
            email="jane.smith@example.edu",
            position="Administrator",
            department="Management",
            date_hired=date(2021, 6, 10),
            salary=Decimal("55000"),
            marital_status=MaritalStatus.MARRIED,
        )
    )
    await session.add_allowance_type({"name": "Degree", "is_percentage": True})
    await session.add_allowance_type({"name": "Encourage", "is_percentage": False})
    return session
