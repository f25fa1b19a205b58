"""In-memory remote gateway for local development and testing.

Replace with ``HttpRemoteGateway`` to talk to the real payroll API.
"""

from __future__ import annotations

import copy
from typing import Any

from payroll_records.remote.base import (
    RemoteError,
    RemoteNotFoundError,
    RemoteRecord,
    TransportError,
)


class StubResource:
    """Dict-backed remote collection.

    Failures can be injected per operation with ``fail(operation)``;
    every call is recorded in ``calls`` as ``(operation, args)``.
    """

    def __init__(self, name: str, records: list[RemoteRecord] | None = None, *, assign_ids: bool = True):
        self.name = name
        self.assign_ids = assign_ids
        self._records: dict[int, RemoteRecord] = {}
        self._failures: dict[str, RemoteError] = {}
        self.calls: list[tuple[str, Any]] = []
        for record in records or []:
            self._records[int(record["id"])] = copy.deepcopy(record)

    @property
    def records(self) -> list[RemoteRecord]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def fail(self, operation: str, error: RemoteError | None = None) -> None:
        """Make ``operation`` raise until ``heal`` is called."""
        self._failures[operation] = error or TransportError(f"{self.name}: injected failure")

    def heal(self, operation: str | None = None) -> None:
        if operation is None:
            self._failures.clear()
        else:
            self._failures.pop(operation, None)

    def _enter(self, operation: str, args: Any) -> None:
        self.calls.append((operation, args))
        error = self._failures.get(operation)
        if error is not None:
            raise error

    def _next_id(self) -> int:
        return max(self._records, default=0) + 1

    async def list(self) -> list[RemoteRecord]:
        self._enter("list", None)
        return self.records

    async def get_by_id(self, record_id: int) -> RemoteRecord:
        self._enter("get_by_id", record_id)
        if record_id not in self._records:
            raise RemoteNotFoundError(f"{self.name}: {record_id} not found", status_code=404)
        return copy.deepcopy(self._records[record_id])

    async def create(self, payload: RemoteRecord) -> RemoteRecord:
        self._enter("create", copy.deepcopy(payload))
        record = copy.deepcopy(payload)
        if not self.assign_ids:
            return record
        record["id"] = self._next_id()
        self._records[record["id"]] = record
        return copy.deepcopy(record)

    async def update(self, record_id: int, payload: RemoteRecord) -> RemoteRecord:
        self._enter("update", (record_id, copy.deepcopy(payload)))
        if record_id not in self._records:
            raise RemoteNotFoundError(f"{self.name}: {record_id} not found", status_code=404)
        self._records[record_id].update(copy.deepcopy(payload))
        return copy.deepcopy(self._records[record_id])

    async def delete(self, record_id: int) -> None:
        self._enter("delete", record_id)
        if record_id not in self._records:
            raise RemoteNotFoundError(f"{self.name}: {record_id} not found", status_code=404)
        del self._records[record_id]


class StubRemoteGateway:
    """Gateway made of ``StubResource`` collections."""

    def __init__(self, departments: list[RemoteRecord] | None = None):
        self.allowance_types = StubResource("allowance-types")
        self.employees = StubResource("employees")
        self.payslips = StubResource("payroll-records")
        self.allowances = StubResource("allowances")
        self.audit_logs = StubResource("audit-logs")
        self.departments = StubResource("departments", departments)
        self.closed = False

    async def close(self) -> None:
        self.closed = True
