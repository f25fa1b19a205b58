"""Remote persistence contract.

The entity store persists every entity kind through a ``RemoteResource``.
Records crossing this boundary are remote-shaped dicts (snake_case field
names as served by the payroll REST API). Translation to and from local
entities lives in ``payroll_records.remote.mapping``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

RemoteRecord = dict[str, Any]


class RemoteError(Exception):
    """Base class for remote collaborator failures."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TransportError(RemoteError):
    """Remote unreachable, timed out or answered with a server error."""


class RemoteValidationError(RemoteError):
    """Remote rejected the payload (4xx other than 404)."""


class RemoteNotFoundError(RemoteError):
    """Remote has no record with the requested id."""


class RemoteResource(Protocol):
    """CRUD operations for one remote collection.

    Every method performs at most one attempt; bounding hung calls is the
    implementation's job.
    """

    name: str

    async def list(self) -> list[RemoteRecord]:
        ...

    async def get_by_id(self, record_id: int) -> RemoteRecord:
        ...

    async def create(self, payload: RemoteRecord) -> RemoteRecord:
        ...

    async def update(self, record_id: int, payload: RemoteRecord) -> RemoteRecord:
        ...

    async def delete(self, record_id: int) -> None:
        ...


class RemoteGateway(Protocol):
    """Bundle of the remote collections used by a payroll session."""

    allowance_types: RemoteResource
    employees: RemoteResource
    payslips: RemoteResource
    allowances: RemoteResource
    audit_logs: RemoteResource
    departments: RemoteResource

    async def close(self) -> None:
        ...


@dataclass(frozen=True)
class Department:
    """Department as listed by the remote department directory."""

    id: int
    name: str

    @classmethod
    def from_remote(cls, record: RemoteRecord) -> Department:
        return cls(id=int(record["id"]), name=str(record.get("name", "")))
