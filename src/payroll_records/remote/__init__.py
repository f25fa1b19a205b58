"""Remote persistence collaborators."""

from payroll_records.remote.base import (
    Department,
    RemoteError,
    RemoteGateway,
    RemoteNotFoundError,
    RemoteRecord,
    RemoteResource,
    RemoteValidationError,
    TransportError,
)
from payroll_records.remote.http import HttpRemoteGateway, HttpResource
from payroll_records.remote.stub import StubRemoteGateway, StubResource

__all__ = [
    "Department",
    "HttpRemoteGateway",
    "HttpResource",
    "RemoteError",
    "RemoteGateway",
    "RemoteNotFoundError",
    "RemoteRecord",
    "RemoteResource",
    "RemoteValidationError",
    "StubRemoteGateway",
    "StubResource",
    "TransportError",
]
