"""HTTP implementation of the remote gateway over ``httpx``.

Talks to the payroll REST API (``allowance-types/``, ``employees/``,
``payroll-records/``, ``allowances/``, ``audit-logs/``, ``departments/``).
Updates use PATCH. Each call is a single attempt bounded by the client
timeout.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import httpx

from payroll_records.config import Settings
from payroll_records.remote.base import (
    RemoteError,
    RemoteNotFoundError,
    RemoteRecord,
    RemoteValidationError,
    TransportError,
)

logger = logging.getLogger(__name__)


def _jsonable(value: Any) -> Any:
    """Convert Decimals and dates for the JSON body."""
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _raise_for_status(response: httpx.Response, resource: str) -> None:
    code = response.status_code
    if code < 400:
        return
    message = f"{resource}: HTTP {code}"
    if code == 404:
        raise RemoteNotFoundError(message, status_code=code)
    if code < 500:
        detail = response.text[:200]
        raise RemoteValidationError(f"{message} {detail}".strip(), status_code=code)
    raise TransportError(message, status_code=code)


class HttpResource:
    """One REST collection, e.g. ``employees/``."""

    def __init__(self, client: httpx.AsyncClient, path: str):
        self.client = client
        self.path = path if path.endswith("/") else f"{path}/"
        self.name = self.path.rstrip("/")

    def _item(self, record_id: int) -> str:
        return f"{self.path}{record_id}/"

    async def _request(self, method: str, url: str, payload: RemoteRecord | None = None) -> Any:
        try:
            response = await self.client.request(
                method,
                url,
                json=_jsonable(payload) if payload is not None else None,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{self.name}: {e.__class__.__name__}: {e}") from e

        _raise_for_status(response, self.name)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"{self.name}: invalid JSON response") from e

    async def list(self) -> list[RemoteRecord]:
        data = await self._request("GET", self.path)
        if isinstance(data, dict) and "results" in data:
            # Paginated listing
            data = data["results"]
        if not isinstance(data, list):
            raise RemoteError(f"{self.name}: expected a list response")
        return data

    async def get_by_id(self, record_id: int) -> RemoteRecord:
        return await self._request("GET", self._item(record_id))

    async def create(self, payload: RemoteRecord) -> RemoteRecord:
        return await self._request("POST", self.path, payload) or {}

    async def update(self, record_id: int, payload: RemoteRecord) -> RemoteRecord:
        return await self._request("PATCH", self._item(record_id), payload) or {}

    async def delete(self, record_id: int) -> None:
        await self._request("DELETE", self._item(record_id))


class HttpRemoteGateway:
    """All remote collections sharing one ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.allowance_types = HttpResource(client, "allowance-types/")
        self.employees = HttpResource(client, "employees/")
        self.payslips = HttpResource(client, "payroll-records/")
        self.allowances = HttpResource(client, "allowances/")
        self.audit_logs = HttpResource(client, "audit-logs/")
        self.departments = HttpResource(client, "departments/")

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpRemoteGateway:
        client = httpx.AsyncClient(
            base_url=settings.remote_api_url,
            timeout=settings.remote_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
        logger.info("Remote gateway targeting %s", settings.remote_api_url)
        return cls(client)

    async def close(self) -> None:
        await self.client.aclose()
