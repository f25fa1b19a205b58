"""Audit recorder.

Every mutation ends with one call to ``AuditRecorder.record``. The entry is
always appended locally; persisting it remotely is best effort and a
remote failure is logged and swallowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from payroll_records.models.entities import AuditLog
from payroll_records.remote.base import RemoteResource
from payroll_records.remote.mapping import audit_log_to_remote, remote_id
from payroll_records.services.entity_store import Collection

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecorder:
    """Appends audit entries with strictly increasing local ids.

    The remote-assigned id is adopted only when it keeps the sequence
    increasing; otherwise the next local id is used.
    """

    def __init__(
        self,
        logs: Collection[AuditLog],
        remote: RemoteResource,
        clock: Clock = utc_now,
    ):
        self.logs = logs
        self.remote = remote
        self.clock = clock

    def _next_id(self, assigned: int | None) -> int:
        local = self.logs.next_id()
        if assigned is not None and assigned >= local:
            return assigned
        return local

    async def record(self, action: str, details: str, performed_by: str) -> AuditLog:
        """Record an action. Never raises for remote failures."""
        assigned: int | None = None
        try:
            response = await self.remote.create(
                audit_log_to_remote(action, details, performed_by)
            )
            assigned = remote_id(response)
        except Exception:
            logger.exception("Failed to persist audit entry %r; keeping local copy", action)

        entry = AuditLog(
            id=self._next_id(assigned),
            action=action,
            details=details,
            performed_by=performed_by,
            timestamp=self.clock(),
        )
        self.logs.insert(entry)
        return entry

    def entries(self) -> list[AuditLog]:
        """Entries newest first."""
        return list(reversed(self.logs.list()))
