"""Payroll record services."""

from payroll_records.services.audit_recorder import AuditRecorder
from payroll_records.services.entity_store import Collection, EntityStore, StoreSnapshot
from payroll_records.services.orchestrator import (
    EntityNotFoundError,
    MutationOrchestrator,
    MutationResult,
)
from payroll_records.services.session import PayrollSession
from payroll_records.services.state_machine import InvalidTransitionError, PayslipStateMachine

__all__ = [
    "AuditRecorder",
    "Collection",
    "EntityNotFoundError",
    "EntityStore",
    "InvalidTransitionError",
    "MutationOrchestrator",
    "MutationResult",
    "PayrollSession",
    "PayslipStateMachine",
    "StoreSnapshot",
]
