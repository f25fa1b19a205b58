"""Payslip status state machine with transition validation."""

from __future__ import annotations

from datetime import date

from payroll_records.models.entities import PayslipStatus


class InvalidTransitionError(Exception):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayslipStateMachine:
    """State machine for payslip status transitions.

    Allowed transitions:
    - draft → approved
    - approved → draft (reopen)
    - approved → paid
    Paid is terminal. Staying in the same status is always allowed.
    """

    VALID_TRANSITIONS: dict[PayslipStatus, list[PayslipStatus]] = {
        PayslipStatus.DRAFT: [PayslipStatus.APPROVED],
        PayslipStatus.APPROVED: [PayslipStatus.DRAFT, PayslipStatus.PAID],
        PayslipStatus.PAID: [],
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        src, dst = PayslipStatus(from_status), PayslipStatus(to_status)
        return src == dst or dst in cls.VALID_TRANSITIONS[src]

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(PayslipStatus(from_status).value, PayslipStatus(to_status).value)

    @classmethod
    def is_reopen(cls, from_status: str, to_status: str) -> bool:
        return (
            PayslipStatus(from_status) == PayslipStatus.APPROVED
            and PayslipStatus(to_status) == PayslipStatus.DRAFT
        )

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[PayslipStatus]:
        return list(cls.VALID_TRANSITIONS[PayslipStatus(current_status)])

    @staticmethod
    def resolve_payment_date(status: str, payment_date: date | None) -> date | None:
        """Payment date for a payslip in ``status``.

        Paid payslips must carry a date; any other status has none.
        """
        if PayslipStatus(status) == PayslipStatus.PAID:
            if payment_date is None:
                raise ValueError("payment_date is required when status is 'paid'")
            return payment_date
        return None
