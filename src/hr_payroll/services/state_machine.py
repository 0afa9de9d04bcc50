"""Payroll record status state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from hr_payroll.exceptions import InvalidStatusTransition


class PayrollStatus(str, Enum):
    """Payroll record status values."""

    PENDING = "Pending"
    PROCESSED = "Processed"
    PAID = "Paid"


def _status_value(status: PayrollStatus | str) -> str:
    return status.value if isinstance(status, PayrollStatus) else str(status)


class PayrollStateMachine:
    """State machine for payroll record status transitions.

    Allowed transitions:
    - Pending → Processed
    - Processed → Paid

    Edits to amounts never change status; only explicit transitions do.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.PENDING: [PayrollStatus.PROCESSED],
        PayrollStatus.PROCESSED: [PayrollStatus.PAID],
        PayrollStatus.PAID: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is allowed."""
        try:
            from_enum = PayrollStatus(from_status)
            to_enum = PayrollStatus(to_status)
        except ValueError:
            return False
        return to_enum in cls.VALID_TRANSITIONS.get(from_enum, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Raise InvalidStatusTransition if the transition is not allowed."""
        if not cls.can_transition(from_status, to_status):
            allowed = [
                s.value for s in cls.get_allowed_transitions(from_status)
            ]
            raise InvalidStatusTransition(
                _status_value(from_status),
                _status_value(to_status),
                f"allowed: {allowed}" if allowed else "status is terminal",
            )

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> list[PayrollStatus]:
        try:
            return list(cls.VALID_TRANSITIONS.get(PayrollStatus(from_status), []))
        except ValueError:
            return []

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.get_allowed_transitions(status)
