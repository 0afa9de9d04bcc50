"""Tests for payroll record status state machine."""

import pytest

from hr_payroll.exceptions import InvalidStatusTransition
from hr_payroll.services.state_machine import PayrollStateMachine, PayrollStatus


class TestPayrollStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # Pending → Processed
        assert PayrollStateMachine.can_transition("Pending", "Processed") is True

        # Processed → Paid
        assert PayrollStateMachine.can_transition("Processed", "Paid") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Can't skip processing
        assert PayrollStateMachine.can_transition("Pending", "Paid") is False

        # Can't go backwards
        assert PayrollStateMachine.can_transition("Processed", "Pending") is False
        assert PayrollStateMachine.can_transition("Paid", "Processed") is False

        # Unknown statuses
        assert PayrollStateMachine.can_transition("Pending", "Voided") is False
        assert PayrollStateMachine.can_transition("Draft", "Pending") is False

    def test_accepts_enum_members(self):
        assert PayrollStateMachine.can_transition(
            PayrollStatus.PENDING, PayrollStatus.PROCESSED
        )

    def test_validate_transition_raises(self):
        """Test that validate_transition raises for invalid transitions."""
        with pytest.raises(InvalidStatusTransition) as exc_info:
            PayrollStateMachine.validate_transition("Pending", PayrollStatus.PAID)

        assert exc_info.value.from_status == "Pending"
        assert exc_info.value.to_status == "Paid"
        assert "Processed" in str(exc_info.value)

    def test_paid_is_terminal(self):
        assert PayrollStateMachine.is_terminal("Paid") is True
        assert PayrollStateMachine.is_terminal("Pending") is False
        assert PayrollStateMachine.get_allowed_transitions("Paid") == []
