"""Error kinds raised by the payroll engine.

Every error is recoverable at the call site: the caller surfaces the message
and may retry. Generation retries are idempotent because of skip-if-exists.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class PayrollError(Exception):
    """Base class for all payroll engine errors."""


class EmployeeNotFound(PayrollError):
    """Raised when the employee directory has no entry for an id."""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee '{employee_id}' not found")


class InvalidDateRange(PayrollError):
    """Raised for malformed dates or a start date after the end date."""

    def __init__(self, start: Any, end: Any, reason: str | None = None):
        self.start = start
        self.end = end
        self.reason = reason
        msg = f"Invalid date range {start!r} - {end!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidPeriodFormat(PayrollError):
    """Raised when a period label cannot be split or parsed."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(
            f"Invalid pay period format {label!r}; expected 'YYYY-MM-DD - YYYY-MM-DD'"
        )


class BatchTooLarge(PayrollError):
    """Raised when a restricted role submits too many employees at once."""

    def __init__(self, role: str, size: int, limit: int):
        self.role = role
        self.size = size
        self.limit = limit
        super().__init__(
            f"{role} role can only generate payroll for up to {limit} employees "
            f"at once (got {size})"
        )


class RecordNotFound(PayrollError):
    """Raised when a payroll record id is unknown."""

    def __init__(self, payroll_id: Any):
        self.payroll_id = payroll_id
        super().__init__(f"Payroll record {payroll_id} not found")


class InsufficientPermissions(PayrollError):
    """Raised when the caller's role may not perform an operation."""

    def __init__(self, role: str | None, action: str):
        self.role = role
        self.action = action
        super().__init__(f"Insufficient permissions to {action} payroll (role: {role})")


class InvalidTimeEntry(PayrollError):
    """Raised for a time ledger entry with negative or unparseable hours."""

    def __init__(self, employee_id: str, work_date: date | str, hours: Any):
        self.employee_id = employee_id
        self.work_date = work_date
        self.hours = hours
        super().__init__(
            f"Invalid hours {hours!r} for employee '{employee_id}' on {work_date}"
        )


class InvalidStatusTransition(PayrollError):
    """Raised when a payroll record status change is not allowed."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
