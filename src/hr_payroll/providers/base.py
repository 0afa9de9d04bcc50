"""Protocols for the collaborators the engine reads from.

The employee directory and the leave module are owned by other parts of the
HR system. The engine only needs the narrow read contracts below.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from hr_payroll.calculators.types import Employee, LeaveRequest


class EmployeeDirectory(Protocol):
    """Lookup of employee name and role by id."""

    def get_employee(self, employee_id: str) -> Employee | None:
        """Return the employee, or None when the id is unknown."""
        ...


class LeaveSource(Protocol):
    """Read-only view of the leave module's requests."""

    def leave_requests_for(self, employee_id: str) -> Iterable[LeaveRequest]:
        """Return every leave request of an employee, in any status."""
        ...


class HoursSource(Protocol):
    """Worked hours lookup (implemented by the time ledger)."""

    async def sum_in_range(self, employee_id: str, start: date, end: date) -> Decimal:
        """Total hours recorded for the employee in [start, end]."""
        ...
