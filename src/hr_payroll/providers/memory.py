"""In-memory collaborator implementations.

Useful when embedding the engine next to an application that keeps its
employee and leave data in process, and in tests.
"""

from __future__ import annotations

from typing import Iterable

from hr_payroll.calculators.types import Employee, LeaveRequest


class InMemoryEmployeeDirectory:
    """Employee directory backed by a dict."""

    def __init__(self, employees: Iterable[Employee] = ()):
        self._employees: dict[str, Employee] = {}
        for employee in employees:
            self.add(employee)

    def add(self, employee: Employee) -> None:
        self._employees[employee.employee_id] = employee

    def remove(self, employee_id: str) -> None:
        self._employees.pop(employee_id, None)

    def get_employee(self, employee_id: str) -> Employee | None:
        return self._employees.get(employee_id)

    def __len__(self) -> int:
        return len(self._employees)


class InMemoryLeaveSource:
    """Leave source backed by a list of requests."""

    def __init__(self, requests: Iterable[LeaveRequest] = ()):
        self._requests: list[LeaveRequest] = list(requests)

    def add(self, request: LeaveRequest) -> None:
        self._requests.append(request)

    def leave_requests_for(self, employee_id: str) -> list[LeaveRequest]:
        return [r for r in self._requests if r.employee_id == employee_id]
