"""Collaborator contracts and in-memory implementations."""

from hr_payroll.providers.base import EmployeeDirectory, HoursSource, LeaveSource
from hr_payroll.providers.memory import InMemoryEmployeeDirectory, InMemoryLeaveSource

__all__ = [
    "EmployeeDirectory",
    "HoursSource",
    "LeaveSource",
    "InMemoryEmployeeDirectory",
    "InMemoryLeaveSource",
]
