"""Payroll calculation engine - merges ledgers and rules into one record."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable

from hr_payroll.calculators.compensation import CompensationRules, round_to_cents
from hr_payroll.calculators.pay_periods import parse_iso_date
from hr_payroll.calculators.types import (
    Deductions,
    Employee,
    HoursBreakdown,
    LeaveRequest,
    PayrollComputation,
)
from hr_payroll.clock import utcnow
from hr_payroll.exceptions import EmployeeNotFound, InvalidDateRange
from hr_payroll.providers.base import EmployeeDirectory, HoursSource, LeaveSource

SATURDAY = 5
PAY_DATE_OFFSET = timedelta(days=1)


def iter_days(start: date, end: date) -> Iterable[date]:
    """Every calendar day in [start, end]."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def count_weekdays(start: date, end: date) -> int:
    """Number of Monday-Friday days in [start, end]."""
    return sum(1 for day in iter_days(start, end) if day.weekday() < SATURDAY)


def count_calendar_days(start: date, end: date) -> int:
    if end < start:
        return 0
    return (end - start).days + 1


def leave_hours(
    requests: Iterable[LeaveRequest],
    period_start: date,
    period_end: date,
    hours_per_day: Decimal = Decimal("8"),
) -> Decimal:
    """Paid leave hours falling inside a period.

    Each approved request is clipped to the period. Maternity leave counts
    every calendar day, other leave types count weekdays only. Overlapping
    requests are not merged: each contributes its own days.
    """
    total = Decimal("0")
    for request in requests:
        if not request.is_approved:
            continue
        if request.start_date > period_end or request.end_date < period_start:
            continue

        clipped_start = max(request.start_date, period_start)
        clipped_end = min(request.end_date, period_end)
        if clipped_start > clipped_end:
            continue

        if request.counts_calendar_days:
            days = count_calendar_days(clipped_start, clipped_end)
        else:
            days = count_weekdays(clipped_start, clipped_end)
        total += Decimal(days) * hours_per_day
    return total


class PayrollEngine:
    """Main payroll calculation engine.

    Calculation pipeline (stable order per employee):
    1) Sum worked hours from the time ledger
    2) Add paid leave hours from approved leave requests
    3) Derive standard hours from the weekdays in the period
    4) Split total hours into regular and overtime
    5) Price hours with the role's hourly rate (overtime at 125%)
    6) Add the role's allowance; commissions and incentives start at zero
    7) Gross pay
    8) Statutory deductions plus loans (zero at generation)
    9) Net pay
    10) Pay date = period end + 1 day

    The engine never writes. Given the same ledger snapshots it produces the
    same numbers.
    """

    def __init__(
        self,
        hours: HoursSource,
        directory: EmployeeDirectory,
        leaves: LeaveSource,
        rules: CompensationRules | None = None,
    ):
        self.hours = hours
        self.directory = directory
        self.leaves = leaves
        self.rules = rules or CompensationRules()

    async def compute_for_employee(
        self,
        employee_id: str,
        period_start: date | str,
        period_end: date | str,
        *,
        created_by: str = "SYSTEM",
        now: datetime | None = None,
    ) -> PayrollComputation:
        """Compute an itemized, unpersisted payroll record for one employee."""
        start, end = self._validate_range(period_start, period_end)
        employee = self._get_employee(employee_id)

        breakdown = HoursBreakdown(
            worked_hours=await self.hours.sum_in_range(employee_id, start, end),
            leave_hours=leave_hours(
                self.leaves.leave_requests_for(employee_id),
                start,
                end,
                self.rules.hours_per_day,
            ),
            standard_hours=Decimal(count_weekdays(start, end)) * self.rules.hours_per_day,
        )

        rate = self.rules.hourly_rate(employee.role)
        basic_pay = round_to_cents(breakdown.regular_hours * rate)
        overtime = round_to_cents(breakdown.overtime_hours * rate * self.rules.overtime_premium)
        allowances = round_to_cents(self.rules.allowance(employee.role))
        commissions = Decimal("0.00")
        incentives = Decimal("0.00")

        gross = basic_pay + overtime + allowances + commissions + incentives
        deductions = Deductions.from_statutory(
            self.rules.statutory_deductions(gross),
            loans=Decimal("0.00"),
        )

        return PayrollComputation(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            role=employee.role,
            pay_period_start=start,
            pay_period_end=end,
            pay_date=end + PAY_DATE_OFFSET,
            hours=breakdown,
            hourly_rate=rate,
            basic_pay=basic_pay,
            overtime=overtime,
            allowances=allowances,
            commissions=commissions,
            incentives=incentives,
            deductions=deductions,
            created_by=created_by,
            created_at=now or utcnow(),
        )

    def _get_employee(self, employee_id: str) -> Employee:
        employee = self.directory.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFound(employee_id)
        return employee

    @staticmethod
    def _validate_range(period_start: date | str, period_end: date | str) -> tuple[date, date]:
        try:
            start = parse_iso_date(period_start)
            end = parse_iso_date(period_end)
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidDateRange(period_start, period_end, str(e)) from e

        if start > end:
            raise InvalidDateRange(start, end, "period start is after period end")
        return start, end
