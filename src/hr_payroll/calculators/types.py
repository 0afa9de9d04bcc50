"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hr_payroll.models import PayrollRecord


class LeaveType(str, Enum):
    """Leave categories known to the leave module."""

    VACATION = "Vacation"
    SICK = "Sick"
    EMERGENCY = "Emergency"
    MATERNITY = "Maternity"


class LeaveStatus(str, Enum):
    """Approval states of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class Employee:
    """Directory entry for an employee."""

    employee_id: str
    name: str
    role: str


@dataclass(frozen=True)
class LeaveRequest:
    """Leave request as exposed (read-only) by the leave module."""

    employee_id: str
    leave_type: LeaveType | str
    start_date: date
    end_date: date
    status: LeaveStatus | str

    @property
    def is_approved(self) -> bool:
        return _enum_value(self.status) == LeaveStatus.APPROVED.value

    @property
    def counts_calendar_days(self) -> bool:
        """Maternity leave is paid for every calendar day, not just weekdays."""
        return _enum_value(self.leave_type) == LeaveType.MATERNITY.value


def _enum_value(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass(frozen=True)
class StatutoryDeductions:
    """Government-mandated withholdings for one semi-monthly gross."""

    social_insurance: Decimal
    health_insurance: Decimal
    housing_fund: Decimal
    tax: Decimal

    @property
    def total(self) -> Decimal:
        return self.social_insurance + self.health_insurance + self.housing_fund + self.tax


@dataclass(frozen=True)
class Deductions:
    """Itemized deductions of a payroll record."""

    social_insurance: Decimal = Decimal("0")
    health_insurance: Decimal = Decimal("0")
    housing_fund: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    loans: Decimal = Decimal("0")

    @property
    def total_deductions(self) -> Decimal:
        return (
            self.social_insurance
            + self.health_insurance
            + self.housing_fund
            + self.tax
            + self.loans
        )

    @classmethod
    def from_statutory(
        cls, statutory: StatutoryDeductions, loans: Decimal = Decimal("0")
    ) -> Deductions:
        return cls(
            social_insurance=statutory.social_insurance,
            health_insurance=statutory.health_insurance,
            housing_fund=statutory.housing_fund,
            tax=statutory.tax,
            loans=loans,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "social_insurance": str(self.social_insurance),
            "health_insurance": str(self.health_insurance),
            "housing_fund": str(self.housing_fund),
            "tax": str(self.tax),
            "loans": str(self.loans),
            "total_deductions": str(self.total_deductions),
        }


@dataclass
class HoursBreakdown:
    """How the hours of one computation were derived."""

    worked_hours: Decimal = Decimal("0")
    leave_hours: Decimal = Decimal("0")
    standard_hours: Decimal = Decimal("0")

    @property
    def total_hours(self) -> Decimal:
        return self.worked_hours + self.leave_hours

    @property
    def regular_hours(self) -> Decimal:
        return min(self.total_hours, self.standard_hours)

    @property
    def overtime_hours(self) -> Decimal:
        return max(Decimal("0"), self.total_hours - self.standard_hours)


@dataclass
class PayrollComputation:
    """Result of computing pay for one employee and one period (unpersisted)."""

    employee_id: str
    employee_name: str
    role: str
    pay_period_start: date
    pay_period_end: date
    pay_date: date
    hours: HoursBreakdown
    hourly_rate: Decimal
    basic_pay: Decimal
    overtime: Decimal
    allowances: Decimal
    commissions: Decimal
    incentives: Decimal
    deductions: Deductions
    created_by: str
    created_at: datetime
    status: str = "Pending"

    @property
    def gross_pay(self) -> Decimal:
        return (
            self.basic_pay
            + self.overtime
            + self.allowances
            + self.commissions
            + self.incentives
        )

    @property
    def net_pay(self) -> Decimal:
        return self.gross_pay - self.deductions.total_deductions

    @property
    def period(self) -> str:
        return f"{self.pay_period_start.isoformat()} - {self.pay_period_end.isoformat()}"

    def to_record(self) -> PayrollRecord:
        """Build a transient PayrollRecord carrying every computed field."""
        from hr_payroll.models import PayrollRecord

        return PayrollRecord(
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            pay_period_start=self.pay_period_start,
            pay_period_end=self.pay_period_end,
            pay_date=self.pay_date,
            hours_worked=self.hours.total_hours,
            hourly_rate=self.hourly_rate,
            basic_pay=self.basic_pay,
            overtime=self.overtime,
            allowances=self.allowances,
            commissions=self.commissions,
            incentives=self.incentives,
            gross_pay=self.gross_pay,
            social_insurance=self.deductions.social_insurance,
            health_insurance=self.deductions.health_insurance,
            housing_fund=self.deductions.housing_fund,
            tax=self.deductions.tax,
            loans=self.deductions.loans,
            total_deductions=self.deductions.total_deductions,
            net_pay=self.net_pay,
            status=self.status,
            created_at=self.created_at,
            created_by=self.created_by,
        )
