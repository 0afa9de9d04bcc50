"""Payroll calculation engine."""

from hr_payroll.calculators.compensation import (
    CompensationRules,
    allowance,
    hourly_rate,
    income_tax,
    statutory_deductions,
)
from hr_payroll.calculators.engine import PayrollEngine, count_weekdays, leave_hours
from hr_payroll.calculators.pay_periods import PayPeriod, next_periods, parse_period_label
from hr_payroll.calculators.types import PayrollComputation

__all__ = [
    "CompensationRules",
    "PayPeriod",
    "PayrollComputation",
    "PayrollEngine",
    "allowance",
    "count_weekdays",
    "hourly_rate",
    "income_tax",
    "leave_hours",
    "next_periods",
    "parse_period_label",
    "statutory_deductions",
]
