"""ORM models for the payroll engine."""

from hr_payroll.models.base import Base
from hr_payroll.models.payroll import PayrollEditLog, PayrollRecord
from hr_payroll.models.time_record import TimeRecord

__all__ = [
    "Base",
    "PayrollEditLog",
    "PayrollRecord",
    "TimeRecord",
]
