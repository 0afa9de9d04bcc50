"""Time ledger model: hours worked per employee per calendar day."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, DateTime, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hr_payroll.clock import utcnow
from hr_payroll.models.base import Base


class TimeRecord(Base):
    """Hours worked by one employee on one day.

    Written by manual entry and by attendance completion events. At most one
    row exists per (employee_id, work_date); writes replace the hours.
    """

    __tablename__ = "time_record"

    time_record_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="manual")
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="time_record_employee_date_unique"),
        CheckConstraint("hours_worked >= 0", name="time_record_hours_check"),
        CheckConstraint(
            "source IN ('manual', 'attendance')",
            name="time_record_source_check",
        ),
    )

    def __repr__(self) -> str:
        return f"<TimeRecord {self.employee_id} {self.work_date} {self.hours_worked}h>"
