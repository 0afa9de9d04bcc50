"""Payroll record and edit log models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from hr_payroll.calculators.types import Deductions
from hr_payroll.clock import utcnow
from hr_payroll.models.base import Base

MONEY = Numeric(14, 2)
HOURS = Numeric(8, 2)
RATE = Numeric(12, 4)


class PayrollRecord(Base):
    """Itemized pay for one employee and one semi-monthly period.

    Created only by batch generation, mutated only through the store's edit
    operation, destroyed only by the retention sweep.
    """

    __tablename__ = "payroll_record"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)

    hours_worked: Mapped[Decimal] = mapped_column(HOURS, nullable=False)
    hourly_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)

    # Earnings
    basic_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    overtime: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    allowances: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    commissions: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    incentives: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    gross_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Deductions
    social_insurance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    health_insurance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    housing_fund: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    loans: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    total_deductions: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    net_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="Pending")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    created_by: Mapped[str] = mapped_column(String, nullable=False, default="SYSTEM")

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_start",
            "pay_period_end",
            name="payroll_record_employee_period_unique",
        ),
        CheckConstraint(
            "status IN ('Pending', 'Processed', 'Paid')",
            name="payroll_record_status_check",
        ),
        CheckConstraint(
            "pay_period_end >= pay_period_start",
            name="payroll_record_period_check",
        ),
    )

    @property
    def period(self) -> str:
        """Period label in the form used by the generation screen."""
        return f"{self.pay_period_start.isoformat()} - {self.pay_period_end.isoformat()}"

    @property
    def deductions(self) -> Deductions:
        return Deductions(
            social_insurance=self.social_insurance,
            health_insurance=self.health_insurance,
            housing_fund=self.housing_fund,
            tax=self.tax,
            loans=self.loans,
        )

    def recompute_totals(self) -> None:
        """Re-derive gross, total deductions and net from the components."""
        self.gross_pay = (
            self.basic_pay
            + self.overtime
            + self.allowances
            + self.commissions
            + self.incentives
        )
        self.total_deductions = self.deductions.total_deductions
        self.net_pay = self.gross_pay - self.total_deductions

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        for key in (
            "social_insurance",
            "health_insurance",
            "housing_fund",
            "tax",
            "loans",
            "total_deductions",
        ):
            data.pop(key)
        data["period"] = self.period
        data["deductions"] = self.deductions.to_dict()
        return data

    def __repr__(self) -> str:
        return f"<PayrollRecord {self.employee_id} {self.period} {self.status}>"


class PayrollEditLog(Base):
    """One changed field of one edit call. Append-only."""

    __tablename__ = "payroll_edit_log"

    edit_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_record.payroll_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    edited_by: Mapped[str] = mapped_column(String, nullable=False)
    edited_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    field_changed: Mapped[str] = mapped_column(String, nullable=False)
    old_value: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    new_value: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<PayrollEditLog {self.payroll_id} {self.field_changed}: "
            f"{self.old_value} -> {self.new_value}>"
        )
