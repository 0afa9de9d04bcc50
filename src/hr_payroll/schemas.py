"""Pydantic schemas for inbound commands and events."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterator

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

CENTS = Decimal("0.01")


# ============================================================================
# Payroll edit command
# ============================================================================


# Form field name -> PayrollRecord attribute
EDITABLE_FIELDS: dict[str, str] = {
    "basicPay": "basic_pay",
    "overtime": "overtime",
    "allowances": "allowances",
    "commissions": "commissions",
    "incentives": "incentives",
    "deductions.loans": "loans",
}


class PayrollEdit(BaseModel):
    """Typed edit of the manually adjustable amounts of a payroll record.

    Accepts either the form names (``basicPay``, ``deductions.loans``) or the
    attribute names (``basic_pay``, ``loans``). A nested ``{"deductions":
    {"loans": ...}}`` is flattened. Any other key, including identity fields
    such as ``employee_id`` or ``status``, is rejected.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    basic_pay: Decimal | None = Field(default=None, ge=0, alias="basicPay")
    overtime: Decimal | None = Field(default=None, ge=0)
    allowances: Decimal | None = Field(default=None, ge=0)
    commissions: Decimal | None = Field(default=None, ge=0)
    incentives: Decimal | None = Field(default=None, ge=0)
    loans: Decimal | None = Field(default=None, ge=0, alias="deductions.loans")

    @model_validator(mode="before")
    @classmethod
    def _flatten_deductions(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "deductions" not in data:
            return data
        data = dict(data)
        nested = data.pop("deductions")
        if not isinstance(nested, dict):
            raise ValueError("deductions must be a mapping")
        unexpected = set(nested) - {"loans"}
        if unexpected:
            raise ValueError(
                f"only deductions.loans is editable, got {sorted(unexpected)}"
            )
        if "loans" in nested:
            data["deductions.loans"] = nested["loans"]
        return data

    @field_validator(
        "basic_pay", "overtime", "allowances", "commissions", "incentives", "loans"
    )
    @classmethod
    def _round_to_cents(cls, value: Decimal | None) -> Decimal | None:
        if value is None:
            return None
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)

    def iter_changes(self) -> Iterator[tuple[str, str, Decimal]]:
        """Yield (form name, record attribute, new value) for each supplied field."""
        for form_name, attr in EDITABLE_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                yield form_name, attr, value

    @property
    def is_empty(self) -> bool:
        return next(self.iter_changes(), None) is None


# ============================================================================
# Attendance events
# ============================================================================


class CompletedDayEvent(BaseModel):
    """An attendance day that has been clocked out.

    Attendance payloads carry more fields (clock-in/out times, location);
    only the three below are read.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    employee_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("employeeId", "employee_id"),
    )
    work_date: date = Field(validation_alias=AliasChoices("date", "work_date"))
    total_hours: Decimal = Field(
        validation_alias=AliasChoices("totalHoursWorked", "totalHours", "total_hours"),
    )

    @property
    def is_billable(self) -> bool:
        return self.total_hours > 0
