"""Tests for inbound command and event schemas."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hr_payroll.schemas import CompletedDayEvent, PayrollEdit


class TestPayrollEdit:
    """Test the typed payroll edit command."""

    def test_form_names(self):
        edit = PayrollEdit.model_validate({"basicPay": 12000, "deductions.loans": "250.5"})

        assert list(edit.iter_changes()) == [
            ("basicPay", "basic_pay", Decimal("12000.00")),
            ("deductions.loans", "loans", Decimal("250.50")),
        ]

    def test_attribute_names(self):
        edit = PayrollEdit(basic_pay=Decimal("1"), loans=Decimal("2"))
        assert edit.basic_pay == Decimal("1.00")
        assert edit.loans == Decimal("2.00")

    def test_nested_deductions_are_flattened(self):
        edit = PayrollEdit.model_validate({"deductions": {"loans": 300}})
        assert edit.loans == Decimal("300.00")

    def test_values_are_rounded_to_cents(self):
        edit = PayrollEdit.model_validate({"incentives": "100.005"})
        assert edit.incentives == Decimal("100.01")

    def test_empty_edit(self):
        assert PayrollEdit().is_empty
        assert not PayrollEdit(overtime=0).is_empty

    @pytest.mark.parametrize(
        "payload",
        [
            {"payroll_id": "x"},
            {"netPay": 1},
            {"deductions": {"sss": 1}},
            {"deductions": 5},
            {"commissions": -0.01},
            {"overtime": "lots"},
        ],
    )
    def test_rejected_payloads(self, payload):
        with pytest.raises(ValidationError):
            PayrollEdit.model_validate(payload)


class TestCompletedDayEvent:
    """Test attendance payload parsing."""

    def test_attendance_payload(self):
        event = CompletedDayEvent.model_validate(
            {
                "employeeId": "E001",
                "date": "2024-01-03",
                "totalHoursWorked": 8.5,
                "status": "Present",
            }
        )

        assert event.employee_id == "E001"
        assert event.work_date == date(2024, 1, 3)
        assert event.total_hours == Decimal("8.5")
        assert event.is_billable

    def test_alternate_hours_key(self):
        event = CompletedDayEvent.model_validate(
            {"employee_id": "E001", "date": "2024-01-03", "totalHours": 0}
        )
        assert not event.is_billable

    def test_missing_employee(self):
        with pytest.raises(ValidationError):
            CompletedDayEvent.model_validate({"date": "2024-01-03", "totalHours": 8})
