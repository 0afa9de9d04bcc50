"""Tests for payslip rendering."""

from datetime import date
from decimal import Decimal

import pytest

from hr_payroll.calculators.engine import PayrollEngine
from hr_payroll.calculators.types import Employee
from hr_payroll.providers.memory import InMemoryEmployeeDirectory, InMemoryLeaveSource
from hr_payroll.services.payslip import payslip_filename, render_payslip


class FixedHours:
    async def sum_in_range(self, employee_id, start, end):
        return Decimal("72")


async def compute_record(employee_id="E001"):
    engine = PayrollEngine(
        hours=FixedHours(),
        directory=InMemoryEmployeeDirectory([Employee(employee_id, "Ana Cruz", "Employee")]),
        leaves=InMemoryLeaveSource(),
    )
    result = await engine.compute_for_employee(
        employee_id, date(2024, 1, 1), date(2024, 1, 15)
    )
    return result.to_record()


class TestRenderPayslip:
    """Test the plain-text payslip."""

    @pytest.fixture
    async def record(self):
        return await compute_record()

    def test_header_and_identity(self, record):
        text = render_payslip(record, company_name="Acme Realty")

        assert text.startswith("ACME REALTY\nPAYSLIP\n")
        assert "Employee: Ana Cruz (E001)" in text
        assert "Pay Period: 2024-01-01 - 2024-01-15" in text
        assert "Pay Date: 2024-01-16" in text

    def test_lists_earnings_deductions_and_net(self, record):
        text = render_payslip(record)

        assert "Basic Pay (72 hrs @ 130.32/hr)" in text
        assert "9,383.04" in text
        assert "12,383.04" in text
        assert "Withholding Tax" in text
        assert "393.27" in text
        assert "2,250.72" in text
        net_line = [line for line in text.splitlines() if "NET PAY" in line][0]
        assert net_line.endswith("10,132.32")


class TestPayslipFilename:
    """Test download file names."""

    async def test_plain_id(self):
        record = await compute_record()
        assert payslip_filename(record) == "payslip_E001_2024-01-01 - 2024-01-15.txt"

    async def test_unsafe_characters_are_replaced(self):
        record = await compute_record('HQ/42:"x"')
        assert payslip_filename(record) == "payslip_HQ_42__x__2024-01-01 - 2024-01-15.txt"
