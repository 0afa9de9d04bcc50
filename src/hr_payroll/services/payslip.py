"""Plain-text payslip rendering."""

from __future__ import annotations

import re
from decimal import Decimal

from hr_payroll.models import PayrollRecord

DEFAULT_COMPANY_NAME = "HR Payroll"

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')
_LABEL_WIDTH = 34


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _line(label: str, value: Decimal) -> str:
    return f"  {label:<{_LABEL_WIDTH}}{_money(value):>14}"


def render_payslip(record: PayrollRecord, company_name: str = DEFAULT_COMPANY_NAME) -> str:
    """Render a record as a payslip listing earnings, deductions and net pay."""
    lines = [
        company_name.upper(),
        "PAYSLIP",
        "",
        f"Employee: {record.employee_name} ({record.employee_id})",
        f"Pay Period: {record.period}",
        f"Pay Date: {record.pay_date.isoformat()}",
        f"Status: {record.status}",
        "",
        "EARNINGS:",
        _line(
            f"Basic Pay ({record.hours_worked} hrs @ {_money(record.hourly_rate)}/hr)",
            record.basic_pay,
        ),
        _line("Overtime", record.overtime),
        _line("Allowances", record.allowances),
        _line("Commissions", record.commissions),
        _line("Incentives", record.incentives),
        _line("Gross Pay", record.gross_pay),
        "",
        "DEDUCTIONS:",
        _line("Social Insurance", record.social_insurance),
        _line("Health Insurance", record.health_insurance),
        _line("Housing Fund", record.housing_fund),
        _line("Withholding Tax", record.tax),
        _line("Loans", record.loans),
        _line("Total Deductions", record.total_deductions),
        "",
        _line("NET PAY", record.net_pay),
    ]
    return "\n".join(lines) + "\n"


def payslip_filename(record: PayrollRecord) -> str:
    """File name for a downloaded payslip with path-unsafe characters replaced."""
    name = f"payslip_{record.employee_id}_{record.period}"
    return _UNSAFE_FILENAME_CHARS.sub("_", name) + ".txt"
