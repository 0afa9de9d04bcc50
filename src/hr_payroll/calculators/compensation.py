"""Role-based compensation rules and statutory deductions.

Rates and allowances are keyed by role name. Both lookups are total: a role
outside the table gets the base rate and the default allowance.

Statutory deductions are pure functions of the semi-monthly gross:

- social insurance: 4.5% of the monthly equivalent (gross x 2)
- health insurance: 5% of gross
- housing fund: 1% of gross
- income tax: progressive schedule on the annualized gross (gross x 24),
  divided back by 24
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from hr_payroll.calculators.types import StatutoryDeductions

CENTS = Decimal("0.01")

MINIMUM_HOURLY_RATE = Decimal("86.88")
OVERTIME_PREMIUM = Decimal("1.25")
HOURS_PER_DAY = Decimal("8")

SOCIAL_INSURANCE_RATE = Decimal("0.045")
HEALTH_INSURANCE_RATE = Decimal("0.05")
HOUSING_FUND_RATE = Decimal("0.01")

PERIODS_PER_MONTH = Decimal("2")
PERIODS_PER_YEAR = Decimal("24")

DEFAULT_ALLOWANCE = Decimal("3000")

RATE_MULTIPLIERS: dict[str, Decimal] = {
    "Master Admin": Decimal("3"),
    "President/CEO": Decimal("3"),
    "Vice President": Decimal("2.5"),
    "IT Head": Decimal("2.5"),
    "HR": Decimal("2"),
    "Admin": Decimal("2"),
    "Employee": Decimal("1.5"),
    "Intern": Decimal("0.8"),
}

ALLOWANCES: dict[str, Decimal] = {
    "Master Admin": Decimal("8000"),
    "President/CEO": Decimal("8000"),
    "Vice President": Decimal("6000"),
    "IT Head": Decimal("6000"),
    "HR": Decimal("4000"),
    "Admin": Decimal("4000"),
    "Employee": Decimal("3000"),
    "Intern": Decimal("1000"),
}


@dataclass(frozen=True)
class TaxBracket:
    """Annual income tax bracket: flat_amount + rate x (income - min_amount)."""

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal
    flat_amount: Decimal = Decimal("0")


TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("250000"), Decimal("0")),
    TaxBracket(Decimal("250000"), Decimal("400000"), Decimal("0.20")),
    TaxBracket(Decimal("400000"), Decimal("800000"), Decimal("0.25"), Decimal("30000")),
    TaxBracket(Decimal("800000"), Decimal("2000000"), Decimal("0.30"), Decimal("130000")),
    TaxBracket(Decimal("2000000"), Decimal("8000000"), Decimal("0.32"), Decimal("490000")),
    TaxBracket(Decimal("8000000"), None, Decimal("0.35"), Decimal("2410000")),
)


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def hourly_rate(role: str | None) -> Decimal:
    """Hourly rate for a role as a multiple of the minimum hourly rate.

    The rate is exact; only the priced amounts are rounded to cents.
    """
    multiplier = RATE_MULTIPLIERS.get(role or "", Decimal("1"))
    return MINIMUM_HOURLY_RATE * multiplier


def allowance(role: str | None) -> Decimal:
    """Flat allowance for a role."""
    return ALLOWANCES.get(role or "", DEFAULT_ALLOWANCE)


def annual_income_tax(annual_income: Decimal) -> Decimal:
    """Progressive tax on an annual income (unrounded)."""
    if annual_income <= 0:
        return Decimal("0")

    for bracket in TAX_BRACKETS:
        if bracket.max_amount is None or annual_income <= bracket.max_amount:
            return bracket.flat_amount + (annual_income - bracket.min_amount) * bracket.rate

    raise AssertionError("tax brackets must end with an open bracket")


def income_tax(gross_pay: Decimal) -> Decimal:
    """Semi-monthly income tax for a semi-monthly gross."""
    annual = gross_pay * PERIODS_PER_YEAR
    return round_to_cents(annual_income_tax(annual) / PERIODS_PER_YEAR)


def statutory_deductions(gross_pay: Decimal) -> StatutoryDeductions:
    """Compute the statutory withholdings for a semi-monthly gross pay."""
    if gross_pay <= 0:
        zero = Decimal("0.00")
        return StatutoryDeductions(zero, zero, zero, zero)

    return StatutoryDeductions(
        # Monthly equivalent on purpose, not the true monthly salary
        social_insurance=round_to_cents(gross_pay * PERIODS_PER_MONTH * SOCIAL_INSURANCE_RATE),
        health_insurance=round_to_cents(gross_pay * HEALTH_INSURANCE_RATE),
        housing_fund=round_to_cents(gross_pay * HOUSING_FUND_RATE),
        tax=income_tax(gross_pay),
    )


class CompensationRules:
    """Rule table injected into the engine.

    Subclass or replace to plug in a different rate table; the defaults are
    the module-level functions above.
    """

    overtime_premium = OVERTIME_PREMIUM
    hours_per_day = HOURS_PER_DAY

    def hourly_rate(self, role: str | None) -> Decimal:
        return hourly_rate(role)

    def allowance(self, role: str | None) -> Decimal:
        return allowance(role)

    def statutory_deductions(self, gross_pay: Decimal) -> StatutoryDeductions:
        return statutory_deductions(gross_pay)
