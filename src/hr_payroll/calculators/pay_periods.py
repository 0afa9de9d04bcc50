"""Semi-monthly pay period generation.

Periods run from the 1st to the 15th and from the 16th to the last day of the
month. The generator's pay date is the period end date. The computation engine
separately assumes payment on the day after the period end; both values are
kept as they are.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from hr_payroll.exceptions import InvalidDateRange, InvalidPeriodFormat

PERIOD_SEPARATOR = " - "
DEFAULT_PERIOD_COUNT = 6
FIRST_HALF_END_DAY = 15


@dataclass(frozen=True)
class PayPeriod:
    """One semi-monthly pay period."""

    start: date
    end: date
    pay_date: date

    @property
    def label(self) -> str:
        return format_period_label(self.start, self.end)

    @property
    def is_first_half(self) -> bool:
        return self.start.day == 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def month_end(year: int, month: int) -> date:
    """Last calendar day of a month."""
    return date(year, month, calendar.monthrange(year, month)[1])


def current_period(today: date) -> PayPeriod:
    """The half-month period containing ``today``."""
    if today.day <= FIRST_HALF_END_DAY:
        start = today.replace(day=1)
        end = today.replace(day=FIRST_HALF_END_DAY)
    else:
        start = today.replace(day=FIRST_HALF_END_DAY + 1)
        end = month_end(today.year, today.month)
    return PayPeriod(start=start, end=end, pay_date=end)


def following_period(period: PayPeriod) -> PayPeriod:
    """The period that starts the day after ``period`` ends."""
    return current_period(period.end + timedelta(days=1))


def next_periods(count: int = DEFAULT_PERIOD_COUNT, today: date | None = None) -> list[PayPeriod]:
    """Return ``count`` consecutive periods starting with the current one."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    periods: list[PayPeriod] = []
    if count == 0:
        return periods

    period = current_period(today or date.today())
    periods.append(period)
    while len(periods) < count:
        period = following_period(period)
        periods.append(period)
    return periods


def format_period_label(start: date, end: date) -> str:
    return f"{start.isoformat()}{PERIOD_SEPARATOR}{end.isoformat()}"


def parse_iso_date(value: date | str) -> date:
    """Parse a YYYY-MM-DD string into a date (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def parse_period_label(label: str) -> tuple[date, date]:
    """Split a ``"start - end"`` label into its two dates."""
    if not isinstance(label, str):
        raise InvalidPeriodFormat(str(label))

    parts = label.split(PERIOD_SEPARATOR)
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise InvalidPeriodFormat(label)

    try:
        start = parse_iso_date(parts[0])
        end = parse_iso_date(parts[1])
    except ValueError as e:
        raise InvalidPeriodFormat(label) from e

    if start > end:
        raise InvalidDateRange(start, end, "period start is after period end")
    return start, end
