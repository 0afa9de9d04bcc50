"""Unit tests for semi-monthly pay period generation and parsing."""

from datetime import date

import pytest

from hr_payroll.calculators.pay_periods import (
    current_period,
    format_period_label,
    next_periods,
    parse_period_label,
)
from hr_payroll.exceptions import InvalidDateRange, InvalidPeriodFormat


class TestCurrentPeriod:
    """Test the period containing a given day."""

    def test_first_half(self):
        period = current_period(date(2024, 3, 15))
        assert period.start == date(2024, 3, 1)
        assert period.end == date(2024, 3, 15)
        assert period.is_first_half

    def test_second_half_runs_to_month_end(self):
        period = current_period(date(2024, 4, 16))
        assert period.start == date(2024, 4, 16)
        assert period.end == date(2024, 4, 30)
        assert not period.is_first_half

    def test_pay_date_is_period_end(self):
        period = current_period(date(2024, 1, 20))
        assert period.pay_date == period.end == date(2024, 1, 31)


class TestNextPeriods:
    """Test generation of consecutive periods."""

    def test_default_count_alternates_halves(self):
        periods = next_periods(today=date(2024, 1, 10))

        assert [p.label for p in periods] == [
            "2024-01-01 - 2024-01-15",
            "2024-01-16 - 2024-01-31",
            "2024-02-01 - 2024-02-15",
            "2024-02-16 - 2024-02-29",
            "2024-03-01 - 2024-03-15",
            "2024-03-16 - 2024-03-31",
        ]

    def test_leap_year_february(self):
        """The second half of February 2024 ends on the 29th."""
        periods = next_periods(2, today=date(2024, 2, 20))

        assert periods[0].start == date(2024, 2, 16)
        assert periods[0].end == date(2024, 2, 29)
        assert periods[0].pay_date == date(2024, 2, 29)
        assert periods[1].start == date(2024, 3, 1)

    def test_non_leap_february(self):
        periods = next_periods(1, today=date(2023, 2, 28))
        assert periods[0].end == date(2023, 2, 28)

    def test_year_rollover(self):
        periods = next_periods(3, today=date(2024, 12, 31))

        assert [p.label for p in periods] == [
            "2024-12-16 - 2024-12-31",
            "2025-01-01 - 2025-01-15",
            "2025-01-16 - 2025-01-31",
        ]

    def test_periods_are_contiguous(self):
        periods = next_periods(24, today=date(2024, 5, 5))
        for previous, current in zip(periods, periods[1:]):
            assert (current.start - previous.end).days == 1

    def test_zero_count(self):
        assert next_periods(0, today=date(2024, 1, 1)) == []

    def test_negative_count_raises(self):
        with pytest.raises(ValueError):
            next_periods(-1)

    def test_contains(self):
        period = next_periods(1, today=date(2024, 1, 10))[0]
        assert period.contains(date(2024, 1, 15))
        assert not period.contains(date(2024, 1, 16))


class TestParsePeriodLabel:
    """Test the "start - end" label parser."""

    def test_round_trip(self):
        start, end = parse_period_label("2024-01-16 - 2024-01-31")
        assert (start, end) == (date(2024, 1, 16), date(2024, 1, 31))
        assert format_period_label(start, end) == "2024-01-16 - 2024-01-31"

    @pytest.mark.parametrize(
        "label",
        [
            "2024-01-01 to 2024-01-15",
            "2024-01-01",
            "2024-01-01 - ",
            "2024-13-01 - 2024-13-15",
            "January - February",
            "2024-01-01 - 2024-01-15 - 2024-01-31",
        ],
    )
    def test_malformed_labels(self, label):
        with pytest.raises(InvalidPeriodFormat) as exc_info:
            parse_period_label(label)
        assert exc_info.value.label == label

    def test_reversed_range(self):
        with pytest.raises(InvalidDateRange):
            parse_period_label("2024-01-15 - 2024-01-01")
