"""Tests for the command line interface."""

from hr_payroll.cli import PayrollCli


class TestPayrollCli:
    """Test commands that need no database."""

    def test_periods(self, capsys):
        exit_code = PayrollCli().run(["periods", "--count", "2", "--today", "2024-02-20"])

        assert exit_code == 0
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "2024-02-16 - 2024-02-29  (pay date 2024-02-29)",
            "2024-03-01 - 2024-03-15  (pay date 2024-03-15)",
        ]

    def test_negative_count(self, capsys):
        assert PayrollCli().run(["periods", "--count", "-1"]) == 1
        assert "non-negative" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert PayrollCli().run([]) == 1
        assert "usage" in capsys.readouterr().out
