"""Tests for environment-driven settings."""

from hr_payroll.config import Settings


class TestSettings:
    """Test Settings.from_env."""

    def test_defaults(self, monkeypatch):
        for name in (
            "DATABASE_URL",
            "ENGINE_VERSION",
            "PAYROLL_RETENTION_MONTHS",
            "PAYROLL_RESTRICTED_BATCH_LIMIT",
            "DEBUG",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.database_url.startswith("sqlite+aiosqlite://")
        assert settings.retention_months == 3
        assert settings.restricted_batch_limit == 10
        assert settings.debug is False

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PAYROLL_RETENTION_MONTHS", "6")
        monkeypatch.setenv("PAYROLL_RESTRICTED_BATCH_LIMIT", "25")
        monkeypatch.setenv("DEBUG", "True")

        settings = Settings.from_env()

        assert settings.retention_months == 6
        assert settings.restricted_batch_limit == 25
        assert settings.debug is True
