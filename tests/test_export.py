"""Tests for exporting the persisted collections."""

from datetime import date

from hr_payroll.services.export import export_collections


class TestExportCollections:
    """Test the JSON-compatible dump."""

    async def test_empty_database(self, session):
        assert await export_collections(session) == {
            "TimeRecords": [],
            "PayrollRecords": [],
            "PayrollEditLogs": [],
        }

    async def test_collections_are_serialized(self, session, store, ledger, hr_actor):
        await ledger.upsert("E001", date(2024, 1, 2), 8)
        result = await store.generate_batch(
            ["E001"], "2024-01-01 - 2024-01-15", None, hr_actor
        )
        record = result.created[0]
        await store.edit_record(record.payroll_id, {"incentives": 100}, "bonus", hr_actor)

        data = await export_collections(session)

        [time_record] = data["TimeRecords"]
        assert time_record["work_date"] == "2024-01-02"
        assert time_record["hours_worked"] == "8.00"

        [payroll] = data["PayrollRecords"]
        assert payroll["payroll_id"] == str(record.payroll_id)
        assert payroll["period"] == "2024-01-01 - 2024-01-15"
        assert payroll["pay_date"] == "2024-01-16"
        assert set(payroll["deductions"]) == {
            "social_insurance",
            "health_insurance",
            "housing_fund",
            "tax",
            "loans",
            "total_deductions",
        }
        assert "tax" not in payroll

        [log] = data["PayrollEditLogs"]
        assert log["field_changed"] == "incentives"
        assert log["reason"] == "bonus"
        assert log["payroll_id"] == str(record.payroll_id)
