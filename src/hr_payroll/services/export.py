"""Export of the persisted collections as JSON-compatible data."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.models import PayrollEditLog, PayrollRecord, TimeRecord

COLLECTIONS = (
    ("TimeRecords", TimeRecord, (TimeRecord.work_date, TimeRecord.employee_id)),
    (
        "PayrollRecords",
        PayrollRecord,
        (PayrollRecord.pay_period_start, PayrollRecord.employee_id),
    ),
    ("PayrollEditLogs", PayrollEditLog, (PayrollEditLog.edited_at,)),
)


async def export_collections(session: AsyncSession) -> dict[str, list[dict[str, Any]]]:
    """Dump every time record, payroll record and edit log, keyed by collection."""
    exported: dict[str, list[dict[str, Any]]] = {}
    for name, model, ordering in COLLECTIONS:
        result = await session.execute(select(model).order_by(*ordering))
        exported[name] = [row.to_dict() for row in result.scalars().all()]
    return exported
