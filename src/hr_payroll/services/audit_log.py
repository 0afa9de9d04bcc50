"""Append-only log of manual payroll record edits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.clock import utcnow
from hr_payroll.models import PayrollEditLog, PayrollRecord


@dataclass(frozen=True)
class FieldChange:
    """One field of a payroll record changed by an edit."""

    field: str
    old_value: Decimal
    new_value: Decimal


class EditAuditLog:
    """Service for payroll edit log entries.

    Entries are never updated. They are deleted only together with their
    payroll record by the retention sweep.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_changes(
        self,
        record: PayrollRecord,
        changes: Iterable[FieldChange],
        actor_id: str,
        reason: str | None,
        edited_at: datetime | None = None,
    ) -> list[PayrollEditLog]:
        """Append one entry per changed field, all stamped with the same time."""
        edited_at = edited_at or utcnow()
        entries = [
            PayrollEditLog(
                payroll_id=record.payroll_id,
                edited_by=actor_id,
                edited_at=edited_at,
                field_changed=change.field,
                old_value=change.old_value,
                new_value=change.new_value,
                reason=reason,
            )
            for change in changes
        ]
        self.session.add_all(entries)
        await self.session.flush()
        return entries

    async def for_record(self, payroll_id: UUID) -> Sequence[PayrollEditLog]:
        result = await self.session.execute(
            select(PayrollEditLog)
            .where(PayrollEditLog.payroll_id == payroll_id)
            .order_by(PayrollEditLog.edited_at, PayrollEditLog.field_changed)
        )
        return result.scalars().all()

    async def all(self) -> Sequence[PayrollEditLog]:
        result = await self.session.execute(
            select(PayrollEditLog).order_by(PayrollEditLog.edited_at)
        )
        return result.scalars().all()

    async def delete_for_records(self, payroll_ids: Sequence[UUID]) -> int:
        """Remove the entries of records being deleted. Returns rows removed."""
        if not payroll_ids:
            return 0
        result = await self.session.execute(
            delete(PayrollEditLog).where(PayrollEditLog.payroll_id.in_(payroll_ids))
        )
        return result.rowcount or 0
