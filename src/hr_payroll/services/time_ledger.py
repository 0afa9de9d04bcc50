"""Time ledger - hours worked per employee per day."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Sequence, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.calculators.pay_periods import parse_iso_date
from hr_payroll.clock import utcnow
from hr_payroll.exceptions import InvalidTimeEntry
from hr_payroll.models import TimeRecord
from hr_payroll.schemas import CompletedDayEvent
from hr_payroll.services.locking_service import (
    KeyedLockRegistry,
    time_record_key,
)

logger = logging.getLogger(__name__)

SOURCE_MANUAL = "manual"
SOURCE_ATTENDANCE = "attendance"

TimeEntry = Union[tuple[str, Any], Mapping[str, Any]]


class TimeLedger:
    """Service for the per-day hours ledger.

    At most one record exists per (employee, day). ``upsert`` replaces the
    hours of an existing day; ``sync_attendance`` only fills days that have
    no entry yet. Ledger changes never touch payroll records that have
    already been generated.

    Implements the HoursSource protocol read by the computation engine.
    """

    def __init__(self, session: AsyncSession, locks: KeyedLockRegistry | None = None):
        self.session = session
        self.locks = locks if locks is not None else KeyedLockRegistry()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert(
        self,
        employee_id: str,
        work_date: date | str,
        hours: Any,
        source: str = SOURCE_MANUAL,
    ) -> TimeRecord:
        """Set the hours of one employee on one day, replacing any previous value."""
        day = self._coerce_date(employee_id, work_date, hours)
        amount = self._coerce_hours(employee_id, day, hours)

        async with self.locks.hold(time_record_key(employee_id, day)):
            record = await self.get(employee_id, day)
            if record is None:
                record = TimeRecord(
                    employee_id=employee_id,
                    work_date=day,
                    hours_worked=amount,
                    source=source,
                    updated_at=utcnow(),
                )
                self.session.add(record)
            else:
                record.hours_worked = amount
                record.source = source
                record.updated_at = utcnow()
            await self.session.flush()
        return record

    async def bulk_upsert(
        self, entries: Iterable[TimeEntry], work_date: date | str
    ) -> list[TimeRecord]:
        """Upsert several employees' hours for the same day.

        Entries are ``(employee_id, hours)`` pairs or mappings with
        ``employee_id`` and ``hours`` keys.
        """
        records = []
        for entry in entries:
            if isinstance(entry, Mapping):
                employee_id, hours = entry.get("employee_id"), entry.get("hours")
            else:
                employee_id, hours = entry
            if not employee_id:
                raise InvalidTimeEntry(str(employee_id), work_date, hours)
            records.append(await self.upsert(employee_id, work_date, hours))
        return records

    async def edit(self, employee_id: str, work_date: date | str, hours: Any) -> bool:
        """Change the hours of an existing entry. Returns False if there is none."""
        day = self._coerce_date(employee_id, work_date, hours)
        amount = self._coerce_hours(employee_id, day, hours)

        async with self.locks.hold(time_record_key(employee_id, day)):
            record = await self.get(employee_id, day)
            if record is None:
                return False
            record.hours_worked = amount
            record.source = SOURCE_MANUAL
            record.updated_at = utcnow()
            await self.session.flush()
        return True

    async def delete(self, employee_id: str, work_date: date | str) -> bool:
        day = self._coerce_date(employee_id, work_date, None)
        async with self.locks.hold(time_record_key(employee_id, day)):
            record = await self.get(employee_id, day)
            if record is None:
                return False
            await self.session.delete(record)
            await self.session.flush()
        return True

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    async def report_completed_day(
        self, event: CompletedDayEvent | Mapping[str, Any]
    ) -> TimeRecord | None:
        """Record the hours of a clocked-out attendance day.

        Days with no positive hours are ignored and None is returned.
        """
        completed = self._coerce_event(event)
        if not completed.is_billable:
            logger.debug(
                "Ignoring attendance day without hours: %s on %s",
                completed.employee_id,
                completed.work_date,
            )
            return None
        return await self.upsert(
            completed.employee_id,
            completed.work_date,
            completed.total_hours,
            source=SOURCE_ATTENDANCE,
        )

    async def sync_attendance(
        self, events: Iterable[CompletedDayEvent | Mapping[str, Any]]
    ) -> int:
        """Back-fill days that have no ledger entry yet from attendance data.

        Existing entries, including manual corrections, are left untouched.
        Returns the number of entries inserted.
        """
        inserted = 0
        for event in events:
            completed = self._coerce_event(event)
            if not completed.is_billable:
                continue
            day = completed.work_date
            amount = self._coerce_hours(completed.employee_id, day, completed.total_hours)

            async with self.locks.hold(time_record_key(completed.employee_id, day)):
                if await self.get(completed.employee_id, day) is not None:
                    continue
                self.session.add(
                    TimeRecord(
                        employee_id=completed.employee_id,
                        work_date=day,
                        hours_worked=amount,
                        source=SOURCE_ATTENDANCE,
                        updated_at=utcnow(),
                    )
                )
                await self.session.flush()
                inserted += 1

        if inserted:
            logger.info("Synced %d attendance day(s) into the time ledger", inserted)
        return inserted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, employee_id: str, work_date: date) -> TimeRecord | None:
        result = await self.session.execute(
            select(TimeRecord).where(
                TimeRecord.employee_id == employee_id,
                TimeRecord.work_date == work_date,
            )
        )
        return result.scalar_one_or_none()

    async def for_date(self, work_date: date | str) -> Sequence[TimeRecord]:
        day = parse_iso_date(work_date)
        result = await self.session.execute(
            select(TimeRecord)
            .where(TimeRecord.work_date == day)
            .order_by(TimeRecord.employee_id)
        )
        return result.scalars().all()

    async def in_range(self, employee_id: str, start: date, end: date) -> Sequence[TimeRecord]:
        result = await self.session.execute(
            select(TimeRecord)
            .where(
                TimeRecord.employee_id == employee_id,
                TimeRecord.work_date >= start,
                TimeRecord.work_date <= end,
            )
            .order_by(TimeRecord.work_date)
        )
        return result.scalars().all()

    async def sum_in_range(self, employee_id: str, start: date, end: date) -> Decimal:
        """Total hours recorded for the employee in [start, end]."""
        records = await self.in_range(employee_id, start, end)
        return sum((Decimal(r.hours_worked) for r in records), Decimal("0"))

    # ------------------------------------------------------------------
    # Input coercion
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce_date(employee_id: str, work_date: date | str, hours: Any) -> date:
        try:
            return parse_iso_date(work_date)
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidTimeEntry(employee_id, work_date, hours) from e

    @staticmethod
    def _coerce_hours(employee_id: str, work_date: date, hours: Any) -> Decimal:
        try:
            amount = Decimal(str(hours))
        except InvalidOperation as e:
            raise InvalidTimeEntry(employee_id, work_date, hours) from e

        if not amount.is_finite() or amount < 0:
            raise InvalidTimeEntry(employee_id, work_date, hours)
        return amount

    @staticmethod
    def _coerce_event(event: CompletedDayEvent | Mapping[str, Any]) -> CompletedDayEvent:
        if isinstance(event, CompletedDayEvent):
            return event
        try:
            return CompletedDayEvent.model_validate(event)
        except ValidationError as e:
            raise InvalidTimeEntry(
                str(event.get("employeeId", event.get("employee_id", ""))),
                event.get("date", ""),
                event.get("totalHoursWorked", event.get("totalHours")),
            ) from e
