"""Payroll record store - batch generation, edits, status and retention."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_payroll.calculators.engine import PAY_DATE_OFFSET, PayrollEngine
from hr_payroll.calculators.pay_periods import parse_iso_date, parse_period_label
from hr_payroll.clock import utcnow
from hr_payroll.config import Settings, get_settings
from hr_payroll.exceptions import (
    InvalidDateRange,
    InvalidStatusTransition,
    PayrollError,
    RecordNotFound,
)
from hr_payroll.models import PayrollEditLog, PayrollRecord
from hr_payroll.providers.base import EmployeeDirectory, LeaveSource
from hr_payroll.schemas import PayrollEdit
from hr_payroll.services.audit_log import EditAuditLog, FieldChange
from hr_payroll.services.locking_service import (
    KeyedLockRegistry,
    period_key,
    record_key,
)
from hr_payroll.services.permissions import (
    Actor,
    check_batch_size,
    require_payroll_access,
)
from hr_payroll.services.state_machine import PayrollStateMachine, PayrollStatus
from hr_payroll.services.time_ledger import TimeLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchFailure:
    """An employee whose record could not be generated."""

    employee_id: str
    error: PayrollError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class BatchResult:
    """Outcome of one generate_batch call."""

    period_start: date
    period_end: date
    requested_pay_date: date | None
    created: list[PayrollRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)
    swept: int = 0

    @property
    def is_complete(self) -> bool:
        """True when no employee failed."""
        return not self.failed


@dataclass(frozen=True)
class PayrollSummary:
    """Totals shown above the payroll list."""

    record_count: int
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal


class PayrollRecordStore:
    """Service owning every write to payroll records.

    Operations:
    - generate_batch: compute and persist one record per employee and period
      (skip-if-exists), then run the retention sweep
    - edit_record: apply a typed edit, re-derive totals, append audit entries
    - transition_status: Pending → Processed → Paid
    - retention_sweep: delete records older than the retention window

    The store flushes but never commits; the caller's session scope decides.
    """

    def __init__(
        self,
        session: AsyncSession,
        engine: PayrollEngine,
        *,
        audit_log: EditAuditLog | None = None,
        locks: KeyedLockRegistry | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.engine = engine
        self.audit_log = audit_log or EditAuditLog(session)
        self.locks = locks if locks is not None else KeyedLockRegistry()
        self.settings = settings or get_settings()

    @classmethod
    def create(
        cls,
        session: AsyncSession,
        directory: EmployeeDirectory,
        leaves: LeaveSource,
        *,
        locks: KeyedLockRegistry | None = None,
        settings: Settings | None = None,
    ) -> PayrollRecordStore:
        """Wire a store whose engine reads hours from this session's time ledger.

        The ledger and the store share one lock registry.
        """
        if locks is None:
            locks = KeyedLockRegistry()
        ledger = TimeLedger(session, locks=locks)
        engine = PayrollEngine(hours=ledger, directory=directory, leaves=leaves)
        return cls(session, engine, locks=locks, settings=settings)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_batch(
        self,
        employee_ids: Iterable[str],
        period_label: str,
        pay_date: date | str | None,
        actor: Actor,
        *,
        now: datetime | None = None,
    ) -> BatchResult:
        """Generate payroll records for a batch of employees.

        Employees that already have a record for the period are skipped, so
        retries are safe. An employee that cannot be computed is reported in
        ``failed`` and does not stop the rest of the batch.

        Records carry the engine's pay date (period end + 1 day). The
        requested ``pay_date`` is only echoed back on the result.

        A record committed by another session between the existence check
        and the insert is rolled back to a savepoint and counted as skipped.

        Raises:
            InsufficientPermissions: actor's role may not generate payroll
            BatchTooLarge: restricted role over its batch limit
            InvalidPeriodFormat / InvalidDateRange: bad period label or pay date
        """
        require_payroll_access(actor, "generate")
        submitted = list(employee_ids)
        check_batch_size(actor, len(submitted), self.settings)

        start, end = parse_period_label(period_label)
        requested_pay_date = self._parse_pay_date(pay_date)
        engine_pay_date = end + PAY_DATE_OFFSET
        if requested_pay_date is not None and requested_pay_date != engine_pay_date:
            logger.warning(
                "Requested pay date %s differs from computed pay date %s for %s; "
                "records use the computed date",
                requested_pay_date,
                engine_pay_date,
                period_label,
            )

        now = now or utcnow()
        result = BatchResult(
            period_start=start,
            period_end=end,
            requested_pay_date=requested_pay_date,
        )

        # Duplicates within one call are generated once
        for employee_id in dict.fromkeys(submitted):
            async with self.locks.hold(period_key(employee_id, start, end)):
                existing = await self.find(employee_id, start, end)
                if existing is not None:
                    logger.info(
                        "Payroll for %s %s already exists, skipping",
                        employee_id,
                        existing.period,
                    )
                    result.skipped.append(employee_id)
                    continue

                try:
                    computation = await self.engine.compute_for_employee(
                        employee_id,
                        start,
                        end,
                        created_by=actor.employee_id,
                        now=now,
                    )
                except PayrollError as e:
                    logger.warning("Payroll generation failed for %s: %s", employee_id, e)
                    result.failed.append(BatchFailure(employee_id, e))
                    continue

                record = computation.to_record()
                try:
                    async with self.session.begin_nested():
                        self.session.add(record)
                except IntegrityError:
                    # Another session committed the same employee period first
                    logger.info(
                        "Payroll for %s %s was created concurrently, skipping",
                        employee_id,
                        record.period,
                    )
                    result.skipped.append(employee_id)
                    continue
                result.created.append(record)

        logger.info(
            "Generated payroll for %s - %s: %d created, %d skipped, %d failed",
            start,
            end,
            len(result.created),
            len(result.skipped),
            len(result.failed),
        )

        result.swept = await self.retention_sweep(now=now)
        return result

    # ------------------------------------------------------------------
    # Edits and status
    # ------------------------------------------------------------------

    async def edit_record(
        self,
        payroll_id: UUID | str,
        update: PayrollEdit | Mapping[str, Any],
        reason: str | None,
        actor: Actor,
    ) -> tuple[PayrollRecord, list[PayrollEditLog]]:
        """Apply a manual edit to a payroll record.

        Only the amounts accepted by PayrollEdit can change. Gross, total
        deductions and net are re-derived; statutory deductions keep their
        generated values. One audit entry is written per field whose value
        actually changed. Status is never touched.
        """
        require_payroll_access(actor, "edit")
        edit = update if isinstance(update, PayrollEdit) else PayrollEdit.model_validate(update)
        record_id = self._coerce_id(payroll_id)

        async with self.locks.hold(record_key(record_id)):
            record = await self._get_or_raise(record_id)

            changes = []
            for form_name, attr, new_value in edit.iter_changes():
                old_value = getattr(record, attr)
                if old_value == new_value:
                    continue
                setattr(record, attr, new_value)
                changes.append(FieldChange(form_name, old_value, new_value))

            if not changes:
                return record, []

            record.recompute_totals()
            logs = await self.audit_log.record_changes(
                record,
                changes,
                actor_id=actor.employee_id,
                reason=reason,
            )
            await self.session.flush()

        logger.info(
            "Payroll %s edited by %s: %s",
            record.payroll_id,
            actor.employee_id,
            ", ".join(c.field for c in changes),
        )
        return record, logs

    async def transition_status(
        self,
        payroll_id: UUID | str,
        to_status: PayrollStatus | str,
        actor: Actor,
    ) -> PayrollRecord:
        """Move a record along Pending → Processed → Paid.

        Raises InvalidStatusTransition if the transition is not allowed.
        """
        require_payroll_access(actor, "process")
        record_id = self._coerce_id(payroll_id)

        async with self.locks.hold(record_key(record_id)):
            record = await self._get_or_raise(record_id)
            from_status = record.status
            try:
                target = PayrollStatus(to_status)
            except ValueError as e:
                raise InvalidStatusTransition(from_status, str(to_status), "unknown status") from e
            PayrollStateMachine.validate_transition(from_status, target)
            record.status = target.value
            await self.session.flush()

        logger.info(
            "Payroll %s moved from %s to %s by %s",
            record.payroll_id,
            from_status,
            record.status,
            actor.employee_id,
        )
        return record

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    def retention_cutoff(self, now: datetime | None = None) -> datetime:
        return (now or utcnow()) - relativedelta(months=self.settings.retention_months)

    async def retention_sweep(self, now: datetime | None = None) -> int:
        """Delete records created before the retention window, with their logs.

        Returns the number of payroll records removed.
        """
        cutoff = self.retention_cutoff(now)
        result = await self.session.execute(
            select(PayrollRecord.payroll_id).where(PayrollRecord.created_at < cutoff)
        )
        expired_ids = list(result.scalars().all())
        if not expired_ids:
            return 0

        logs_removed = await self.audit_log.delete_for_records(expired_ids)
        await self.session.execute(
            delete(PayrollRecord).where(PayrollRecord.payroll_id.in_(expired_ids))
        )
        await self.session.flush()

        logger.info(
            "Retention sweep removed %d payroll record(s) and %d edit log(s) created before %s",
            len(expired_ids),
            logs_removed,
            cutoff.isoformat(),
        )
        return len(expired_ids)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, payroll_id: UUID | str) -> PayrollRecord | None:
        try:
            record_id = self._coerce_id(payroll_id)
        except RecordNotFound:
            return None
        result = await self.session.execute(
            select(PayrollRecord).where(PayrollRecord.payroll_id == record_id)
        )
        return result.scalar_one_or_none()

    async def find(self, employee_id: str, start: date, end: date) -> PayrollRecord | None:
        """The record of one employee for one exact period, if generated."""
        result = await self.session.execute(
            select(PayrollRecord).where(
                PayrollRecord.employee_id == employee_id,
                PayrollRecord.pay_period_start == start,
                PayrollRecord.pay_period_end == end,
            )
        )
        return result.scalar_one_or_none()

    async def history(self, employee_id: str) -> Sequence[PayrollRecord]:
        """All retained records of one employee, most recent period first."""
        result = await self.session.execute(
            select(PayrollRecord)
            .where(PayrollRecord.employee_id == employee_id)
            .order_by(PayrollRecord.pay_period_start.desc())
        )
        return result.scalars().all()

    async def list_records(self, period_label: str | None = None) -> Sequence[PayrollRecord]:
        stmt = select(PayrollRecord)
        if period_label is not None:
            start, end = parse_period_label(period_label)
            stmt = stmt.where(
                PayrollRecord.pay_period_start == start,
                PayrollRecord.pay_period_end == end,
            )
        stmt = stmt.order_by(PayrollRecord.pay_period_start.desc(), PayrollRecord.employee_id)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    @staticmethod
    def summary(records: Iterable[PayrollRecord]) -> PayrollSummary:
        count = 0
        gross = deductions = net = Decimal("0")
        for record in records:
            count += 1
            gross += record.gross_pay
            deductions += record.total_deductions
            net += record.net_pay
        return PayrollSummary(
            record_count=count,
            total_gross=gross,
            total_deductions=deductions,
            total_net=net,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_or_raise(self, record_id: UUID) -> PayrollRecord:
        record = await self.get(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        return record

    @staticmethod
    def _coerce_id(payroll_id: UUID | str) -> UUID:
        if isinstance(payroll_id, UUID):
            return payroll_id
        try:
            return UUID(str(payroll_id))
        except ValueError as e:
            raise RecordNotFound(payroll_id) from e

    @staticmethod
    def _parse_pay_date(pay_date: date | str | None) -> date | None:
        if pay_date is None or pay_date == "":
            return None
        try:
            return parse_iso_date(pay_date)
        except (TypeError, ValueError, AttributeError) as e:
            raise InvalidDateRange(pay_date, pay_date, "malformed pay date") from e
