"""HR payroll services."""

from hr_payroll.services.audit_log import EditAuditLog, FieldChange
from hr_payroll.services.locking_service import KeyedLockRegistry
from hr_payroll.services.payroll_store import (
    BatchFailure,
    BatchResult,
    PayrollRecordStore,
    PayrollSummary,
)
from hr_payroll.services.permissions import Actor, PAYROLL_MANAGER_ROLES
from hr_payroll.services.state_machine import PayrollStateMachine, PayrollStatus
from hr_payroll.services.time_ledger import TimeLedger

__all__ = [
    "Actor",
    "BatchFailure",
    "BatchResult",
    "EditAuditLog",
    "FieldChange",
    "KeyedLockRegistry",
    "PAYROLL_MANAGER_ROLES",
    "PayrollRecordStore",
    "PayrollStateMachine",
    "PayrollStatus",
    "PayrollSummary",
    "TimeLedger",
]
