"""Role checks for payroll generation and editing."""

from __future__ import annotations

from dataclasses import dataclass

from hr_payroll.config import Settings
from hr_payroll.exceptions import BatchTooLarge, InsufficientPermissions

PAYROLL_MANAGER_ROLES = frozenset(
    {
        "Master Admin",
        "President/CEO",
        "Vice President",
        "IT Head",
        "HR",
        "Admin",
    }
)

# Roles whose batch size is capped by Settings.restricted_batch_limit
RESTRICTED_ROLES = frozenset({"Admin"})


@dataclass(frozen=True)
class Actor:
    """The caller of a store operation."""

    employee_id: str
    role: str

    @property
    def can_manage_payroll(self) -> bool:
        return self.role in PAYROLL_MANAGER_ROLES

    @property
    def is_restricted(self) -> bool:
        return self.role in RESTRICTED_ROLES


def require_payroll_access(actor: Actor, action: str) -> None:
    if not actor.can_manage_payroll:
        raise InsufficientPermissions(actor.role, action)


def check_batch_size(actor: Actor, size: int, settings: Settings) -> None:
    """Raise BatchTooLarge when a restricted role exceeds its batch limit."""
    limit = settings.restricted_batch_limit
    if actor.is_restricted and size > limit:
        raise BatchTooLarge(actor.role, size, limit)
