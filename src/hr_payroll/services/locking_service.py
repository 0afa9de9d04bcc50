"""Per-key serialization of ledger and payroll mutations.

Writes for the same time ledger day, the same employee period or the same
payroll record must not interleave. Each logical key gets its own
``asyncio.Lock``; unrelated keys proceed concurrently. Unique constraints in
the database back the same invariants across processes.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Hashable
from uuid import UUID
from weakref import WeakValueDictionary


class KeyedLockRegistry:
    """Hands out one asyncio.Lock per key.

    Locks are held weakly so keys that are no longer in use do not
    accumulate.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[Hashable, asyncio.Lock] = WeakValueDictionary()

    def lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self.lock_for(key)
        async with lock:
            yield

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()


def time_record_key(employee_id: str, work_date: date) -> tuple[str, str, date]:
    return ("time_record", employee_id, work_date)


def period_key(employee_id: str, start: date, end: date) -> tuple[str, str, date, date]:
    return ("payroll_period", employee_id, start, end)


def record_key(payroll_id: UUID) -> tuple[str, UUID]:
    return ("payroll_record", payroll_id)
