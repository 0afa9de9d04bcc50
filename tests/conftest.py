"""Pytest fixtures for HR payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hr_payroll.calculators.types import Employee
from hr_payroll.config import Settings
from hr_payroll.database import enable_sqlite_savepoints
from hr_payroll.models import Base
from hr_payroll.providers.memory import InMemoryEmployeeDirectory, InMemoryLeaveSource
from hr_payroll.services.locking_service import KeyedLockRegistry
from hr_payroll.services.payroll_store import PayrollRecordStore
from hr_payroll.services.permissions import Actor
from hr_payroll.services.time_ledger import TimeLedger

# In-memory SQLite shared by every connection of one test engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Nine weekdays of the first half of January 2024
NINE_WORKDAYS = [
    date(2024, 1, 2),
    date(2024, 1, 3),
    date(2024, 1, 4),
    date(2024, 1, 5),
    date(2024, 1, 8),
    date(2024, 1, 9),
    date(2024, 1, 10),
    date(2024, 1, 11),
    date(2024, 1, 12),
]


@pytest.fixture
async def engine():
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the process environment."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="test",
        retention_months=3,
        restricted_batch_limit=10,
        debug=False,
    )


@pytest.fixture
def locks() -> KeyedLockRegistry:
    return KeyedLockRegistry()


@pytest.fixture
def directory() -> InMemoryEmployeeDirectory:
    """Employee directory with one employee per relevant role."""
    return InMemoryEmployeeDirectory(
        [
            Employee("E001", "Ana Cruz", "Employee"),
            Employee("E002", "Ben Reyes", "Intern"),
            Employee("H001", "Hana Lim", "HR"),
            Employee("A001", "Al Santos", "Admin"),
        ]
    )


@pytest.fixture
def leaves() -> InMemoryLeaveSource:
    return InMemoryLeaveSource()


@pytest.fixture
def ledger(session: AsyncSession, locks: KeyedLockRegistry) -> TimeLedger:
    return TimeLedger(session, locks=locks)


@pytest.fixture
def store(
    session: AsyncSession,
    directory: InMemoryEmployeeDirectory,
    leaves: InMemoryLeaveSource,
    locks: KeyedLockRegistry,
    settings: Settings,
) -> PayrollRecordStore:
    return PayrollRecordStore.create(
        session, directory, leaves, locks=locks, settings=settings
    )


@pytest.fixture
def hr_actor() -> Actor:
    return Actor("H001", "HR")


@pytest.fixture
def admin_actor() -> Actor:
    return Actor("A001", "Admin")


@pytest.fixture
def employee_actor() -> Actor:
    return Actor("E001", "Employee")


@pytest.fixture
async def logged_72_hours(ledger: TimeLedger) -> Decimal:
    """E001 works 8 hours on nine weekdays of the first half of January."""
    for day in NINE_WORKDAYS:
        await ledger.upsert("E001", day, 8)
    return Decimal("72")


