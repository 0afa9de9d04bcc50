"""HR payroll Command Line Interface.

Provides operational tools for:
- Schema creation
- Upcoming pay periods
- Retention sweep (run daily from cron or a systemd timer)
- Export of the persisted collections
- Payslip rendering

Usage:
    python -m hr_payroll init-db
    python -m hr_payroll periods --count 6
    python -m hr_payroll sweep
    python -m hr_payroll export --output payroll.json
    python -m hr_payroll payslip --payroll-id X
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime
from typing import Any, Callable, Coroutine
from uuid import UUID

from hr_payroll.calculators.pay_periods import DEFAULT_PERIOD_COUNT, next_periods
from hr_payroll.config import get_settings
from hr_payroll.database import create_schema, dispose_db, get_session, init_db
from hr_payroll.providers.memory import InMemoryEmployeeDirectory, InMemoryLeaveSource
from hr_payroll.services.export import export_collections
from hr_payroll.services.payroll_store import PayrollRecordStore
from hr_payroll.services.payslip import DEFAULT_COMPANY_NAME, payslip_filename, render_payslip

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def parse_datetime(s: str) -> datetime:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s)


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class PayrollCli:
    """Payroll Command Line Interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m hr_payroll",
            description="HR payroll operational tools",
        )
        parser.add_argument(
            "--database-url",
            help="Override DATABASE_URL for this invocation",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable debug logging",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create the payroll tables")

        periods = subparsers.add_parser(
            "periods",
            help="List upcoming semi-monthly pay periods",
        )
        periods.add_argument(
            "--count",
            type=int,
            default=DEFAULT_PERIOD_COUNT,
            help=f"Number of periods to list (default: {DEFAULT_PERIOD_COUNT})",
        )
        periods.add_argument(
            "--today",
            type=parse_date,
            help="Reference date (ISO format, default: today)",
        )

        sweep = subparsers.add_parser(
            "sweep",
            help="Delete payroll records older than the retention window",
        )
        sweep.add_argument(
            "--now",
            type=parse_datetime,
            help="Reference time for the cutoff (ISO format, UTC)",
        )

        export = subparsers.add_parser(
            "export",
            help="Export time records, payroll records and edit logs as JSON",
        )
        export.add_argument(
            "--output",
            "-o",
            help="Output file (default: stdout)",
        )

        payslip = subparsers.add_parser(
            "payslip",
            help="Render the payslip of one payroll record",
        )
        payslip.add_argument(
            "--payroll-id",
            type=parse_uuid,
            required=True,
            help="Payroll record ID",
        )
        payslip.add_argument(
            "--company-name",
            default=DEFAULT_COMPANY_NAME,
            help="Company name printed in the header",
        )
        payslip.add_argument(
            "--save",
            action="store_true",
            help="Write the payslip to its download file name instead of stdout",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose or get_settings().debug else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "init-db": self._cmd_init_db,
            "periods": self._cmd_periods,
            "sweep": self._cmd_sweep,
            "export": self._cmd_export,
            "payslip": self._cmd_payslip,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _with_db(self, args: argparse.Namespace, work: Coroutine[Any, Any, int]) -> int:
        async def runner() -> int:
            init_db(args.database_url)
            try:
                return await work
            finally:
                await dispose_db()

        return asyncio.run(runner())

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the schema."""

        async def work() -> int:
            await create_schema()
            print("Schema created.")
            return 0

        return self._with_db(args, work())

    def _cmd_periods(self, args: argparse.Namespace) -> int:
        """Print upcoming pay periods."""
        if args.count < 0:
            print("--count must be non-negative", file=sys.stderr)
            return 1

        for period in next_periods(args.count, today=args.today):
            print(f"{period.label}  (pay date {period.pay_date.isoformat()})")
        return 0

    def _cmd_sweep(self, args: argparse.Namespace) -> int:
        """Run the retention sweep."""

        async def work() -> int:
            async with get_session() as session:
                store = PayrollRecordStore.create(
                    session, InMemoryEmployeeDirectory(), InMemoryLeaveSource()
                )
                removed = await store.retention_sweep(now=args.now)
            print(f"Removed {removed} payroll record(s).")
            return 0

        return self._with_db(args, work())

    def _cmd_export(self, args: argparse.Namespace) -> int:
        """Export the persisted collections."""

        async def work() -> int:
            async with get_session() as session:
                data = await export_collections(session)

            payload = json.dumps(data, indent=2)
            if args.output:
                with open(args.output, "w") as f:
                    f.write(payload + "\n")
                counts = ", ".join(f"{len(rows)} {name}" for name, rows in data.items())
                print(f"Exported {counts} to {args.output}")
            else:
                print(payload)
            return 0

        return self._with_db(args, work())

    def _cmd_payslip(self, args: argparse.Namespace) -> int:
        """Render one payslip."""

        async def work() -> int:
            async with get_session() as session:
                store = PayrollRecordStore.create(
                    session, InMemoryEmployeeDirectory(), InMemoryLeaveSource()
                )
                record = await store.get(args.payroll_id)
                if record is None:
                    print(f"Payroll record {args.payroll_id} not found", file=sys.stderr)
                    return 1
                text = render_payslip(record, company_name=args.company_name)
                filename = payslip_filename(record)

            if args.save:
                with open(filename, "w") as f:
                    f.write(text)
                print(f"Saved {filename}")
            else:
                print(text, end="")
            return 0

        return self._with_db(args, work())


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
