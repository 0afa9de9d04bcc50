"""HR payroll reconciliation and computation engine.

Turns the per-day time ledger and approved leave into itemized semi-monthly
payroll records, keeps an audit trail of manual edits, and enforces a
retention window on generated records.
"""

__version__ = "1.0.0"
