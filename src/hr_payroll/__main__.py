"""Entry point for ``python -m hr_payroll``."""

import sys

from hr_payroll.cli import main

if __name__ == "__main__":
    sys.exit(main())
