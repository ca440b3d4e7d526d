# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Run the verification suite and print the report.

Usage:
    python -m retirement_projection

Reads VERIFY_RANDOM_SEED and the HISTORY_* settings from the environment or
a .env file at the project root.
"""

import sys

from . import settings
from .history import load_historical_returns
from .report import render_verification
from .verification import run_verification


def main() -> int:
    """Main entry point. Returns 1 if any check failed."""
    history = load_historical_returns()
    checks = run_verification(seed=settings.verify_random_seed(), history=history)
    print(render_verification(checks))
    return 0 if all(c.passed is not False for c in checks) else 1


if __name__ == '__main__':
    sys.exit(main())
