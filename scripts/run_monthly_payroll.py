"""Calculate draft payrolls for every employee/store pair.

Meant to be invoked by cron early each month:

    python scripts/run_monthly_payroll.py            # previous month
    python scripts/run_monthly_payroll.py 2026 9     # explicit month

Exits non-zero when any pair failed so the scheduler can alert.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_engine.payroll_engine.container import build_container
from src.payroll_engine.payroll_engine.main import configure_logging

logger = logging.getLogger("scripts.run_monthly_payroll")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the monthly payroll batch.")
    parser.add_argument("year", type=int, nargs="?")
    parser.add_argument("month", type=int, nargs="?")
    args = parser.parse_args(argv)
    if (args.year is None) != (args.month is None):
        parser.error("year and month must be given together")

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)
    runner = container.monthly_payroll_runner
    if args.year is None:
        result = runner.run_previous_month()
    else:
        result = runner.run(args.year, args.month)

    for employee_id, store_id, reason in result.failed:
        logger.warning("failed employee=%s store=%s: %s", employee_id, store_id, reason)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
