"""Periodic payroll run.

The engine defines no scheduler; cron (or any queue worker) calls
``MonthlyPayrollRunner.run_previous_month`` once a month, see
``scripts/run_monthly_payroll.py``. Because ``PayrollService.calculate`` is
idempotent per period, re-running a month only refreshes its drafts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import month_bounds, previous_month
from ..core.exceptions import DomainError
from ..stores.repository import WageAssignmentLookup
from .service import PayrollService

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    start_date: date
    end_date: date
    succeeded: list[tuple[int, int]] = field(default_factory=list)
    failed: list[tuple[int, int, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class MonthlyPayrollRunner:
    def __init__(self, payroll: PayrollService, wages: WageAssignmentLookup):
        self._payroll = payroll
        self._wages = wages

    def run(self, year: int, month: int) -> BatchResult:
        start, end = month_bounds(year, month)
        result = BatchResult(start_date=start, end_date=end)
        logger.info("monthly payroll run started: %s ~ %s", start, end)

        for a in self._wages.list_all():
            try:
                self._payroll.calculate(a.employee_id, a.store_id, start, end)
            except DomainError as exc:
                # Confirmed/paid periods and vanished relations are expected; keep going.
                logger.warning("payroll skipped employee=%s store=%s: %s", a.employee_id, a.store_id, exc)
                result.failed.append((a.employee_id, a.store_id, str(exc)))
            except Exception as exc:
                logger.exception("payroll failed employee=%s store=%s", a.employee_id, a.store_id)
                result.failed.append((a.employee_id, a.store_id, str(exc)))
            else:
                result.succeeded.append((a.employee_id, a.store_id))

        logger.info(
            "monthly payroll run finished: %s ~ %s succeeded=%d failed=%d",
            start, end, len(result.succeeded), len(result.failed),
        )
        return result

    def run_previous_month(self, today: Optional[date] = None) -> BatchResult:
        year, month = previous_month(today or date.today())
        return self.run(year, month)
