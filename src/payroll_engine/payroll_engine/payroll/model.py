from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollDetail:
    """One priced attendance record inside a payroll."""

    attendance_id: int
    work_date: date
    start_time: time
    end_time: time
    regular_hours: float
    overtime_hours: float
    night_work_hours: float
    base_hourly_wage: int
    regular_wage: int
    overtime_wage: int
    night_work_wage: int
    daily_wage: int
    payroll_detail_id: Optional[int] = None
    payroll_id: Optional[int] = None


@dataclass(frozen=True)
class Payroll:
    """Aggregate root of one employee's pay for one store and period.

    ``version`` is the optimistic-lock counter; every persisted change bumps it.
    """

    employee_id: int
    store_id: int
    start_date: date
    end_date: date
    regular_hours: float
    overtime_hours: float
    night_work_hours: float
    base_hourly_wage: int
    regular_wage: int
    overtime_wage: int
    night_work_wage: int
    weekly_allowance: int
    gross_wage: int
    tax_rate: float
    tax_amount: int
    deductions: int
    net_wage: int
    status: PayrollStatus = PayrollStatus.DRAFT
    payment_date: Optional[date] = None
    cancel_reason: Optional[str] = None
    payroll_id: Optional[int] = None
    version: int = 0

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours + self.night_work_hours

    def same_amounts_as(self, other: "Payroll") -> bool:
        """Compare computed values only (ignores id, version and lifecycle fields)."""
        keys = (
            "employee_id", "store_id", "start_date", "end_date",
            "regular_hours", "overtime_hours", "night_work_hours", "base_hourly_wage",
            "regular_wage", "overtime_wage", "night_work_wage", "weekly_allowance",
            "gross_wage", "tax_rate", "tax_amount", "deductions", "net_wage",
        )
        return all(getattr(self, k) == getattr(other, k) for k in keys)
