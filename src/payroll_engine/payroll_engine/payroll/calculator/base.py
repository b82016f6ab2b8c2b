from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...attendance.model import AttendanceRecord
from ..policy import PayrollPolicy


@dataclass(frozen=True)
class WageBreakdown:
    """Priced hour buckets of one attendance record.

    Buckets are mutually exclusive and kept in whole minutes so period sums do
    not drift; hours are derived as ``minutes / 60``.
    """

    total_minutes: int
    regular_minutes: int
    overtime_minutes: int
    night_work_minutes: int
    base_hourly_wage: int
    regular_wage: int
    overtime_wage: int
    night_work_wage: int

    @property
    def regular_hours(self) -> float:
        return self.regular_minutes / 60.0

    @property
    def overtime_hours(self) -> float:
        return self.overtime_minutes / 60.0

    @property
    def night_work_hours(self) -> float:
        return self.night_work_minutes / 60.0

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60.0

    @property
    def daily_wage(self) -> int:
        return self.regular_wage + self.overtime_wage + self.night_work_wage


class WageCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, record: AttendanceRecord, policy: PayrollPolicy) -> WageBreakdown:
        raise NotImplementedError
