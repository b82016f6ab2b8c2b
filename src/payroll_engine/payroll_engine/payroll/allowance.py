"""Weekly allowance rules.

The allowance rule is pluggable; ``ThresholdWeeklyAllowance`` is the default:

* details are grouped by ISO week (Monday-Sunday) of their work date;
* a week qualifies when its worked hours reach ``min_weekly_hours``;
* a qualifying week pays ``daily_fraction`` (1/5) of that week's average
  daily wage, rounded half-up;
* a week cut by the payroll period boundary is judged on the records inside
  the period only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from ..common.money import round_half_up, to_decimal
from ..core.constants import DEFAULT_WEEKLY_ALLOWANCE_MIN_HOURS, WEEKLY_ALLOWANCE_DAILY_FRACTION
from .model import PayrollDetail


class WeeklyAllowancePolicy(ABC):
    @abstractmethod
    def compute(self, details: Sequence[PayrollDetail]) -> int:
        raise NotImplementedError


class NoWeeklyAllowance(WeeklyAllowancePolicy):
    def compute(self, details: Sequence[PayrollDetail]) -> int:
        return 0


class ThresholdWeeklyAllowance(WeeklyAllowancePolicy):
    def __init__(
        self,
        *,
        min_weekly_hours: float = DEFAULT_WEEKLY_ALLOWANCE_MIN_HOURS,
        daily_fraction=WEEKLY_ALLOWANCE_DAILY_FRACTION,
    ):
        self._min_weekly_hours = to_decimal(min_weekly_hours)
        self._daily_fraction = to_decimal(daily_fraction)

    def compute(self, details: Sequence[PayrollDetail]) -> int:
        weeks: dict[tuple[int, int], list[PayrollDetail]] = defaultdict(list)
        for d in details:
            iso = d.work_date.isocalendar()
            weeks[(iso[0], iso[1])].append(d)

        total = 0
        for week_details in weeks.values():
            hours = sum(
                (to_decimal(d.regular_hours) + to_decimal(d.overtime_hours) + to_decimal(d.night_work_hours)
                 for d in week_details),
                Decimal(0),
            )
            # Hours come from minutes / 60 floats; compare at microhour precision.
            if hours.quantize(Decimal("0.000001")) < self._min_weekly_hours:
                continue
            average_daily = Decimal(sum(d.daily_wage for d in week_details)) / Decimal(len(week_details))
            total += round_half_up(average_daily * self._daily_fraction)
        return total
