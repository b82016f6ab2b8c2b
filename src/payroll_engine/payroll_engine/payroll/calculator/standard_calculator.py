from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import Decimal

from ...attendance.model import AttendanceRecord
from ...common.money import round_half_up, to_decimal
from ...core.exceptions import InvalidOperationError, ValidationError
from ..policy import PayrollPolicy
from .base import WageBreakdown, WageCalculator

_MINUTES_PER_HOUR = Decimal(60)


def night_work_seconds(start: datetime, end: datetime, night_start: time) -> float:
    """Seconds of ``[start, end)`` falling in ``[night_start, midnight)`` of each calendar day touched.

    The window ends at midnight, not 06:00: minutes after midnight are day minutes.
    """
    if end <= start:
        return 0.0

    total = 0.0
    day = start.date()
    while datetime.combine(day, time.min) < end:
        window_start = datetime.combine(day, night_start)
        window_end = datetime.combine(day + timedelta(days=1), time.min)
        overlap = (min(end, window_end) - max(start, window_start)).total_seconds()
        if overlap > 0:
            total += overlap
        day += timedelta(days=1)
    return total


def price_minutes(minutes: int, hourly_wage: int, rate) -> int:
    """round_half_up(hours * wage * rate), evaluated exactly in Decimal."""
    return round_half_up(Decimal(minutes) * Decimal(hourly_wage) * to_decimal(rate) / _MINUTES_PER_HOUR)


class StandardWageCalculator(WageCalculator):
    """Standard rule: night minutes first, the rest split at ``regular_hours_per_day``.

    Each bucket is rounded on its own, so ``daily_wage`` is always the exact
    sum of the persisted components.
    """

    def calculate(self, record: AttendanceRecord, policy: PayrollPolicy) -> WageBreakdown:
        if record.check_out_time is None:
            raise InvalidOperationError(f"Attendance {record.attendance_id} is still open")
        if policy.regular_hours_per_day is None or policy.regular_hours_per_day <= 0:
            raise ValidationError("regular_hours_per_day must be positive", field="regular_hours_per_day")

        total = record.working_minutes
        night_seconds = night_work_seconds(record.check_in_time, record.check_out_time, policy.night_work_start_time)
        night = min(total, int(night_seconds // 60))

        threshold = round_half_up(to_decimal(policy.regular_hours_per_day) * _MINUTES_PER_HOUR)
        day_minutes = total - night
        regular = min(day_minutes, threshold)
        overtime = day_minutes - regular

        wage = int(record.applied_hourly_wage)
        return WageBreakdown(
            total_minutes=total,
            regular_minutes=regular,
            overtime_minutes=overtime,
            night_work_minutes=night,
            base_hourly_wage=wage,
            regular_wage=price_minutes(regular, wage, 1),
            overtime_wage=price_minutes(overtime, wage, policy.overtime_rate),
            night_work_wage=price_minutes(night, wage, policy.night_work_rate),
        )
