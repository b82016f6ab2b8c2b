from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import whole_minutes_between
from ..core.enums import AttendanceState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance at one store on one day.

    ``applied_hourly_wage`` is the wage snapshot taken at check-in; later wage
    changes never alter it.
    """

    attendance_id: int
    employee_id: int
    store_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime]
    applied_hourly_wage: int
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_out_latitude: Optional[float] = None
    check_out_longitude: Optional[float] = None
    location_verified: bool = False
    note: Optional[str] = None

    @property
    def work_date(self) -> date:
        return self.check_in_time.date()

    @property
    def state(self) -> AttendanceState:
        return AttendanceState.OPEN if self.check_out_time is None else AttendanceState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def working_minutes(self) -> int:
        if self.check_out_time is None:
            return 0
        return whole_minutes_between(self.check_in_time, self.check_out_time)

    @property
    def working_hours(self) -> float:
        return self.working_minutes / 60.0


@dataclass(frozen=True)
class NewAttendance:
    """Insert payload; the repository assigns ``attendance_id``."""

    employee_id: int
    store_id: int
    check_in_time: datetime
    applied_hourly_wage: int
    check_out_time: Optional[datetime] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    location_verified: bool = False
    note: Optional[str] = None


@dataclass(frozen=True)
class ManualAttendanceRequest:
    """Owner-entered attendance; bypasses geofencing."""

    employee_id: int
    store_id: int
    check_in_time: datetime
    registered_by: int
    check_out_time: Optional[datetime] = None
    note: Optional[str] = None
