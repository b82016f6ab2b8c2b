from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local, start_of_day, start_of_next_day, to_naive_local
from ..common.validators import require_present
from ..core.exceptions import (
    AuthorizationError,
    InvalidOperationError,
    LocationVerificationError,
    ValidationError,
)
from ..geo.verifier import LocationVerificationService
from ..stores.repository import AuthorizationCheck, WageAssignmentLookup
from .model import AttendanceRecord, ManualAttendanceRequest, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily check-in/check-out state machine: no record -> OPEN -> CLOSED.

    Every precondition is checked before the single write of an operation, so
    a rejected call leaves the attendance store untouched.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        wages: WageAssignmentLookup,
        locations: LocationVerificationService,
        authorization: AuthorizationCheck,
    ):
        self._attendance = attendance
        self._wages = wages
        self._locations = locations
        self._authorization = authorization

    def check_in(
        self,
        employee_id: int,
        store_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        return self._check_in(employee_id, store_id, latitude, longitude, now=now, verified=False)

    def check_in_with_verification(
        self,
        employee_id: int,
        store_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_inside_store(employee_id, store_id, latitude, longitude)
        return self._check_in(employee_id, store_id, latitude, longitude, now=now, verified=True)

    def check_out(
        self,
        employee_id: int,
        store_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = to_naive_local(now) if now else now_local()
        self._wages.get(employee_id, store_id)

        # The open record may have started yesterday (shift across midnight).
        record = self._attendance.find_open_for_employee(employee_id)
        if record is None:
            if self._records_on(employee_id, now.date()):
                raise InvalidOperationError("Already checked out today")
            raise InvalidOperationError("No open attendance record")

        if record.store_id != int(store_id):
            raise InvalidOperationError(f"Open check-in belongs to store {record.store_id}")
        if now <= record.check_in_time:
            raise InvalidOperationError("Check-out time must be after check-in time")

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            latitude=latitude,
            longitude=longitude,
        )
        if updated is None:
            raise InvalidOperationError("Already checked out today")

        logger.info(
            "check-out employee=%s store=%s attendance=%s hours=%.2f",
            employee_id, store_id, updated.attendance_id, updated.working_hours,
        )
        return updated

    def check_out_with_verification(
        self,
        employee_id: int,
        store_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_inside_store(employee_id, store_id, latitude, longitude)
        return self.check_out(employee_id, store_id, latitude, longitude, now=now)

    def register_manual_attendance(self, request: ManualAttendanceRequest) -> AttendanceRecord:
        """Owner path: records attendance on behalf of an employee, without geofencing."""
        if not self._authorization.is_store_master(request.registered_by, request.store_id):
            raise AuthorizationError("Store owner permission is required")

        check_in_time = to_naive_local(require_present(request.check_in_time, "check_in_time"))
        check_out_time = to_naive_local(request.check_out_time) if request.check_out_time else None
        if check_out_time is not None and check_out_time <= check_in_time:
            raise ValidationError("check_out_time must be after check_in_time", field="check_out_time")

        assignment = self._wages.get(request.employee_id, request.store_id)

        day = check_in_time.date()
        if self._records_on(request.employee_id, day):
            raise InvalidOperationError(f"Attendance already exists for {day.isoformat()}")
        if check_out_time is None and self._attendance.find_open_for_employee(request.employee_id):
            raise InvalidOperationError("Employee already has an open attendance record")

        record = self._attendance.create(
            NewAttendance(
                employee_id=int(request.employee_id),
                store_id=int(request.store_id),
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                applied_hourly_wage=assignment.hourly_wage,
                location_verified=False,
                note=request.note,
            )
        )
        logger.info(
            "manual attendance employee=%s store=%s attendance=%s registered_by=%s",
            request.employee_id, request.store_id, record.attendance_id, request.registered_by,
        )
        return record

    def get_attendances_by_employee_and_period(
        self, employee_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.find_for_employee_between(int(employee_id), start, end)

    def get_attendances_by_store_and_period(self, store_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        return self._attendance.find_for_store_between(int(store_id), start, end)

    def get_monthly_attendances(self, employee_id: int, year: int, month: int) -> Sequence[AttendanceRecord]:
        first, last = month_bounds(year, month)
        return self.get_attendances_by_employee_and_period(employee_id, start_of_day(first), start_of_next_day(last))

    def get_today_record(self, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        """Get today's attendance record for an employee"""
        records = self._records_on(employee_id, today)
        return records[0] if records else None

    def _check_in(
        self,
        employee_id: int,
        store_id: int,
        latitude: Optional[float],
        longitude: Optional[float],
        *,
        now: datetime | None,
        verified: bool,
    ) -> AttendanceRecord:
        now = to_naive_local(now) if now else now_local()
        assignment = self._wages.get(employee_id, store_id)

        if self._attendance.find_open_for_employee(employee_id):
            raise InvalidOperationError("Already checked in; check out first")
        if self._records_on(employee_id, now.date()):
            raise InvalidOperationError("Already checked in today")

        record = self._attendance.create(
            NewAttendance(
                employee_id=int(employee_id),
                store_id=int(store_id),
                check_in_time=now,
                applied_hourly_wage=assignment.hourly_wage,
                check_in_latitude=latitude,
                check_in_longitude=longitude,
                location_verified=verified,
            )
        )
        logger.info(
            "check-in employee=%s store=%s attendance=%s wage=%s verified=%s",
            employee_id, store_id, record.attendance_id, record.applied_hourly_wage, verified,
        )
        return record

    def _require_inside_store(self, employee_id: int, store_id: int, latitude, longitude) -> None:
        if not self._locations.verify_user_in_store(store_id, latitude, longitude):
            logger.warning("geofence rejected employee=%s store=%s lat=%s lon=%s", employee_id, store_id, latitude, longitude)
            raise LocationVerificationError.out_of_range()

    def _records_on(self, employee_id: int, day: date) -> Sequence[AttendanceRecord]:
        return self._attendance.find_for_employee_between(int(employee_id), start_of_day(day), start_of_next_day(day))
