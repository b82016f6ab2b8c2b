from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        """Most recent record of the employee with no check-out, at any store."""

        raise NotImplementedError

    def find_for_employee_between(
        self, employee_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceRecord]:
        """Records with ``start <= check_in_time < end``, newest first."""

        raise NotImplementedError

    def find_for_store_between(self, store_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_closed_for_period(
        self, *, employee_id: int, store_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceRecord]:
        """Closed records of one employee at one store, oldest first."""

        raise NotImplementedError

    def create(self, record: NewAttendance) -> AttendanceRecord:
        """Insert a record.

        Must raise InvalidOperationError when the employee already has a
        record on the same calendar day (unique ``(employee_id, work_date)``).
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> Optional[AttendanceRecord]:
        """Set check-out once; returns None when the record was already closed."""

        raise NotImplementedError
