from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import InvalidOperationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, is_duplicate_key
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, store_id, check_in_time, check_out_time,
    check_in_latitude, check_in_longitude, check_out_latitude, check_out_longitude,
    location_verified, applied_hourly_wage, note
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            r = cur.fetchone()
            return _to_record(r) if r else None

    def find_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = cur.fetchone()
            return _to_record(r) if r else None

    def find_for_employee_between(self, employee_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND check_in_time >= %s AND check_in_time < %s
                ORDER BY check_in_time DESC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in cur.fetchall()]

    def find_for_store_between(self, store_id: int, start: datetime, end: datetime) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE store_id=%s AND check_in_time >= %s AND check_in_time < %s
                ORDER BY check_in_time DESC
                """,
                (int(store_id), start, end),
            )
            return [_to_record(r) for r in cur.fetchall()]

    def find_closed_for_period(
        self, *, employee_id: int, store_id: int, start: datetime, end: datetime
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_id=%s AND store_id=%s
                  AND check_in_time >= %s AND check_in_time < %s
                  AND check_out_time IS NOT NULL
                ORDER BY check_in_time ASC
                """,
                (int(employee_id), int(store_id), start, end),
            )
            return [_to_record(r) for r in cur.fetchall()]

    def create(self, record: NewAttendance) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(
                        employee_id, store_id, work_date, check_in_time, check_out_time,
                        check_in_latitude, check_in_longitude, location_verified,
                        applied_hourly_wage, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.employee_id,
                        record.store_id,
                        record.check_in_time.date(),
                        record.check_in_time,
                        record.check_out_time,
                        record.check_in_latitude,
                        record.check_in_longitude,
                        int(record.location_verified),
                        record.applied_hourly_wage,
                        record.note,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            # uq_attendance_employee_day lost a concurrent check-in race.
            if is_duplicate_key(exc):
                raise InvalidOperationError("Already checked in today") from exc
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=record.employee_id,
            store_id=record.store_id,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            applied_hourly_wage=record.applied_hourly_wage,
            check_in_latitude=record.check_in_latitude,
            check_in_longitude=record.check_in_longitude,
            location_verified=record.location_verified,
            note=record.note,
        )

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, check_out_latitude=%s, check_out_longitude=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, latitude, longitude, int(attendance_id)),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            return _to_record(cur.fetchone())


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        store_id=int(r["store_id"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        applied_hourly_wage=int(r["applied_hourly_wage"]),
        check_in_latitude=r.get("check_in_latitude"),
        check_in_longitude=r.get("check_in_longitude"),
        check_out_latitude=r.get("check_out_latitude"),
        check_out_longitude=r.get("check_out_longitude"),
        location_verified=bool(r.get("location_verified")),
        note=r.get("note"),
    )
