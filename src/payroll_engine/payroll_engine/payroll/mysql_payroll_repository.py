from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PayrollStatus
from ..core.exceptions import ConcurrencyConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, is_duplicate_key, normalize_mysql_time
from .model import Payroll, PayrollDetail
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, store_id, start_date, end_date,
    regular_hours, overtime_hours, night_work_hours, base_hourly_wage,
    regular_wage, overtime_wage, night_work_wage, weekly_allowance, gross_wage,
    tax_rate, tax_amount, deductions, net_wage, status, payment_date, cancel_reason, version
"""

_DETAIL_COLUMNS = """
    payroll_detail_id, payroll_id, attendance_id, work_date, start_time, end_time,
    regular_hours, overtime_hours, night_work_hours, base_hourly_wage,
    regular_wage, overtime_wage, night_work_wage, daily_wage
"""


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = cur.fetchone()
            return _to_payroll(r) if r else None

    def find_active_for_period(
        self, *, employee_id: int, store_id: int, start_date: date, end_date: date
    ) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payrolls
                WHERE employee_id=%s AND store_id=%s AND start_date=%s AND end_date=%s
                  AND status <> %s
                ORDER BY payroll_id DESC
                LIMIT 1
                """,
                (int(employee_id), int(store_id), start_date, end_date, PayrollStatus.CANCELLED.value),
            )
            r = cur.fetchone()
            return _to_payroll(r) if r else None

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        return self._find_overlapping("employee_id", int(employee_id), start_date, end_date)

    def find_for_store(self, store_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        return self._find_overlapping("store_id", int(store_id), start_date, end_date)

    def get_details(self, payroll_id: int) -> Sequence[PayrollDetail]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DETAIL_COLUMNS}
                FROM payroll_details
                WHERE payroll_id=%s
                ORDER BY work_date ASC, start_time ASC
                """,
                (int(payroll_id),),
            )
            return [_to_detail(r) for r in cur.fetchall()]

    def insert(self, payroll: Payroll, details: Sequence[PayrollDetail]) -> Payroll:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payrolls(
                        employee_id, store_id, start_date, end_date,
                        regular_hours, overtime_hours, night_work_hours, base_hourly_wage,
                        regular_wage, overtime_wage, night_work_wage, weekly_allowance, gross_wage,
                        tax_rate, tax_amount, deductions, net_wage, status, version
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                    """,
                    (
                        payroll.employee_id, payroll.store_id, payroll.start_date, payroll.end_date,
                        *_amounts(payroll),
                        payroll.status.value,
                    ),
                )
                payroll_id = int(cur.lastrowid)
                _insert_details(cur, payroll_id, details)
        except mysql.connector.IntegrityError as exc:
            # uq_payroll_active_period: another request created this draft first.
            if is_duplicate_key(exc):
                raise ConcurrencyConflictError("Payroll for this period was created concurrently; retry") from exc
            raise
        return replace(payroll, payroll_id=payroll_id, version=0)

    def replace_draft(self, payroll: Payroll, details: Sequence[PayrollDetail], *, expected_version: int) -> Payroll:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET regular_hours=%s, overtime_hours=%s, night_work_hours=%s, base_hourly_wage=%s,
                    regular_wage=%s, overtime_wage=%s, night_work_wage=%s, weekly_allowance=%s, gross_wage=%s,
                    tax_rate=%s, tax_amount=%s, deductions=%s, net_wage=%s,
                    version=version+1, updated_at=CURRENT_TIMESTAMP
                WHERE payroll_id=%s AND version=%s AND status=%s
                """,
                (*_amounts(payroll), int(payroll.payroll_id), int(expected_version), PayrollStatus.DRAFT.value),
            )
            if cur.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"Payroll {payroll.payroll_id} changed concurrently (expected version {expected_version})"
                )
            cur.execute("DELETE FROM payroll_details WHERE payroll_id=%s", (int(payroll.payroll_id),))
            _insert_details(cur, int(payroll.payroll_id), details)
        return replace(payroll, version=int(expected_version) + 1)

    def update_status(self, payroll: Payroll, *, expected_version: int) -> Payroll:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET status=%s, payment_date=%s, cancel_reason=%s,
                    version=version+1, updated_at=CURRENT_TIMESTAMP
                WHERE payroll_id=%s AND version=%s
                """,
                (
                    payroll.status.value,
                    payroll.payment_date,
                    payroll.cancel_reason,
                    int(payroll.payroll_id),
                    int(expected_version),
                ),
            )
            if cur.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"Payroll {payroll.payroll_id} changed concurrently (expected version {expected_version})"
                )
        return replace(payroll, version=int(expected_version) + 1)

    def _find_overlapping(self, column: str, value: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payrolls
                WHERE {column}=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date DESC, payroll_id DESC
                """,
                (value, end_date, start_date),
            )
            return [_to_payroll(r) for r in cur.fetchall()]


def _amounts(p: Payroll) -> tuple:
    return (
        p.regular_hours, p.overtime_hours, p.night_work_hours, p.base_hourly_wage,
        p.regular_wage, p.overtime_wage, p.night_work_wage, p.weekly_allowance, p.gross_wage,
        p.tax_rate, p.tax_amount, p.deductions, p.net_wage,
    )


def _insert_details(cur, payroll_id: int, details: Sequence[PayrollDetail]) -> None:
    if not details:
        return
    cur.executemany(
        """
        INSERT INTO payroll_details(
            payroll_id, attendance_id, work_date, start_time, end_time,
            regular_hours, overtime_hours, night_work_hours, base_hourly_wage,
            regular_wage, overtime_wage, night_work_wage, daily_wage
        )
        VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
        """,
        [
            (
                payroll_id, d.attendance_id, d.work_date, d.start_time, d.end_time,
                d.regular_hours, d.overtime_hours, d.night_work_hours, d.base_hourly_wage,
                d.regular_wage, d.overtime_wage, d.night_work_wage, d.daily_wage,
            )
            for d in details
        ],
    )


def _to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        store_id=int(r["store_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        regular_hours=float(r["regular_hours"] or 0),
        overtime_hours=float(r["overtime_hours"] or 0),
        night_work_hours=float(r["night_work_hours"] or 0),
        base_hourly_wage=int(r["base_hourly_wage"] or 0),
        regular_wage=int(r["regular_wage"] or 0),
        overtime_wage=int(r["overtime_wage"] or 0),
        night_work_wage=int(r["night_work_wage"] or 0),
        weekly_allowance=int(r["weekly_allowance"] or 0),
        gross_wage=int(r["gross_wage"] or 0),
        tax_rate=float(r["tax_rate"] or 0),
        tax_amount=int(r["tax_amount"] or 0),
        deductions=int(r["deductions"] or 0),
        net_wage=int(r["net_wage"] or 0),
        status=PayrollStatus(r["status"]),
        payment_date=r.get("payment_date"),
        cancel_reason=r.get("cancel_reason"),
        version=int(r["version"]),
    )


def _to_detail(r: dict) -> PayrollDetail:
    return PayrollDetail(
        payroll_detail_id=int(r["payroll_detail_id"]),
        payroll_id=int(r["payroll_id"]),
        attendance_id=int(r["attendance_id"]),
        work_date=r["work_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        regular_hours=float(r["regular_hours"]),
        overtime_hours=float(r["overtime_hours"]),
        night_work_hours=float(r["night_work_hours"]),
        base_hourly_wage=int(r["base_hourly_wage"]),
        regular_wage=int(r["regular_wage"]),
        overtime_wage=int(r["overtime_wage"]),
        night_work_wage=int(r["night_work_wage"]),
        daily_wage=int(r["daily_wage"]),
    )
