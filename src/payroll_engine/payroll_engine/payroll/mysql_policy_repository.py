from __future__ import annotations

from typing import Optional

from ..core.enums import TaxPolicyType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, normalize_mysql_time
from .policy import PayrollPolicy
from .repository import PayrollPolicyRepository


class MySQLPayrollPolicyRepository(PayrollPolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_store(self, store_id: int) -> Optional[PayrollPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT store_id, tax_policy_type, night_work_rate, night_work_start_time,
                       overtime_rate, regular_hours_per_day, weekly_allowance_enabled
                FROM payroll_policies
                WHERE store_id=%s
                """,
                (int(store_id),),
            )
            r = cur.fetchone()
            if not r:
                return None
            return PayrollPolicy(
                store_id=int(r["store_id"]),
                tax_policy_type=TaxPolicyType(r["tax_policy_type"]),
                night_work_rate=float(r["night_work_rate"]),
                night_work_start_time=normalize_mysql_time(r["night_work_start_time"]),
                overtime_rate=float(r["overtime_rate"]),
                regular_hours_per_day=float(r["regular_hours_per_day"]),
                weekly_allowance_enabled=bool(r["weekly_allowance_enabled"]),
            )

    def save(self, policy: PayrollPolicy) -> PayrollPolicy:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_policies(
                    store_id, tax_policy_type, night_work_rate, night_work_start_time,
                    overtime_rate, regular_hours_per_day, weekly_allowance_enabled
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    tax_policy_type=VALUES(tax_policy_type),
                    night_work_rate=VALUES(night_work_rate),
                    night_work_start_time=VALUES(night_work_start_time),
                    overtime_rate=VALUES(overtime_rate),
                    regular_hours_per_day=VALUES(regular_hours_per_day),
                    weekly_allowance_enabled=VALUES(weekly_allowance_enabled),
                    updated_at=CURRENT_TIMESTAMP
                """,
                (
                    policy.store_id,
                    policy.tax_policy_type.value,
                    policy.night_work_rate,
                    policy.night_work_start_time,
                    policy.overtime_rate,
                    policy.regular_hours_per_day,
                    int(policy.weekly_allowance_enabled),
                ),
            )
        return policy
