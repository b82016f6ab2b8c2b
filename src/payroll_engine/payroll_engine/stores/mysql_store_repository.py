from __future__ import annotations

from typing import Sequence

from ..core.exceptions import EntityNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from ..geo.model import Coordinate, StoreLocation
from .model import WageAssignment
from .repository import AuthorizationCheck, StoreLocationLookup, WageAssignmentLookup

# Custom wage wins unless the relation is flagged to follow the store standard.
_APPLIED_WAGE_SQL = """
    CASE
        WHEN esr.use_store_standard_wage = 1 OR esr.custom_hourly_wage IS NULL
            THEN s.store_standard_hour_wage
        ELSE esr.custom_hourly_wage
    END
"""


class MySQLStoreLocationLookup(StoreLocationLookup):
    def __init__(self, conn_factory: DatabaseConnection, *, default_radius_meters: int = 100):
        self._conn_factory = conn_factory
        self._default_radius = int(default_radius_meters)

    def get(self, store_id: int) -> StoreLocation:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT store_id, latitude, longitude, radius
                FROM stores
                WHERE store_id=%s AND is_deleted=0
                """,
                (int(store_id),),
            )
            r = cur.fetchone()
            if not r:
                raise EntityNotFoundError("Store", store_id)
            return StoreLocation(
                store_id=int(r["store_id"]),
                coordinate=Coordinate.of(r.get("latitude"), r.get("longitude")),
                radius_meters=int(r.get("radius") or self._default_radius),
            )


class MySQLWageAssignmentLookup(WageAssignmentLookup):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, store_id: int) -> WageAssignment:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT esr.employee_id, esr.store_id, {_APPLIED_WAGE_SQL} AS hourly_wage
                FROM employee_store_relations esr
                JOIN stores s ON s.store_id = esr.store_id
                WHERE esr.employee_id=%s AND esr.store_id=%s
                """,
                (int(employee_id), int(store_id)),
            )
            r = cur.fetchone()
            if not r:
                raise EntityNotFoundError(
                    "EmployeeStoreRelation",
                    (employee_id, store_id),
                    f"Employee (id={employee_id}) - store (id={store_id}) relation not found",
                )
            return _to_assignment(r)

    def list_all(self) -> Sequence[WageAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT esr.employee_id, esr.store_id, {_APPLIED_WAGE_SQL} AS hourly_wage
                FROM employee_store_relations esr
                JOIN stores s ON s.store_id = esr.store_id
                WHERE s.is_deleted=0
                ORDER BY esr.store_id ASC, esr.employee_id ASC
                """
            )
            return [_to_assignment(r) for r in cur.fetchall()]


class MySQLAuthorizationCheck(AuthorizationCheck):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def is_store_master(self, user_id: int, store_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS ok
                FROM master_store_relations msr
                JOIN users u ON u.user_id = msr.master_id
                WHERE msr.master_id=%s AND msr.store_id=%s AND u.user_grade='MAS'
                """,
                (int(user_id), int(store_id)),
            )
            return cur.fetchone() is not None


def _to_assignment(r: dict) -> WageAssignment:
    return WageAssignment(
        employee_id=int(r["employee_id"]),
        store_id=int(r["store_id"]),
        hourly_wage=int(r["hourly_wage"]),
    )
