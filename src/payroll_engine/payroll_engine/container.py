from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_INSURANCE_TAX_RATE,
    DEFAULT_STORE_RADIUS_METERS,
    DEFAULT_WEEKLY_ALLOWANCE_MIN_HOURS,
    FLAT_WITHHOLDING_RATE,
)
from .database.connection import DBConfig, DatabaseConnection
from .geo.verifier import LocationVerificationService
from .payroll.allowance import ThresholdWeeklyAllowance
from .payroll.batch import MonthlyPayrollRunner
from .payroll.lifecycle import PayrollLifecycle
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.mysql_policy_repository import MySQLPayrollPolicyRepository
from .payroll.policy_service import PayrollPolicyService
from .payroll.repository import PayrollPolicyRepository, PayrollRepository
from .payroll.service import PayrollService
from .payroll.tax import StaticInsuranceRate, TaxCalculator
from .stores.mysql_store_repository import (
    MySQLAuthorizationCheck,
    MySQLStoreLocationLookup,
    MySQLWageAssignmentLookup,
)
from .stores.repository import AuthorizationCheck, StoreLocationLookup, WageAssignmentLookup


@dataclass(frozen=True)
class Container:
    stores_repo: StoreLocationLookup
    wages_repo: WageAssignmentLookup
    authorization: AuthorizationCheck
    attendance_repo: AttendanceRepository
    policies_repo: PayrollPolicyRepository
    payrolls_repo: PayrollRepository

    location_service: LocationVerificationService
    attendance_service: AttendanceService
    payroll_policy_service: PayrollPolicyService
    payroll_service: PayrollService
    payroll_lifecycle: PayrollLifecycle
    monthly_payroll_runner: MonthlyPayrollRunner

    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    stores: StoreLocationLookup,
    wages: WageAssignmentLookup,
    authorization: AuthorizationCheck,
    attendance: AttendanceRepository,
    policies: PayrollPolicyRepository,
    payrolls: PayrollRepository,
    settings: Any = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Explicit constructor injection of every collaborator."""
    flat_rate = getattr(settings, "FLAT_WITHHOLDING_RATE", FLAT_WITHHOLDING_RATE)
    insurance_rate = getattr(settings, "INSURANCE_TAX_RATE", DEFAULT_INSURANCE_TAX_RATE)
    min_weekly_hours = getattr(settings, "WEEKLY_ALLOWANCE_MIN_HOURS", DEFAULT_WEEKLY_ALLOWANCE_MIN_HOURS)

    location_service = LocationVerificationService(stores)
    attendance_service = AttendanceService(attendance, wages, location_service, authorization)
    payroll_policy_service = PayrollPolicyService(policies, stores)
    payroll_service = PayrollService(
        attendance,
        payrolls,
        payroll_policy_service,
        wages,
        TaxCalculator(StaticInsuranceRate(insurance_rate), flat_rate=flat_rate),
        allowance=ThresholdWeeklyAllowance(min_weekly_hours=min_weekly_hours),
    )

    return Container(
        stores_repo=stores,
        wages_repo=wages,
        authorization=authorization,
        attendance_repo=attendance,
        policies_repo=policies,
        payrolls_repo=payrolls,
        location_service=location_service,
        attendance_service=attendance_service,
        payroll_policy_service=payroll_policy_service,
        payroll_service=payroll_service,
        payroll_lifecycle=PayrollLifecycle(payrolls),
        monthly_payroll_runner=MonthlyPayrollRunner(payroll_service, wages),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    radius = int(getattr(settings, "DEFAULT_STORE_RADIUS_METERS", DEFAULT_STORE_RADIUS_METERS))

    return wire_container(
        stores=MySQLStoreLocationLookup(conn, default_radius_meters=radius),
        wages=MySQLWageAssignmentLookup(conn),
        authorization=MySQLAuthorizationCheck(conn),
        attendance=MySQLAttendanceRepository(conn),
        policies=MySQLPayrollPolicyRepository(conn),
        payrolls=MySQLPayrollRepository(conn),
        settings=settings,
        conn=conn,
    )
