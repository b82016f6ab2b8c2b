from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.payroll_engine.payroll_engine.attendance.model import AttendanceRecord, NewAttendance
from src.payroll_engine.payroll_engine.container import wire_container
from src.payroll_engine.payroll_engine.core.enums import PayrollStatus
from src.payroll_engine.payroll_engine.core.exceptions import (
    ConcurrencyConflictError,
    EntityNotFoundError,
    InvalidOperationError,
)
from src.payroll_engine.payroll_engine.geo.model import Coordinate, StoreLocation
from src.payroll_engine.payroll_engine.payroll.model import Payroll, PayrollDetail
from src.payroll_engine.payroll_engine.payroll.policy import PayrollPolicy
from src.payroll_engine.payroll_engine.stores.model import WageAssignment

SEOUL_CITY_HALL = (37.5665, 126.9780)

OWNER_ID = 1
EMPLOYEE_ID = 10
OTHER_EMPLOYEE_ID = 11
STORE_ID = 1
UNLOCATED_STORE_ID = 2


@dataclass
class InMemoryStores:
    stores: dict[int, StoreLocation] = field(default_factory=dict)

    def get(self, store_id: int) -> StoreLocation:
        store = self.stores.get(int(store_id))
        if store is None:
            raise EntityNotFoundError("Store", store_id)
        return store


@dataclass
class InMemoryWages:
    assignments: dict[tuple[int, int], WageAssignment] = field(default_factory=dict)

    def add(self, employee_id: int, store_id: int, hourly_wage: int) -> None:
        self.assignments[(employee_id, store_id)] = WageAssignment(employee_id, store_id, hourly_wage)

    def get(self, employee_id: int, store_id: int) -> WageAssignment:
        assignment = self.assignments.get((int(employee_id), int(store_id)))
        if assignment is None:
            raise EntityNotFoundError(
                "EmployeeStoreRelation", message=f"Employee {employee_id} is not assigned to store {store_id}"
            )
        return assignment

    def list_all(self):
        return list(self.assignments.values())


@dataclass
class InMemoryAuthorization:
    masters: set[tuple[int, int]] = field(default_factory=set)

    def is_store_master(self, user_id: int, store_id: int) -> bool:
        return (int(user_id), int(store_id)) in self.masters


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def find_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        items = [r for r in self.records.values() if r.employee_id == employee_id and r.check_out_time is None]
        items.sort(key=lambda r: r.check_in_time, reverse=True)
        return items[0] if items else None

    def find_for_employee_between(self, employee_id: int, start: datetime, end: datetime):
        items = [r for r in self.records.values() if r.employee_id == employee_id and start <= r.check_in_time < end]
        return sorted(items, key=lambda r: r.check_in_time, reverse=True)

    def find_for_store_between(self, store_id: int, start: datetime, end: datetime):
        items = [r for r in self.records.values() if r.store_id == store_id and start <= r.check_in_time < end]
        return sorted(items, key=lambda r: r.check_in_time, reverse=True)

    def find_closed_for_period(self, *, employee_id: int, store_id: int, start: datetime, end: datetime):
        items = [
            r
            for r in self.records.values()
            if r.employee_id == employee_id
            and r.store_id == store_id
            and r.check_out_time is not None
            and start <= r.check_in_time < end
        ]
        return sorted(items, key=lambda r: r.check_in_time)

    def create(self, record: NewAttendance) -> AttendanceRecord:
        day = record.check_in_time.date()
        if any(r.employee_id == record.employee_id and r.work_date == day for r in self.records.values()):
            raise InvalidOperationError(f"Attendance already exists for {day.isoformat()}")

        self._id += 1
        created = AttendanceRecord(
            attendance_id=self._id,
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
        self.records[created.attendance_id] = created
        return created

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, latitude, longitude):
        current = self.records.get(attendance_id)
        if current is None or current.check_out_time is not None:
            return None
        updated = replace(
            current, check_out_time=check_out_time, check_out_latitude=latitude, check_out_longitude=longitude
        )
        self.records[attendance_id] = updated
        return updated

    def add_shift(self, employee_id: int, store_id: int, start: datetime, end: datetime, wage: int) -> AttendanceRecord:
        return self.create(
            NewAttendance(
                employee_id=employee_id,
                store_id=store_id,
                check_in_time=start,
                check_out_time=end,
                applied_hourly_wage=wage,
            )
        )


class InMemoryPolicies:
    def __init__(self):
        self.policies: dict[int, PayrollPolicy] = {}
        self.saves = 0

    def get_by_store(self, store_id: int) -> Optional[PayrollPolicy]:
        return self.policies.get(store_id)

    def save(self, policy: PayrollPolicy) -> PayrollPolicy:
        self.saves += 1
        self.policies[policy.store_id] = policy
        return policy


class InMemoryPayrolls:
    def __init__(self):
        self.payrolls: dict[int, Payroll] = {}
        self.details: dict[int, list[PayrollDetail]] = {}
        self._id = 0

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        return self.payrolls.get(payroll_id)

    def find_active_for_period(self, *, employee_id: int, store_id: int, start_date: date, end_date: date):
        for p in sorted(self.payrolls.values(), key=lambda p: p.payroll_id, reverse=True):
            if (
                p.employee_id == employee_id
                and p.store_id == store_id
                and p.start_date == start_date
                and p.end_date == end_date
                and p.status != PayrollStatus.CANCELLED
            ):
                return p
        return None

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date):
        return self._overlapping(lambda p: p.employee_id == employee_id, start_date, end_date)

    def find_for_store(self, store_id: int, start_date: date, end_date: date):
        return self._overlapping(lambda p: p.store_id == store_id, start_date, end_date)

    def get_details(self, payroll_id: int):
        return sorted(self.details.get(payroll_id, []), key=lambda d: (d.work_date, d.start_time))

    def insert(self, payroll: Payroll, details) -> Payroll:
        if self.find_active_for_period(
            employee_id=payroll.employee_id,
            store_id=payroll.store_id,
            start_date=payroll.start_date,
            end_date=payroll.end_date,
        ):
            raise ConcurrencyConflictError("Payroll for this period was created concurrently; retry")
        self._id += 1
        saved = replace(payroll, payroll_id=self._id, version=0)
        self.payrolls[self._id] = saved
        self.details[self._id] = [replace(d, payroll_id=self._id) for d in details]
        return saved

    def replace_draft(self, payroll: Payroll, details, *, expected_version: int) -> Payroll:
        current = self.payrolls.get(payroll.payroll_id)
        if current is None or current.version != expected_version or current.status != PayrollStatus.DRAFT:
            raise ConcurrencyConflictError(f"Payroll {payroll.payroll_id} changed concurrently")
        saved = replace(payroll, version=expected_version + 1)
        self.payrolls[payroll.payroll_id] = saved
        self.details[payroll.payroll_id] = [replace(d, payroll_id=payroll.payroll_id) for d in details]
        return saved

    def update_status(self, payroll: Payroll, *, expected_version: int) -> Payroll:
        current = self.payrolls.get(payroll.payroll_id)
        if current is None or current.version != expected_version:
            raise ConcurrencyConflictError(f"Payroll {payroll.payroll_id} changed concurrently")
        saved = replace(payroll, version=expected_version + 1)
        self.payrolls[payroll.payroll_id] = saved
        return saved

    def _overlapping(self, predicate, start_date: date, end_date: date):
        items = [p for p in self.payrolls.values() if predicate(p) and p.start_date <= end_date and p.end_date >= start_date]
        return sorted(items, key=lambda p: (p.start_date, p.payroll_id), reverse=True)


@pytest.fixture
def stores():
    return InMemoryStores(
        {
            STORE_ID: StoreLocation(STORE_ID, Coordinate(*SEOUL_CITY_HALL), 100),
            UNLOCATED_STORE_ID: StoreLocation(UNLOCATED_STORE_ID, None, 100),
        }
    )


@pytest.fixture
def wages():
    w = InMemoryWages()
    w.add(EMPLOYEE_ID, STORE_ID, 10000)
    w.add(EMPLOYEE_ID, UNLOCATED_STORE_ID, 12000)
    w.add(OTHER_EMPLOYEE_ID, STORE_ID, 9860)
    return w


@pytest.fixture
def authorization():
    return InMemoryAuthorization({(OWNER_ID, STORE_ID)})


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def policies_repo():
    return InMemoryPolicies()


@pytest.fixture
def payrolls_repo():
    return InMemoryPayrolls()


@pytest.fixture
def container(stores, wages, authorization, attendance_repo, policies_repo, payrolls_repo):
    return wire_container(
        stores=stores,
        wages=wages,
        authorization=authorization,
        attendance=attendance_repo,
        policies=policies_repo,
        payrolls=payrolls_repo,
    )
