from datetime import date, datetime, timedelta, timezone

import pytest

from src.payroll_engine.payroll_engine.attendance.model import ManualAttendanceRequest
from src.payroll_engine.payroll_engine.common.datetime_utils import now_local
from src.payroll_engine.payroll_engine.core.enums import AttendanceState
from src.payroll_engine.payroll_engine.core.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    InvalidOperationError,
    LocationVerificationError,
    ValidationError,
)

INSIDE = (37.5660, 126.9785)
OUTSIDE = (37.5000, 126.9000)


@pytest.fixture
def service(container):
    return container.attendance_service


def test_check_in_then_check_out_closes_the_record(service):
    opened = service.check_in_with_verification(10, 1, *INSIDE, now=datetime(2025, 3, 3, 9, 0))

    assert opened.state == AttendanceState.OPEN
    assert opened.applied_hourly_wage == 10000
    assert opened.location_verified is True

    closed = service.check_out_with_verification(10, 1, *INSIDE, now=datetime(2025, 3, 3, 17, 30))

    assert closed.attendance_id == opened.attendance_id
    assert closed.state == AttendanceState.CLOSED
    assert closed.working_hours == 8.5
    assert closed.check_out_latitude == INSIDE[0]


def test_wage_snapshot_is_taken_at_check_in(service, wages):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))
    wages.add(10, 1, 20000)

    closed = service.check_out(10, 1, None, None, now=datetime(2025, 3, 3, 10, 0))

    assert closed.applied_hourly_wage == 10000


def test_second_check_in_same_day_is_rejected(service, attendance_repo):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))
    service.check_out(10, 1, None, None, now=datetime(2025, 3, 3, 12, 0))

    with pytest.raises(InvalidOperationError):
        service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 13, 0))
    assert len(attendance_repo.records) == 1


def test_check_in_while_open_elsewhere_is_rejected(service):
    service.check_in(10, 2, None, None, now=datetime(2025, 3, 3, 21, 0))

    with pytest.raises(InvalidOperationError):
        service.check_in(10, 1, None, None, now=datetime(2025, 3, 4, 9, 0))


def test_check_in_outside_radius_writes_nothing(service, attendance_repo):
    with pytest.raises(LocationVerificationError):
        service.check_in_with_verification(10, 1, *OUTSIDE, now=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(LocationVerificationError):
        service.check_in_with_verification(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))

    assert attendance_repo.records == {}


def test_check_in_requires_employee_store_relation(service):
    with pytest.raises(EntityNotFoundError):
        service.check_in(11, 2, None, None, now=datetime(2025, 3, 3, 9, 0))


def test_check_out_without_check_in(service):
    with pytest.raises(InvalidOperationError):
        service.check_out(10, 1, None, None, now=datetime(2025, 3, 3, 18, 0))


def test_check_out_twice_is_rejected(service):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))
    service.check_out(10, 1, None, None, now=datetime(2025, 3, 3, 18, 0))

    with pytest.raises(InvalidOperationError):
        service.check_out(10, 1, None, None, now=datetime(2025, 3, 3, 19, 0))


def test_check_out_at_other_store_is_rejected(service):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))

    with pytest.raises(InvalidOperationError):
        service.check_out(10, 2, None, None, now=datetime(2025, 3, 3, 18, 0))


def test_check_out_outside_radius_keeps_record_open(service):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 9, 0))

    with pytest.raises(LocationVerificationError):
        service.check_out_with_verification(10, 1, *OUTSIDE, now=datetime(2025, 3, 3, 18, 0))

    assert service.get_today_record(10, date(2025, 3, 3)).is_open


def test_manual_registration_by_owner(service):
    record = service.register_manual_attendance(
        ManualAttendanceRequest(
            employee_id=10,
            store_id=1,
            check_in_time=datetime(2025, 3, 1, 9, 0),
            check_out_time=datetime(2025, 3, 1, 18, 0),
            registered_by=1,
            note="forgot phone",
        )
    )

    assert record.state == AttendanceState.CLOSED
    assert record.location_verified is False
    assert record.applied_hourly_wage == 10000
    assert record.note == "forgot phone"


def test_manual_registration_requires_owner(service):
    with pytest.raises(AuthorizationError):
        service.register_manual_attendance(
            ManualAttendanceRequest(
                employee_id=10, store_id=1, check_in_time=datetime(2025, 3, 1, 9, 0), registered_by=11
            )
        )


def test_manual_registration_rejects_inverted_times(service):
    with pytest.raises(ValidationError) as exc:
        service.register_manual_attendance(
            ManualAttendanceRequest(
                employee_id=10,
                store_id=1,
                check_in_time=datetime(2025, 3, 1, 18, 0),
                check_out_time=datetime(2025, 3, 1, 9, 0),
                registered_by=1,
            )
        )
    assert exc.value.field == "check_out_time"


def test_manual_registration_rejects_duplicate_day(service):
    service.check_in(10, 1, None, None, now=datetime(2025, 3, 1, 9, 0))

    with pytest.raises(InvalidOperationError):
        service.register_manual_attendance(
            ManualAttendanceRequest(
                employee_id=10,
                store_id=1,
                check_in_time=datetime(2025, 3, 1, 10, 0),
                check_out_time=datetime(2025, 3, 1, 12, 0),
                registered_by=1,
            )
        )


def test_manual_open_record_rejected_when_already_open(service):
    service.check_in(10, 2, None, None, now=datetime(2025, 3, 1, 22, 0))

    with pytest.raises(InvalidOperationError):
        service.register_manual_attendance(
            ManualAttendanceRequest(
                employee_id=10, store_id=1, check_in_time=datetime(2025, 3, 2, 9, 0), registered_by=1
            )
        )


def test_period_queries(service, attendance_repo):
    attendance_repo.add_shift(10, 1, datetime(2025, 3, 1, 9), datetime(2025, 3, 1, 17), 10000)
    attendance_repo.add_shift(10, 1, datetime(2025, 3, 2, 9), datetime(2025, 3, 2, 17), 10000)
    attendance_repo.add_shift(11, 1, datetime(2025, 3, 2, 9), datetime(2025, 3, 2, 17), 9860)
    attendance_repo.add_shift(10, 1, datetime(2025, 4, 1, 9), datetime(2025, 4, 1, 17), 10000)

    march = service.get_monthly_attendances(10, 2025, 3)
    assert [r.work_date for r in march] == [date(2025, 3, 2), date(2025, 3, 1)]

    store_rows = service.get_attendances_by_store_and_period(1, datetime(2025, 3, 2), datetime(2025, 3, 3))
    assert {r.employee_id for r in store_rows} == {10, 11}


def test_check_out_after_midnight_closes_yesterdays_record(service):
    opened = service.check_in(10, 1, None, None, now=datetime(2025, 3, 3, 22, 0))

    closed = service.check_out(10, 1, None, None, now=datetime(2025, 3, 4, 0, 30))

    assert closed.attendance_id == opened.attendance_id
    assert closed.work_date == date(2025, 3, 3)
    assert closed.working_hours == 2.5

    # The employee can work again the same day.
    again = service.check_in(10, 1, None, None, now=datetime(2025, 3, 4, 9, 0))
    assert again.is_open


def test_check_out_without_any_open_record(service):
    with pytest.raises(InvalidOperationError, match="No open attendance record"):
        service.check_out(10, 1, None, None, now=datetime(2025, 3, 4, 0, 30))


def test_manual_registration_converts_offset_times(service):
    check_in = datetime(2025, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=9)))
    check_out = datetime(2025, 3, 1, 18, 0, tzinfo=timezone(timedelta(hours=9)))

    record = service.register_manual_attendance(
        ManualAttendanceRequest(
            employee_id=10, store_id=1, check_in_time=check_in, check_out_time=check_out, registered_by=1
        )
    )

    assert record.check_in_time.tzinfo is None
    assert record.check_in_time == check_in.astimezone().replace(tzinfo=None)
    assert record.working_hours == 9.0


def test_now_local_has_whole_seconds():
    assert now_local().microsecond == 0
