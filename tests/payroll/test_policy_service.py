from datetime import time

import pytest

from src.payroll_engine.payroll_engine.core.enums import TaxPolicyType
from src.payroll_engine.payroll_engine.core.exceptions import EntityNotFoundError, ValidationError
from src.payroll_engine.payroll_engine.payroll.policy import PayrollPolicyUpdate


@pytest.fixture
def service(container):
    return container.payroll_policy_service


def test_default_policy_is_created_once(service, policies_repo):
    first = service.get_or_create(1)
    second = service.get_or_create(1)

    assert first == second
    assert policies_repo.saves == 1
    assert first.tax_policy_type == TaxPolicyType.FLAT_WITHHOLDING
    assert first.night_work_start_time == time(22, 0)
    assert first.regular_hours_per_day == 8.0
    assert first.weekly_allowance_enabled is True


def test_unknown_store(service):
    with pytest.raises(EntityNotFoundError):
        service.get_or_create(99)


def test_partial_update_keeps_other_fields(service):
    updated = service.update(
        1, PayrollPolicyUpdate(overtime_rate=2.0, night_work_start_time="21:30", tax_policy_type="FOUR_INSURANCES")
    )

    assert updated.overtime_rate == 2.0
    assert updated.night_work_start_time == time(21, 30)
    assert updated.tax_policy_type == TaxPolicyType.INSURANCE_BASED
    assert updated.night_work_rate == 1.5
    assert service.get_or_create(1) == updated


def test_tax_policy_type_accepts_member_name(service):
    updated = service.update(1, PayrollPolicyUpdate(tax_policy_type="INSURANCE_BASED"))
    assert updated.tax_policy_type == TaxPolicyType.INSURANCE_BASED


@pytest.mark.parametrize(
    "update, field",
    [
        (PayrollPolicyUpdate(night_work_rate=0.5), "night_work_rate"),
        (PayrollPolicyUpdate(overtime_rate=3.5), "overtime_rate"),
        (PayrollPolicyUpdate(regular_hours_per_day=13), "regular_hours_per_day"),
        (PayrollPolicyUpdate(night_work_start_time="25:00"), "night_work_start_time"),
        (PayrollPolicyUpdate(tax_policy_type="VAT"), "tax_policy_type"),
    ],
)
def test_invalid_updates_are_rejected(service, update, field):
    before = service.get_or_create(1)

    with pytest.raises(ValidationError) as exc:
        service.update(1, update)

    assert exc.value.field == field
    assert service.get_or_create(1) == before


def test_empty_update_does_not_write(service, policies_repo):
    service.get_or_create(1)
    service.update(1, PayrollPolicyUpdate())
    assert policies_repo.saves == 1
