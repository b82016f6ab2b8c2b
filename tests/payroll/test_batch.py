from datetime import date, datetime

from src.payroll_engine.payroll_engine.core.enums import PayrollStatus


def test_monthly_run_creates_a_draft_per_relation(container, attendance_repo, payrolls_repo):
    attendance_repo.add_shift(10, 1, datetime(2025, 1, 6, 9), datetime(2025, 1, 6, 17), 10000)

    result = container.monthly_payroll_runner.run(2025, 1)

    assert result.ok
    assert (result.start_date, result.end_date) == (date(2025, 1, 1), date(2025, 1, 31))
    assert sorted(result.succeeded) == [(10, 1), (10, 2), (11, 1)]
    assert len(payrolls_repo.payrolls) == 3
    assert all(p.status == PayrollStatus.DRAFT for p in payrolls_repo.payrolls.values())


def test_monthly_run_skips_confirmed_and_continues(container, attendance_repo):
    attendance_repo.add_shift(10, 1, datetime(2025, 1, 6, 9), datetime(2025, 1, 6, 17), 10000)
    payroll = container.payroll_service.calculate(10, 1, date(2025, 1, 1), date(2025, 1, 31))
    container.payroll_lifecycle.confirm(payroll.payroll_id)

    result = container.monthly_payroll_runner.run(2025, 1)

    assert not result.ok
    assert [f[:2] for f in result.failed] == [(10, 1)]
    assert sorted(result.succeeded) == [(10, 2), (11, 1)]


def test_previous_month_wraps_year(container):
    result = container.monthly_payroll_runner.run_previous_month(date(2025, 1, 15))

    assert (result.start_date, result.end_date) == (date(2024, 12, 1), date(2024, 12, 31))
