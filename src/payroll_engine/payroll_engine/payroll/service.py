from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import start_of_day, start_of_next_day
from ..core.enums import PayrollStatus
from ..core.exceptions import EntityNotFoundError, InvalidOperationError, ValidationError
from ..stores.repository import WageAssignmentLookup
from .allowance import ThresholdWeeklyAllowance, WeeklyAllowancePolicy
from .calculator.base import WageBreakdown, WageCalculator
from .calculator.standard_calculator import StandardWageCalculator
from .model import Payroll, PayrollDetail
from .policy import PayrollPolicy
from .policy_service import PayrollPolicyService
from .repository import PayrollRepository
from .tax import TaxCalculator

logger = logging.getLogger(__name__)


@dataclass
class _Totals:
    regular_minutes: int = 0
    overtime_minutes: int = 0
    night_work_minutes: int = 0
    regular_wage: int = 0
    overtime_wage: int = 0
    night_work_wage: int = 0

    def add(self, b: WageBreakdown) -> None:
        self.regular_minutes += b.regular_minutes
        self.overtime_minutes += b.overtime_minutes
        self.night_work_minutes += b.night_work_minutes
        self.regular_wage += b.regular_wage
        self.overtime_wage += b.overtime_wage
        self.night_work_wage += b.night_work_wage


class PayrollService:
    """Aggregates a period's closed attendance into a DRAFT payroll.

    Recalculating the same (employee, store, period) replaces the existing
    draft in place; once the payroll is confirmed or paid it is rejected.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        payrolls: PayrollRepository,
        policies: PayrollPolicyService,
        wages: WageAssignmentLookup,
        tax: TaxCalculator,
        *,
        calculator: Optional[WageCalculator] = None,
        allowance: Optional[WeeklyAllowancePolicy] = None,
    ):
        self._attendance = attendance
        self._payrolls = payrolls
        self._policies = policies
        self._wages = wages
        self._tax = tax
        self._calculator = calculator or StandardWageCalculator()
        self._allowance = allowance or ThresholdWeeklyAllowance()

    def calculate(
        self,
        employee_id: int,
        store_id: int,
        start_date: date,
        end_date: date,
        *,
        deductions: int = 0,
    ) -> Payroll:
        if start_date is None or end_date is None:
            raise ValidationError("start_date and end_date are required", field="start_date")
        if start_date > end_date:
            raise ValidationError("end_date must not be before start_date", field="end_date")
        if deductions is None or int(deductions) < 0:
            raise ValidationError("deductions must not be negative", field="deductions")

        assignment = self._wages.get(employee_id, store_id)
        policy = self._policies.get_or_create(store_id)

        existing = self._payrolls.find_active_for_period(
            employee_id=int(employee_id), store_id=int(store_id), start_date=start_date, end_date=end_date
        )
        if existing is not None and existing.status != PayrollStatus.DRAFT:
            raise InvalidOperationError(
                f"Payroll {existing.payroll_id} is {existing.status.value}; recalculation is not allowed"
            )

        records = self._closed_records(employee_id, store_id, start_date, end_date)
        details, totals = self._price_records(records, policy)

        weekly_allowance = self._allowance.compute(details) if policy.weekly_allowance_enabled else 0
        gross_wage = totals.regular_wage + totals.overtime_wage + totals.night_work_wage + weekly_allowance
        tax = self._tax.calculate(gross_wage, policy.tax_policy_type, employee_id=int(employee_id), store_id=int(store_id))
        deductions = int(deductions)

        payroll = Payroll(
            employee_id=int(employee_id),
            store_id=int(store_id),
            start_date=start_date,
            end_date=end_date,
            regular_hours=totals.regular_minutes / 60.0,
            overtime_hours=totals.overtime_minutes / 60.0,
            night_work_hours=totals.night_work_minutes / 60.0,
            base_hourly_wage=assignment.hourly_wage,
            regular_wage=totals.regular_wage,
            overtime_wage=totals.overtime_wage,
            night_work_wage=totals.night_work_wage,
            weekly_allowance=weekly_allowance,
            gross_wage=gross_wage,
            tax_rate=float(tax.rate),
            tax_amount=tax.amount,
            deductions=deductions,
            net_wage=gross_wage - tax.amount - deductions,
            status=PayrollStatus.DRAFT,
        )

        if existing is None:
            saved = self._payrolls.insert(payroll, details)
        else:
            saved = self._payrolls.replace_draft(
                replace(payroll, payroll_id=existing.payroll_id, version=existing.version),
                details,
                expected_version=existing.version,
            )

        logger.info(
            "payroll %s employee=%s store=%s period=%s..%s records=%d gross=%d net=%d",
            "recalculated" if existing else "calculated",
            employee_id, store_id, start_date, end_date, len(details), saved.gross_wage, saved.net_wage,
        )
        return saved

    def calculate_wage_for_period(self, employee_id: int, store_id: int, start_date: date, end_date: date) -> int:
        """Sum of daily wages over the period, without persisting anything."""
        self._wages.get(employee_id, store_id)
        policy = self._policies.get_or_create(store_id)
        records = self._closed_records(employee_id, store_id, start_date, end_date)
        return sum(self._calculator.calculate(r, policy).daily_wage for r in records)

    def get_payroll(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if payroll is None:
            raise EntityNotFoundError("Payroll", payroll_id)
        return payroll

    def get_payroll_details(self, payroll_id: int) -> Sequence[PayrollDetail]:
        self.get_payroll(payroll_id)
        return self._payrolls.get_details(int(payroll_id))

    def get_employee_payrolls(self, employee_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        return self._payrolls.find_for_employee(int(employee_id), start_date, end_date)

    def get_store_payrolls(self, store_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        return self._payrolls.find_for_store(int(store_id), start_date, end_date)

    def _closed_records(self, employee_id: int, store_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        records = self._attendance.find_closed_for_period(
            employee_id=int(employee_id),
            store_id=int(store_id),
            start=start_of_day(start_date),
            end=start_of_next_day(end_date),
        )
        return sorted(records, key=lambda r: r.check_in_time)

    def _price_records(
        self, records: Sequence[AttendanceRecord], policy: PayrollPolicy
    ) -> tuple[list[PayrollDetail], _Totals]:
        details: list[PayrollDetail] = []
        totals = _Totals()
        for r in records:
            b = self._calculator.calculate(r, policy)
            totals.add(b)
            details.append(
                PayrollDetail(
                    attendance_id=r.attendance_id,
                    work_date=r.work_date,
                    start_time=r.check_in_time.time(),
                    end_time=r.check_out_time.time(),
                    regular_hours=b.regular_hours,
                    overtime_hours=b.overtime_hours,
                    night_work_hours=b.night_work_hours,
                    base_hourly_wage=b.base_hourly_wage,
                    regular_wage=b.regular_wage,
                    overtime_wage=b.overtime_wage,
                    night_work_wage=b.night_work_wage,
                    daily_wage=b.daily_wage,
                )
            )
        return details, totals
