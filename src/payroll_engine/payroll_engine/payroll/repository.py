from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Payroll, PayrollDetail
from .policy import PayrollPolicy


class PayrollPolicyRepository(Protocol):
    def get_by_store(self, store_id: int) -> Optional[PayrollPolicy]:
        raise NotImplementedError

    def save(self, policy: PayrollPolicy) -> PayrollPolicy:
        """Upsert by store id (last writer wins)."""

        raise NotImplementedError


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def find_active_for_period(
        self, *, employee_id: int, store_id: int, start_date: date, end_date: date
    ) -> Optional[Payroll]:
        """The non-cancelled payroll of exactly this (employee, store, period), if any."""

        raise NotImplementedError

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        """Payrolls whose period overlaps ``[start_date, end_date]``."""

        raise NotImplementedError

    def find_for_store(self, store_id: int, start_date: date, end_date: date) -> Sequence[Payroll]:
        raise NotImplementedError

    def get_details(self, payroll_id: int) -> Sequence[PayrollDetail]:
        """Details ordered by work date."""

        raise NotImplementedError

    def insert(self, payroll: Payroll, details: Sequence[PayrollDetail]) -> Payroll:
        """Persist a new payroll and its details in one transaction; returns it with id and version 0."""

        raise NotImplementedError

    def replace_draft(self, payroll: Payroll, details: Sequence[PayrollDetail], *, expected_version: int) -> Payroll:
        """Overwrite a DRAFT payroll and its details in one transaction.

        Raises ConcurrencyConflictError when the stored version differs from
        ``expected_version`` or the payroll left DRAFT in the meantime.
        """

        raise NotImplementedError

    def update_status(self, payroll: Payroll, *, expected_version: int) -> Payroll:
        """Persist status, payment date and cancel reason; version-checked like ``replace_draft``."""

        raise NotImplementedError
