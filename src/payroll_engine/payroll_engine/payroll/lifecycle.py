from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.validators import require_non_empty, require_present
from ..core.enums import PayrollStatus
from ..core.exceptions import EntityNotFoundError, InvalidOperationError
from .model import Payroll
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[PayrollStatus, frozenset[PayrollStatus]] = {
    PayrollStatus.DRAFT: frozenset({PayrollStatus.CONFIRMED, PayrollStatus.CANCELLED}),
    PayrollStatus.CONFIRMED: frozenset({PayrollStatus.PAID, PayrollStatus.CANCELLED}),
    PayrollStatus.PAID: frozenset(),
    PayrollStatus.CANCELLED: frozenset(),
}


def can_transition(current: PayrollStatus, target: PayrollStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: PayrollStatus, target: PayrollStatus) -> None:
    if not can_transition(current, target):
        raise InvalidOperationError(f"Illegal payroll transition {current.value} -> {target.value}")


class PayrollLifecycle:
    """DRAFT -> CONFIRMED -> PAID, with cancellation from DRAFT or CONFIRMED."""

    def __init__(self, payrolls: PayrollRepository):
        self._payrolls = payrolls

    def confirm(self, payroll_id: int) -> Payroll:
        return self._move(payroll_id, PayrollStatus.CONFIRMED)

    def mark_paid(self, payroll_id: int, payment_date: Optional[date]) -> Payroll:
        payment_date = require_present(payment_date, "payment_date")
        return self._move(payroll_id, PayrollStatus.PAID, payment_date=payment_date)

    def cancel(self, payroll_id: int, reason: Optional[str]) -> Payroll:
        require_non_empty(reason, "cancel_reason")
        # Stored verbatim, the check above only rejects blank reasons.
        return self._move(payroll_id, PayrollStatus.CANCELLED, cancel_reason=reason)

    def update_status(
        self,
        payroll_id: int,
        new_status: PayrollStatus,
        *,
        payment_date: Optional[date] = None,
        cancel_reason: Optional[str] = None,
    ) -> Payroll:
        if new_status == PayrollStatus.CONFIRMED:
            return self.confirm(payroll_id)
        if new_status == PayrollStatus.PAID:
            return self.mark_paid(payroll_id, payment_date)
        if new_status == PayrollStatus.CANCELLED:
            return self.cancel(payroll_id, cancel_reason)

        current = self._load(payroll_id)
        raise InvalidOperationError(f"Illegal payroll transition {current.status.value} -> {new_status.value}")

    def _move(self, payroll_id: int, target: PayrollStatus, **changes) -> Payroll:
        payroll = self._load(payroll_id)
        ensure_transition(payroll.status, target)

        saved = self._payrolls.update_status(
            replace(payroll, status=target, **changes),
            expected_version=payroll.version,
        )
        logger.info("payroll %s %s -> %s", payroll_id, payroll.status.value, target.value)
        return saved

    def _load(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if payroll is None:
            raise EntityNotFoundError("Payroll", payroll_id)
        return payroll
