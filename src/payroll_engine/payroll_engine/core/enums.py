from __future__ import annotations

from enum import Enum


class AttendanceState(str, Enum):
    """State of one daily attendance record."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class TaxPolicyType(str, Enum):
    """Withholding scheme configured per store.

    Values match the column values already stored by the existing DB layer.
    """

    FLAT_WITHHOLDING = "INCOME_TAX_3_3"
    INSURANCE_BASED = "FOUR_INSURANCES"


class PayrollStatus(str, Enum):
    """Payroll lifecycle states. PAID and CANCELLED are terminal."""

    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (PayrollStatus.PAID, PayrollStatus.CANCELLED)
