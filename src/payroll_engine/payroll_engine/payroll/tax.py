from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from ..common.money import round_half_up, to_decimal
from ..core.constants import FLAT_WITHHOLDING_RATE
from ..core.enums import TaxPolicyType
from ..core.exceptions import ValidationError


class InsuranceRateProvider(Protocol):
    def rate_for(self, *, employee_id: int, store_id: int) -> Decimal:
        raise NotImplementedError


class StaticInsuranceRate:
    """Single configured rate for every employee and store."""

    def __init__(self, rate):
        rate = to_decimal(rate)
        if not (Decimal(0) <= rate < Decimal(1)):
            raise ValidationError(f"insurance rate must be within [0, 1): {rate}", field="insurance_tax_rate")
        self._rate = rate

    def rate_for(self, *, employee_id: int, store_id: int) -> Decimal:
        return self._rate


@dataclass(frozen=True)
class TaxResult:
    rate: Decimal
    amount: int


class TaxCalculator:
    def __init__(self, insurance_rates: InsuranceRateProvider, *, flat_rate=FLAT_WITHHOLDING_RATE):
        self._insurance_rates = insurance_rates
        self._flat_rate = to_decimal(flat_rate)

    def calculate(self, gross_wage: int, policy_type: TaxPolicyType, *, employee_id: int, store_id: int) -> TaxResult:
        if policy_type == TaxPolicyType.FLAT_WITHHOLDING:
            rate = self._flat_rate
        elif policy_type == TaxPolicyType.INSURANCE_BASED:
            rate = to_decimal(self._insurance_rates.rate_for(employee_id=employee_id, store_id=store_id))
        else:
            raise ValidationError(f"Unsupported tax policy type: {policy_type!r}", field="tax_policy_type")
        return TaxResult(rate=rate, amount=round_half_up(Decimal(gross_wage) * rate))
