from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional, Union

from ..core.constants import (
    DEFAULT_NIGHT_WORK_RATE,
    DEFAULT_NIGHT_WORK_START_TIME,
    DEFAULT_OVERTIME_RATE,
    DEFAULT_REGULAR_HOURS_PER_DAY,
    DEFAULT_WEEKLY_ALLOWANCE_ENABLED,
)
from ..core.enums import TaxPolicyType


@dataclass(frozen=True)
class PayrollPolicy:
    """Per-store rates and thresholds that drive wage calculation."""

    store_id: int
    tax_policy_type: TaxPolicyType
    night_work_rate: float
    night_work_start_time: time
    overtime_rate: float
    regular_hours_per_day: float
    weekly_allowance_enabled: bool

    @classmethod
    def default_for(cls, store_id: int) -> "PayrollPolicy":
        return cls(
            store_id=int(store_id),
            tax_policy_type=TaxPolicyType.FLAT_WITHHOLDING,
            night_work_rate=DEFAULT_NIGHT_WORK_RATE,
            night_work_start_time=DEFAULT_NIGHT_WORK_START_TIME,
            overtime_rate=DEFAULT_OVERTIME_RATE,
            regular_hours_per_day=DEFAULT_REGULAR_HOURS_PER_DAY,
            weekly_allowance_enabled=DEFAULT_WEEKLY_ALLOWANCE_ENABLED,
        )


@dataclass(frozen=True)
class PayrollPolicyUpdate:
    """Partial update: only non-None fields are applied."""

    tax_policy_type: Optional[Union[TaxPolicyType, str]] = None
    night_work_rate: Optional[float] = None
    night_work_start_time: Optional[Union[time, str]] = None
    overtime_rate: Optional[float] = None
    regular_hours_per_day: Optional[float] = None
    weekly_allowance_enabled: Optional[bool] = None
