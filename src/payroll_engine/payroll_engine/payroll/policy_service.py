from __future__ import annotations

import logging
from dataclasses import replace
from datetime import time

from ..common.datetime_utils import parse_clock_time
from ..common.validators import require_range
from ..core.constants import (
    MAX_PREMIUM_RATE,
    MAX_REGULAR_HOURS_PER_DAY,
    MIN_PREMIUM_RATE,
    MIN_REGULAR_HOURS_PER_DAY,
)
from ..core.enums import TaxPolicyType
from ..core.exceptions import ValidationError
from ..stores.repository import StoreLocationLookup
from .policy import PayrollPolicy, PayrollPolicyUpdate
from .repository import PayrollPolicyRepository

logger = logging.getLogger(__name__)


class PayrollPolicyService:
    def __init__(self, policies: PayrollPolicyRepository, stores: StoreLocationLookup):
        self._policies = policies
        self._stores = stores

    def get_or_create(self, store_id: int) -> PayrollPolicy:
        """Stored policy of the store, or a freshly persisted default one."""
        self._stores.get(store_id)

        policy = self._policies.get_by_store(int(store_id))
        if policy is not None:
            return policy

        logger.info("creating default payroll policy for store=%s", store_id)
        return self._policies.save(PayrollPolicy.default_for(store_id))

    def update(self, store_id: int, update: PayrollPolicyUpdate) -> PayrollPolicy:
        policy = self.get_or_create(store_id)
        changes: dict = {}

        if update.tax_policy_type is not None:
            changes["tax_policy_type"] = _coerce_tax_policy_type(update.tax_policy_type)

        if update.night_work_rate is not None:
            changes["night_work_rate"] = require_range(
                update.night_work_rate, "night_work_rate", min_value=MIN_PREMIUM_RATE, max_value=MAX_PREMIUM_RATE
            )

        if update.night_work_start_time is not None:
            changes["night_work_start_time"] = _coerce_clock_time(update.night_work_start_time)

        if update.overtime_rate is not None:
            changes["overtime_rate"] = require_range(
                update.overtime_rate, "overtime_rate", min_value=MIN_PREMIUM_RATE, max_value=MAX_PREMIUM_RATE
            )

        if update.regular_hours_per_day is not None:
            changes["regular_hours_per_day"] = require_range(
                update.regular_hours_per_day,
                "regular_hours_per_day",
                min_value=MIN_REGULAR_HOURS_PER_DAY,
                max_value=MAX_REGULAR_HOURS_PER_DAY,
            )

        if update.weekly_allowance_enabled is not None:
            changes["weekly_allowance_enabled"] = bool(update.weekly_allowance_enabled)

        if not changes:
            return policy

        updated = self._policies.save(replace(policy, **changes))
        logger.info("payroll policy updated store=%s fields=%s", store_id, sorted(changes))
        return updated


def _coerce_tax_policy_type(value) -> TaxPolicyType:
    if isinstance(value, TaxPolicyType):
        return value
    try:
        return TaxPolicyType(value)
    except ValueError:
        try:
            return TaxPolicyType[str(value)]
        except KeyError:
            raise ValidationError(f"Unknown tax policy type: {value!r}", field="tax_policy_type")


def _coerce_clock_time(value) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_clock_time(str(value))
    except ValueError:
        raise ValidationError("night_work_start_time must be HH:MM", field="night_work_start_time")
