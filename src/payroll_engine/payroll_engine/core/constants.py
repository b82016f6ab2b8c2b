"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_KM = 6371.0
DEFAULT_STORE_RADIUS_METERS = 100

DEFAULT_NIGHT_WORK_RATE = 1.5
DEFAULT_NIGHT_WORK_START_TIME = time(22, 0)
DEFAULT_OVERTIME_RATE = 1.5
DEFAULT_REGULAR_HOURS_PER_DAY = 8.0
DEFAULT_WEEKLY_ALLOWANCE_ENABLED = True

MIN_PREMIUM_RATE = 1.0
MAX_PREMIUM_RATE = 3.0
MIN_REGULAR_HOURS_PER_DAY = 1.0
MAX_REGULAR_HOURS_PER_DAY = 12.0

FLAT_WITHHOLDING_RATE = "0.033"
DEFAULT_WEEKLY_ALLOWANCE_MIN_HOURS = 15.0
WEEKLY_ALLOWANCE_DAILY_FRACTION = "0.2"
# Effective rate the existing payroll rows record for FOUR_INSURANCES stores.
DEFAULT_INSURANCE_TAX_RATE = "0.0916"
