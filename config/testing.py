import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_test_db"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

LOG_LEVEL = "WARNING"

FLAT_WITHHOLDING_RATE = "0.033"
INSURANCE_TAX_RATE = "0.0916"
WEEKLY_ALLOWANCE_MIN_HOURS = 15.0
DEFAULT_STORE_RADIUS_METERS = 100
