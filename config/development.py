import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Payroll knobs. Rates are strings so they reach Decimal without float noise.
FLAT_WITHHOLDING_RATE = os.getenv("FLAT_WITHHOLDING_RATE", "0.033")
INSURANCE_TAX_RATE = os.getenv("INSURANCE_TAX_RATE", "0.0916")
WEEKLY_ALLOWANCE_MIN_HOURS = float(os.getenv("WEEKLY_ALLOWANCE_MIN_HOURS", "15"))
DEFAULT_STORE_RADIUS_METERS = int(os.getenv("DEFAULT_STORE_RADIUS_METERS", "100"))
