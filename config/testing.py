import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ORGANIZATION_ZONE = "Asia/Tokyo"
ALLOWED_ZONES = ["UTC", "Asia/Tokyo", "America/New_York", "Europe/London"]

DAY_ATTRIBUTION = "clock_in_day"
SKEW_TOLERANCE_SECONDS = 300

AUTO_INIT_DB = False
