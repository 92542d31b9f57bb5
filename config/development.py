import os

from config import env_flag, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Reporting zone used for the day-bucket index written with every event.
ORGANIZATION_ZONE = os.getenv("ORGANIZATION_ZONE", "Asia/Tokyo")
ALLOWED_ZONES = env_list("ALLOWED_ZONES", "UTC,Asia/Tokyo,Asia/Ho_Chi_Minh,Europe/London,America/New_York")

DAY_ATTRIBUTION = os.getenv("DAY_ATTRIBUTION", "clock_in_day")
SKEW_TOLERANCE_SECONDS = int(os.getenv("SKEW_TOLERANCE_SECONDS", "300"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
