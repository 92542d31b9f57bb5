import os

from config import env_flag, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "attendance"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ORGANIZATION_ZONE = os.getenv("ORGANIZATION_ZONE", "Asia/Tokyo")
ALLOWED_ZONES = env_list("ALLOWED_ZONES", "UTC,Asia/Tokyo")

DAY_ATTRIBUTION = os.getenv("DAY_ATTRIBUTION", "clock_in_day")
SKEW_TOLERANCE_SECONDS = int(os.getenv("SKEW_TOLERANCE_SECONDS", "300"))

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
