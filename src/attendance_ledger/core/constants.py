"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ORGANIZATION_ZONE = "Asia/Tokyo"
DEFAULT_ALLOWED_ZONES = (
    "UTC",
    "Asia/Tokyo",
    "Asia/Ho_Chi_Minh",
    "Asia/Seoul",
    "Europe/London",
    "Europe/Berlin",
    "America/New_York",
    "America/Los_Angeles",
    "Australia/Sydney",
)

DEFAULT_SKEW_TOLERANCE_SECONDS = 300

MAX_NAME_LENGTH = 100
MAX_EMAIL_LENGTH = 255
MAX_BUCKET_RANGE_DAYS = 366

# Days fetched on each side of a summary day so shifts crossing midnight are seen whole.
RECONCILE_WINDOW_DAYS = 1
