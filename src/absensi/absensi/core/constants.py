"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Business rules are evaluated in this zone regardless of the host timezone.
DEFAULT_LOCAL_TIMEZONE = "Asia/Jakarta"

DEFAULT_CLOCK_IN_START = "07:00"
DEFAULT_CLOCK_IN_END = "09:00"
DEFAULT_LATE_THRESHOLD = "08:00"
DEFAULT_CLOCK_OUT_START = "17:00"
DEFAULT_CLOCK_OUT_END = "21:00"
DEFAULT_AUTO_CLOCK_OUT_TIME = "23:59"

DEFAULT_MAX_RADIUS_METERS = 100
EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_MAX_LEAVE_DAYS = 12
DEFAULT_HISTORY_LIMIT = 30
MAX_PERIOD_DAYS = 366

AUTO_CLOCK_OUT_NOTE = "[System] Auto Clock-Out"
