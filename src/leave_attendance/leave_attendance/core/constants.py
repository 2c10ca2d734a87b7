"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LIST_LIMIT = 200

# Company schedule used when nothing is configured.
DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(18, 0)
DEFAULT_TOLERANCE_MINUTES = 15

# A permission without time range takes the whole working day.
FULL_DAY_PERMISSION_HOURS = 8.0

CONFLICT_CALENDAR_DAYS = 365

MAX_OVERTIME_HOURS = 24.0
OVERTIME_ROUNDING_MINUTES = 15
