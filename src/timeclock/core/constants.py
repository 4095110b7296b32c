"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SECRET_CODE_LENGTH = 8
DEFAULT_HOURLY_RATE = 15

DEFAULT_MAX_BREAK_MINUTES = 90
DEFAULT_MAX_WORK_HOURS = 12
DEFAULT_DUPLICATE_WINDOW_SECONDS = 5

DEFAULT_REPORT_DAYS = 30
DEFAULT_REQUEST_LIST_LIMIT = 200
