import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

ADMIN_CODE_HASH = ""

MAX_BREAK_MINUTES = 90
MAX_WORK_HOURS = 12
DUPLICATE_WINDOW_SECONDS = 5
DEFAULT_HOURLY_RATE = "15"
