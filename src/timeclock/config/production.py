import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ADMIN_CODE_HASH = os.getenv("ADMIN_CODE_HASH", "")

MAX_BREAK_MINUTES = int(os.getenv("MAX_BREAK_MINUTES", "90"))
MAX_WORK_HOURS = int(os.getenv("MAX_WORK_HOURS", "12"))
DUPLICATE_WINDOW_SECONDS = int(os.getenv("DUPLICATE_WINDOW_SECONDS", "5"))
DEFAULT_HOURLY_RATE = os.getenv("DEFAULT_HOURLY_RATE", "15")
