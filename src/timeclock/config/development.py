import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, schema.sql is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# werkzeug hash of the admin code, e.g. generate_password_hash("99999999")
ADMIN_CODE_HASH = os.getenv("ADMIN_CODE_HASH", "")

MAX_BREAK_MINUTES = int(os.getenv("MAX_BREAK_MINUTES", "90"))
MAX_WORK_HOURS = int(os.getenv("MAX_WORK_HOURS", "12"))
DUPLICATE_WINDOW_SECONDS = int(os.getenv("DUPLICATE_WINDOW_SECONDS", "5"))
DEFAULT_HOURLY_RATE = os.getenv("DEFAULT_HOURLY_RATE", "15")
