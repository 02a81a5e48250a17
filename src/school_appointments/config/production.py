import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

BACKEND = os.getenv("BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "appointment_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ROW_SIZE = int(os.getenv("ROW_SIZE", "50"))

AUTO_CANCEL_ENABLED = bool(int(os.getenv("AUTO_CANCEL_ENABLED", "1")))
AUTO_CANCEL_INTERVAL_SECONDS = float(os.getenv("AUTO_CANCEL_INTERVAL_SECONDS", "10"))

LIVE_DATA_ENABLED = bool(int(os.getenv("LIVE_DATA_ENABLED", "1")))

PASSWORD_RESET_REDIRECT = os.getenv("PASSWORD_RESET_REDIRECT", "")

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
