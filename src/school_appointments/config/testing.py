import os

SECRET_KEY = "test-secret"

BACKEND = "memory"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "appointment_test_db"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = True

ROW_SIZE = 50

# Tests drive the sweep by hand.
AUTO_CANCEL_ENABLED = False
AUTO_CANCEL_INTERVAL_SECONDS = 10

LIVE_DATA_ENABLED = False

PASSWORD_RESET_REDIRECT = "http://localhost/forgot/reset"

ADMIN_EMAIL = "admin@school.test"
ADMIN_PASSWORD = "admin123"
