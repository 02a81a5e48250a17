import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "memory" keeps every table in process; "mysql" uses DB_CONFIG below.
BACKEND = os.getenv("BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "appointment_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed time slots and the superadmin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

ROW_SIZE = int(os.getenv("ROW_SIZE", "50"))

AUTO_CANCEL_ENABLED = bool(int(os.getenv("AUTO_CANCEL_ENABLED", "1")))
AUTO_CANCEL_INTERVAL_SECONDS = float(os.getenv("AUTO_CANCEL_INTERVAL_SECONDS", "10"))

LIVE_DATA_ENABLED = bool(int(os.getenv("LIVE_DATA_ENABLED", "1")))

PASSWORD_RESET_REDIRECT = os.getenv("PASSWORD_RESET_REDIRECT", "http://localhost:5000/forgot/reset")

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@school.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
