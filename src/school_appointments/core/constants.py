"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ROW_SIZE = 50
AUTO_CANCEL_INTERVAL_SECONDS = 10
BOOKING_WINDOW_MONTHS = 3
QRCODE_LENGTH = 6
DEFAULT_SLOT_MAX = 10
MIN_PASSWORD_LENGTH = 6
DEFAULT_ACCOUNT_PASSWORD = "12345678"
NAME_MAX_LENGTH = 10

TIME_SLOT_LABELS = (
    "8 AM - 10 AM",
    "10 AM - 12 PM",
    "1 PM - 3 PM",
    "3 PM - 5 PM",
)

COURSES = {
    "BSIT": "Bachelor of Science in Information Technology",
    "BSCS": "Bachelor of Science in Computer Science",
    "BSED": "Bachelor of Science in Education",
    "BSA": "Bachelor of Science in Accountancy",
    "BSCRIM": "Bachelor of Science in Criminology",
}

YEAR_LEVELS = ("1st Year", "2nd Year", "3rd Year", "4th Year")

PROPER_CASE_EXCLUDED_WORDS = ("of", "in", "and", "the", "on")

STUDENT_CANCEL_STAFF_NAME = "You canceled this appointment."
STUDENT_CANCEL_MESSAGE = "Cancelled"

# Table names in the backend.
T_USERS = "users"
T_SECTIONS = "sections"
T_APPOINTMENTS = "appointments"
T_REASONS = "reasons"
T_APPOINTMENT_TIME = "appointment_time"
T_DISABLED_DATES = "disabled_dates"
