from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """User roles used for route guards and capability gating."""

    STUDENT = "student"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle status as stored in the appointments table."""

    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RETURN = "return"

    @classmethod
    def parse(cls, value: "str | AppointmentStatus") -> "AppointmentStatus":
        # Bookings are inserted as "Pending", staff updates write lowercase.
        if isinstance(value, AppointmentStatus):
            return value
        return cls(str(value).strip().lower())

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ChangeType(str, Enum):
    """Change-feed event kinds."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class BookingStep(IntEnum):
    IDENTITY = 0
    REASON_AND_SECTION = 1
    DATE_AND_TIME = 2
    CONFIRM = 3


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class InsertPosition(str, Enum):
    """Where a realtime INSERT lands in a local collection."""

    APPEND = "append"
    PREPEND = "prepend"


class TableState(str, Enum):
    ROWS = "rows"
    NO_DATA = "no_data"
    NO_MATCH = "no_match"
    LOADING = "loading"
    ERROR = "error"
