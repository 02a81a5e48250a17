from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import coerce_date, format_date, to_appointment_date
from ..core.enums import AppointmentStatus
from ..maintenance.model import Section
from ..users.model import User


@dataclass(frozen=True)
class Appointment:
    """Domain entity: a booked slot.

    `status` is normalized on read; rows inserted by the booking flow carry
    "Pending" while staff updates write lowercase values.
    """

    id: int
    student_id: int
    section_id: int
    qrcode: str
    status: AppointmentStatus
    appointment_date: date
    appointment_time: str
    reasons: list[str] = field(default_factory=list)
    note: Optional[str] = None
    message: Optional[str] = None
    staff_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == AppointmentStatus.PENDING

    @classmethod
    def from_row(cls, row: dict) -> "Appointment":
        reasons = row.get("reasons") or []
        if isinstance(reasons, str):
            reasons = [reasons]
        return cls(
            id=int(row["id"]),
            student_id=int(row["student_id"]),
            section_id=int(row["section_id"]),
            qrcode=row.get("qrcode") or "",
            status=AppointmentStatus.parse(row.get("status") or AppointmentStatus.PENDING),
            appointment_date=coerce_date(row["appointment_date"]),
            appointment_time=row.get("appointment_time") or "",
            reasons=list(reasons),
            note=row.get("note"),
            message=row.get("message"),
            staff_name=row.get("staff_name"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "section_id": self.section_id,
            "qrcode": self.qrcode,
            "status": self.status.value,
            "status_label": self.status.label,
            "appointment_date": to_appointment_date(self.appointment_date),
            "appointment_date_label": format_date(self.appointment_date),
            "appointment_time": self.appointment_time,
            "reasons": list(self.reasons),
            "note": self.note,
            "message": self.message,
            "staff_name": self.staff_name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class AppointmentDetails:
    """An appointment with its embedded student and section rows."""

    appointment: Appointment
    user: Optional[User] = None
    section: Optional[Section] = None

    @classmethod
    def from_row(cls, row: dict) -> "AppointmentDetails":
        user = row.get("user")
        section = row.get("section")
        return cls(
            appointment=Appointment.from_row(row),
            user=User.from_row(user) if user else None,
            section=Section.from_row(section) if section else None,
        )

    @property
    def student_name(self) -> str:
        return self.user.display_name if self.user else ""

    @property
    def section_code(self) -> str:
        return self.section.code if self.section else ""

    def to_dict(self) -> dict:
        out = self.appointment.to_dict()
        out["user"] = self.user.to_dict() if self.user else None
        out["section"] = self.section.to_dict() if self.section else None
        out["student_name"] = self.student_name
        out["student_number"] = (self.user.student_id or "") if self.user else ""
        out["section_code"] = self.section_code
        return out
