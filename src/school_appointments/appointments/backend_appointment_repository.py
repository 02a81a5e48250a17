from __future__ import annotations

from datetime import date
from typing import Optional

from ..backend.client import BackendClient
from ..backend.gateway import Embed
from ..core.constants import T_APPOINTMENTS, T_SECTIONS, T_USERS
from ..core.enums import AppointmentStatus
from .model import Appointment, AppointmentDetails
from .repository import AppointmentRepository

USER_EMBED = Embed("user", T_USERS, "student_id")
SECTION_EMBED = Embed("section", T_SECTIONS, "section_id")

# Bookings are inserted as "Pending"; staff resets write "pending".
PENDING_VALUES = (AppointmentStatus.PENDING.value, AppointmentStatus.PENDING.label)


class BackendAppointmentRepository(AppointmentRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_all(self) -> list[Appointment]:
        rows = self._client.table(T_APPOINTMENTS).select().order("created_at", ascending=False).execute()
        return [Appointment.from_row(r) for r in rows]

    def list_for_student(self, student_id: int) -> list[Appointment]:
        rows = (
            self._client.table(T_APPOINTMENTS)
            .select()
            .eq("student_id", int(student_id))
            .order("created_at", ascending=False)
            .execute()
        )
        return [Appointment.from_row(r) for r in rows]

    def list_details_between(self, start: date, end: date) -> list[AppointmentDetails]:
        rows = (
            self._client.table(T_APPOINTMENTS)
            .select(USER_EMBED, SECTION_EMBED)
            .gte("appointment_date", start)
            .lte("appointment_date", end)
            .order("appointment_date")
            .order("created_at")
            .execute()
        )
        return [AppointmentDetails.from_row(r) for r in rows]

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        rows = self._client.table(T_APPOINTMENTS).select().eq("id", int(appointment_id)).execute()
        return Appointment.from_row(rows[0]) if rows else None

    def get_details(self, appointment_id: int) -> Optional[AppointmentDetails]:
        rows = (
            self._client.table(T_APPOINTMENTS)
            .select(USER_EMBED, SECTION_EMBED)
            .eq("id", int(appointment_id))
            .execute()
        )
        return AppointmentDetails.from_row(rows[0]) if rows else None

    def get_details_by_qrcode(self, qrcode: str) -> AppointmentDetails:
        row = (
            self._client.table(T_APPOINTMENTS)
            .select(USER_EMBED, SECTION_EMBED)
            .eq("qrcode", qrcode)
            .single()
            .execute()
        )
        return AppointmentDetails.from_row(row)

    def create(self, values: dict) -> Appointment:
        return Appointment.from_row(self._client.table(T_APPOINTMENTS).insert(values).execute()[0])

    def update(self, appointment_id: int, values: dict) -> Optional[Appointment]:
        rows = self._client.table(T_APPOINTMENTS).update(values).eq("id", int(appointment_id)).execute()
        return Appointment.from_row(rows[0]) if rows else None

    def cancel_expired(self, today: date) -> int:
        rows = (
            self._client.table(T_APPOINTMENTS)
            .update({"status": AppointmentStatus.CANCELLED.value})
            .lt("appointment_date", today)
            .in_("status", PENDING_VALUES)
            .execute()
        )
        return len(rows)
