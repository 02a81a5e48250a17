from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Appointment, AppointmentDetails


class AppointmentRepository(Protocol):
    """Repository interface for appointments.

    Note (DIP): services depend on this interface, not on a concrete backend.
    """

    def list_all(self) -> list[Appointment]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> list[Appointment]:
        raise NotImplementedError

    def list_details_between(self, start: date, end: date) -> list[AppointmentDetails]:
        raise NotImplementedError

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        raise NotImplementedError

    def get_details(self, appointment_id: int) -> Optional[AppointmentDetails]:
        raise NotImplementedError

    def get_details_by_qrcode(self, qrcode: str) -> AppointmentDetails:
        raise NotImplementedError

    def create(self, values: dict) -> Appointment:
        raise NotImplementedError

    def update(self, appointment_id: int, values: dict) -> Optional[Appointment]:
        raise NotImplementedError

    def cancel_expired(self, today: date) -> int:
        raise NotImplementedError
