from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date
from typing import Iterable, Optional

from ..booking.service import AvailabilityService
from ..common.datetime_utils import coerce_date, now_local, to_appointment_date
from ..core.constants import STUDENT_CANCEL_MESSAGE, STUDENT_CANCEL_STAFF_NAME, TIME_SLOT_LABELS
from ..core.enums import AppointmentStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from .model import Appointment, AppointmentDetails
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

NO_RETURN_SCHEDULE = "No Selected Return Date and Time"


def group_by_slot(rows: Iterable[AppointmentDetails]) -> "OrderedDict[str, list[AppointmentDetails]]":
    groups: "OrderedDict[str, list[AppointmentDetails]]" = OrderedDict((t, []) for t in TIME_SLOT_LABELS)
    for details in rows:
        groups.setdefault(details.appointment.appointment_time, []).append(details)
    return groups


def _parse_status(value) -> AppointmentStatus:
    try:
        return AppointmentStatus.parse(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value}")


class AppointmentService:
    """Use cases: staff status workflow, scan lookup, queue and student self-service."""

    def __init__(self, appointments: AppointmentRepository, availability: AvailabilityService, *, now=now_local):
        self._appointments = appointments
        self._availability = availability
        self._now = now

    def _stamp(self) -> str:
        return self._now().isoformat(sep=" ", timespec="seconds")

    def _require(self, appointment_id: int) -> Appointment:
        appointment = self._appointments.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    # --- staff ------------------------------------------------------------

    def find_by_qrcode(self, qrcode: str) -> AppointmentDetails:
        code = (qrcode or "").strip().upper()
        if not code:
            raise ValidationError("QR code is required.")
        try:
            return self._appointments.get_details_by_qrcode(code)
        except NotFoundError:
            raise NotFoundError(f"The appointment with QR code: {code} was not found.")

    def get_details(self, appointment_id: int) -> AppointmentDetails:
        details = self._appointments.get_details(appointment_id)
        if not details:
            raise NotFoundError("Appointment not found")
        return details

    def list_on_date(self, day: Optional[date] = None, *, status=None) -> list[AppointmentDetails]:
        day = day or self._availability.today()
        rows = self._appointments.list_details_between(day, day)
        if status:
            wanted = _parse_status(status)
            rows = [d for d in rows if d.appointment.status == wanted]
        return rows

    def queue(self, day: Optional[date] = None) -> "OrderedDict[str, list[AppointmentDetails]]":
        """Today's appointments grouped by time-slot label, in slot order."""
        return group_by_slot(self.list_on_date(day))

    @staticmethod
    def available_actions(appointment: Appointment, *, today: Optional[date] = None) -> list[AppointmentStatus]:
        """Status buttons the screens enable: none once completed or cancelled.

        Writes are not gated on this; concurrent staff updates are last-write-wins.
        """
        if appointment.status.is_terminal:
            return []
        actions = [s for s in AppointmentStatus if s != appointment.status and s != AppointmentStatus.RETURN]
        if today is None or appointment.appointment_date == today:
            actions.append(AppointmentStatus.RETURN)
        return actions

    def return_options(self, appointment_id: int, day) -> list:
        """Slot options for a return visit of `appointment_id` on `day`."""
        calendar = self._availability.calendar(exclude_id=appointment_id)
        return calendar.time_options(day)

    def mark_status(
        self,
        appointment_id: int,
        *,
        status,
        actor: User,
        message: Optional[str] = None,
        return_date=None,
        return_time: Optional[str] = None,
    ) -> Appointment:
        status = _parse_status(status)
        if status == AppointmentStatus.RETURN and (not return_date or not return_time):
            raise ValidationError("Please select return date and time first.", title=NO_RETURN_SCHEDULE)

        current = self._require(appointment_id)

        values = {
            "status": status.value,
            "message": message or "",
            "staff_name": actor.display_name if actor else None,
            "updated_at": self._stamp(),
        }
        if status == AppointmentStatus.RETURN:
            day = coerce_date(return_date)
            calendar = self._availability.calendar(exclude_id=appointment_id).for_return()
            if not calendar.is_selectable(day):
                raise ValidationError("The selected return date is not available.", title="Invalid Date")
            if not calendar.is_time_available(day, return_time):
                raise ValidationError("The selected return time is already full.", title="Invalid Time")
            values["appointment_date"] = to_appointment_date(day)
            values["appointment_time"] = return_time

        updated = self._appointments.update(appointment_id, values)
        if not updated:
            raise NotFoundError("Appointment not found")
        logger.info(
            "appointment status id=%s %s -> %s by %s",
            appointment_id,
            current.status.value,
            status.value,
            values["staff_name"],
        )
        return updated

    def cancel_expired(self, today: Optional[date] = None) -> int:
        """Cancel pending appointments dated before `today`. Safe to repeat."""
        count = self._appointments.cancel_expired(today or self._availability.today())
        if count:
            logger.info("auto-cancelled %d expired appointment(s)", count)
        return count

    # --- student ----------------------------------------------------------

    def history(self, student_id: int) -> list[Appointment]:
        return self._appointments.list_for_student(student_id)

    def _own_pending(self, appointment_id: int, student: User) -> Appointment:
        appointment = self._require(appointment_id)
        if appointment.student_id != student.id:
            raise AuthorizationError("This appointment belongs to another student.")
        if not appointment.is_pending:
            raise ValidationError("Only pending appointments can be changed.")
        return appointment

    def cancel_by_student(self, appointment_id: int, *, student: User) -> Appointment:
        self._own_pending(appointment_id, student)
        updated = self._appointments.update(
            appointment_id,
            {
                "status": AppointmentStatus.CANCELLED.value,
                "staff_name": STUDENT_CANCEL_STAFF_NAME,
                "message": STUDENT_CANCEL_MESSAGE,
                "updated_at": self._stamp(),
            },
        )
        logger.info("appointment id=%s cancelled by student id=%s", appointment_id, student.id)
        return updated

    def edit_by_student(
        self,
        appointment_id: int,
        *,
        student: User,
        section_id: int,
        reasons: Iterable[str],
        note: Optional[str],
        appointment_date,
        appointment_time: str,
    ) -> Appointment:
        self._own_pending(appointment_id, student)
        reasons = [r for r in (str(x).strip() for x in reasons or []) if r]
        if not reasons or not section_id:
            raise ValidationError("Please select at least one reason and your section.")
        if not appointment_date or not appointment_time:
            raise ValidationError("Please select a date and time.")

        day = coerce_date(appointment_date)
        calendar = self._availability.calendar(student_id=student.id, exclude_id=appointment_id)
        if not calendar.is_selectable(day):
            raise ValidationError("The selected date is not available.", title="Invalid Date")
        if not calendar.is_time_available(day, appointment_time):
            raise ValidationError("The selected time is already full.", title="Invalid Time")

        return self._appointments.update(
            appointment_id,
            {
                "section_id": int(section_id),
                "reasons": reasons,
                "note": note or "",
                "appointment_date": to_appointment_date(day),
                "appointment_time": appointment_time,
                "updated_at": self._stamp(),
            },
        )
