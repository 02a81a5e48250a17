from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..appointments.model import Appointment
from ..appointments.repository import AppointmentRepository
from ..common.datetime_utils import now_local, to_appointment_date, today_local
from ..common.text import generate_qrcode
from ..core.enums import AppointmentStatus
from ..core.exceptions import NotFoundError, QRCodeError, ValidationError
from ..maintenance.repository import AppointmentTimeRepository, DisabledDateRepository, SectionRepository
from .availability import AvailabilityCalendar
from .flow import BookingFlow
from .qr import render_labeled_qr

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Builds AvailabilityCalendars from the current backend rows."""

    def __init__(
        self,
        appointments: AppointmentRepository,
        times: AppointmentTimeRepository,
        disabled_dates: DisabledDateRepository,
        *,
        today: Callable[[], date] = today_local,
    ):
        self._appointments = appointments
        self._times = times
        self._disabled_dates = disabled_dates
        self._today = today

    def today(self) -> date:
        return self._today()

    def calendar(self, *, student_id: Optional[int] = None, exclude_id: Optional[int] = None) -> AvailabilityCalendar:
        appointments = [a for a in self._appointments.list_all() if a.id != exclude_id]
        return AvailabilityCalendar(
            self._disabled_dates.list_all(),
            appointments,
            self._times.list_all(),
            today=self._today(),
            student_id=student_id,
        )


@dataclass(frozen=True)
class BookingResult:
    appointment: Appointment
    png: bytes


class BookingService:
    """Use case: commit a completed BookingFlow as a new appointment."""

    def __init__(
        self,
        appointments: AppointmentRepository,
        sections: SectionRepository,
        availability: AvailabilityService,
        *,
        renderer: Callable[[str], bytes] = render_labeled_qr,
        qrcode_factory: Callable[[], str] = generate_qrcode,
        now=now_local,
    ):
        self._appointments = appointments
        self._sections = sections
        self._availability = availability
        self._renderer = renderer
        self._qrcode_factory = qrcode_factory
        self._now = now

    def calendar_for(self, flow: BookingFlow) -> AvailabilityCalendar:
        return self._availability.calendar(student_id=flow.account.id if flow.account else None)

    def commit(self, flow: BookingFlow) -> BookingResult:
        """Insert the appointment, then render its QR PNG and reset the flow.

        A backend failure leaves the flow as it was. A QR failure raises
        QRCodeError carrying the committed appointment; the row stays and the
        flow is not reset.
        """
        flow.require_confirm()
        if not self._sections.get_by_id(flow.section_id):
            raise ValidationError("The selected section no longer exists.", title="Invalid Section")

        calendar = self.calendar_for(flow)
        if not calendar.is_selectable(flow.appointment_date):
            raise ValidationError("The selected date is not available anymore.", title="Invalid Date")
        if not calendar.is_time_available(flow.appointment_date, flow.appointment_time):
            raise ValidationError("The selected time is already full.", title="Invalid Time")

        qrcode = self._qrcode_factory()
        appointment = self._appointments.create(
            {
                "student_id": flow.account.id,
                "section_id": flow.section_id,
                "reasons": list(flow.reasons),
                "note": flow.note,
                "appointment_date": to_appointment_date(flow.appointment_date),
                "appointment_time": flow.appointment_time,
                "qrcode": qrcode,
                "status": AppointmentStatus.PENDING.label,
                "updated_at": self._now().isoformat(sep=" ", timespec="seconds"),
            }
        )
        logger.info("appointment booked id=%s qrcode=%s student_id=%s", appointment.id, qrcode, appointment.student_id)

        try:
            png = self._renderer(qrcode)
        except Exception as e:
            logger.exception("QR rendering failed for committed appointment id=%s", appointment.id)
            raise QRCodeError("Failed to generate QR Code.", appointment=appointment) from e

        flow.reset()
        return BookingResult(appointment=appointment, png=png)

    def qr_png(self, appointment_id: int, *, student_id: Optional[int] = None) -> bytes:
        """Re-render the QR of an existing appointment (owner only when `student_id` is given)."""
        appointment = self._appointments.get_by_id(appointment_id)
        if not appointment or (student_id is not None and appointment.student_id != student_id):
            raise NotFoundError("Appointment not found")
        try:
            return self._renderer(appointment.qrcode)
        except Exception as e:
            logger.exception("QR rendering failed for appointment id=%s", appointment.id)
            raise QRCodeError("Failed to generate QR Code.", appointment=appointment) from e
