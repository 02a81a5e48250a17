from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..appointments.model import Appointment
from ..common.datetime_utils import add_months, coerce_date
from ..core.constants import BOOKING_WINDOW_MONTHS
from ..maintenance.model import AppointmentTime, DisabledDate

NO_DESCRIPTION = "No Description"
OWN_PENDING_HINT = "You already have an appointment here."

SUNDAY = 6


@dataclass(frozen=True)
class SlotOption:
    label: str
    value: str
    remaining: int
    disabled: bool

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value, "remaining": self.remaining, "disabled": self.disabled}


class AvailabilityCalendar:
    """Which days and time slots can be picked for a booking.

    A day is excluded when it is a Sunday, a disabled date, or (when
    `student_id` is given) a day on which that student already has a
    pending appointment. Selectable days also lie within
    [today, today + window_months].
    """

    def __init__(
        self,
        disabled_dates: Iterable[DisabledDate],
        appointments: Iterable[Appointment],
        times: Iterable[AppointmentTime],
        *,
        today: date,
        student_id: Optional[int] = None,
        window_months: int = BOOKING_WINDOW_MONTHS,
    ):
        self.disabled_dates = list(disabled_dates)
        self.appointments = list(appointments)
        self.times = list(times)
        self.today = today
        self.student_id = student_id
        self.window_months = window_months

        self._disabled = {d.date: d for d in self.disabled_dates}
        self._own_pending = {
            a.appointment_date
            for a in self.appointments
            if student_id is not None and a.student_id == student_id and a.is_pending
        }

    @property
    def min_date(self) -> date:
        return self.today

    @property
    def max_date(self) -> date:
        return add_months(self.today, self.window_months)

    def is_excluded(self, day) -> bool:
        day = coerce_date(day)
        return day.weekday() == SUNDAY or day in self._disabled or day in self._own_pending

    def in_window(self, day) -> bool:
        day = coerce_date(day)
        return self.min_date <= day <= self.max_date

    def is_selectable(self, day) -> bool:
        return self.in_window(day) and not self.is_excluded(day)

    def day_hint(self, day) -> Optional[str]:
        day = coerce_date(day)
        disabled = self._disabled.get(day)
        if disabled is not None:
            return disabled.description or NO_DESCRIPTION
        if day in self._own_pending:
            return OWN_PENDING_HINT
        return None

    def selectable_days(self) -> list[date]:
        out = []
        day = self.min_date
        while day <= self.max_date:
            if not self.is_excluded(day):
                out.append(day)
            day += timedelta(days=1)
        return out

    def hints(self) -> dict[date, str]:
        """day_hint for every day in the window that has one."""
        out = {}
        day = self.min_date
        while day <= self.max_date:
            hint = self.day_hint(day)
            if hint:
                out[day] = hint
            day += timedelta(days=1)
        return out

    def booked_counts(self, day) -> Counter:
        """Appointments of every student on `day`, per time-slot label."""
        day = coerce_date(day)
        return Counter(a.appointment_time for a in self.appointments if a.appointment_date == day)

    def time_options(self, day) -> list[SlotOption]:
        counts = self.booked_counts(day)
        options = []
        for slot in self.times:
            remaining = slot.max - counts.get(slot.time, 0)
            options.append(
                SlotOption(
                    label=f"{slot.time} ({remaining})",
                    value=slot.time,
                    remaining=remaining,
                    disabled=remaining <= 0,
                )
            )
        return options

    def is_time_available(self, day, value: str) -> bool:
        return any(o.value == value and not o.disabled for o in self.time_options(day))

    def for_return(self) -> "AvailabilityCalendar":
        """Same rules without the owner's pending-date exclusion."""
        return AvailabilityCalendar(
            self.disabled_dates,
            self.appointments,
            self.times,
            today=self.today,
            window_months=self.window_months,
        )
