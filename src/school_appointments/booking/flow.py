from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import coerce_date, to_appointment_date
from ..core.enums import BookingStep
from ..core.exceptions import ValidationError
from ..users.model import User
from .availability import AvailabilityCalendar


class BookingFlow:
    """Linear four-step booking wizard.

    Identity -> ReasonAndSection -> DateAndTime -> Confirm, one step at a
    time. A refused transition raises ValidationError and leaves the flow
    as it was.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Clear all step data and go back to the first step."""
        self.step = BookingStep.IDENTITY
        self.account: Optional[User] = None
        self.reasons: list[str] = []
        self.section_id: Optional[int] = None
        self.note: str = ""
        self.appointment_date: Optional[date] = None
        self.appointment_time: Optional[str] = None

    # --- working data -----------------------------------------------------

    def set_account(self, user: Optional[User]) -> None:
        self.account = user

    def set_reasons(self, reasons: Iterable[str]) -> None:
        self.reasons = [r for r in (str(x).strip() for x in reasons) if r]

    def set_section(self, section_id: Optional[int]) -> None:
        self.section_id = int(section_id) if section_id not in (None, "") else None

    def set_note(self, note: Optional[str]) -> None:
        self.note = note or ""

    def select_date(self, day, calendar: AvailabilityCalendar) -> date:
        day = coerce_date(day)
        if day is None or not calendar.is_selectable(day):
            raise ValidationError("The selected date is not available.", title="Invalid Date")
        if day != self.appointment_date:
            self.appointment_time = None
        self.appointment_date = day
        return day

    def select_time(self, value: str, calendar: AvailabilityCalendar) -> str:
        if self.appointment_date is None:
            raise ValidationError("Please select a date first.", title="Invalid Time")
        if not calendar.is_time_available(self.appointment_date, value):
            raise ValidationError("The selected time is full or does not exist.", title="Invalid Time")
        self.appointment_time = value
        return value

    # --- transitions ------------------------------------------------------

    def _check_can_leave(self, step: BookingStep) -> None:
        if step == BookingStep.IDENTITY:
            if self.account is None:
                raise ValidationError("Please get your account information first.", title="No Account")
            if not self.account.status:
                raise ValidationError("Your account is disabled.", title="Account is Disabled")
        elif step == BookingStep.REASON_AND_SECTION:
            if not self.reasons or self.section_id is None:
                raise ValidationError("Please select at least one reason and your section.", title="Incomplete")
        elif step == BookingStep.DATE_AND_TIME:
            if self.appointment_date is None or not self.appointment_time:
                raise ValidationError("Please select a date and time.", title="Incomplete")
        else:
            raise ValidationError("This is the last step.", title="Incomplete")

    def next(self) -> BookingStep:
        self._check_can_leave(self.step)
        self.step = BookingStep(self.step + 1)
        return self.step

    def back(self) -> BookingStep:
        if self.step == BookingStep.IDENTITY:
            raise ValidationError("This is the first step.", title="Invalid")
        self.step = BookingStep(self.step - 1)
        return self.step

    def require_confirm(self) -> None:
        if self.step != BookingStep.CONFIRM:
            raise ValidationError("Please complete every step first.", title="Incomplete")
        for step in (BookingStep.IDENTITY, BookingStep.REASON_AND_SECTION, BookingStep.DATE_AND_TIME):
            self._check_can_leave(step)

    # --- session persistence ----------------------------------------------

    def to_dict(self) -> dict:
        return {
            "step": int(self.step),
            "account": self.account.to_dict() if self.account else None,
            "reasons": list(self.reasons),
            "section_id": self.section_id,
            "note": self.note,
            "appointment_date": to_appointment_date(self.appointment_date) if self.appointment_date else None,
            "appointment_time": self.appointment_time,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "BookingFlow":
        flow = cls()
        if not data:
            return flow
        flow.step = BookingStep(int(data.get("step") or 0))
        flow.account = User.from_row(data["account"]) if data.get("account") else None
        flow.reasons = list(data.get("reasons") or [])
        flow.section_id = data.get("section_id")
        flow.note = data.get("note") or ""
        flow.appointment_date = coerce_date(data.get("appointment_date"))
        flow.appointment_time = data.get("appointment_time")
        return flow
