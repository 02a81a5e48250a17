from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import coerce_date, to_appointment_date
from ..common.text import to_proper
from ..common.validators import require_non_empty
from ..core.constants import COURSES, YEAR_LEVELS
from ..core.exceptions import NotFoundError, ValidationError
from .model import AppointmentTime, DisabledDate, Reason, Section
from .repository import AppointmentTimeRepository, DisabledDateRepository, ReasonRepository, SectionRepository

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Use cases: sections and reasons (admin maintenance screen)."""

    def __init__(self, sections: SectionRepository, reasons: ReasonRepository):
        self._sections = sections
        self._reasons = reasons

    def list_sections(self) -> list[Section]:
        return self._sections.list_all()

    def get_section(self, section_id: int) -> Section:
        section = self._sections.get_by_id(section_id)
        if not section:
            raise NotFoundError("Section not found")
        return section

    def add_section(self, *, course: str, year_level: str, section: str) -> Section:
        course = require_non_empty(course, "Course")
        year_level = require_non_empty(year_level, "Year level")
        section = require_non_empty(section, "Section")
        if course not in COURSES:
            raise ValidationError(f"Unknown course: {course}")
        if year_level not in YEAR_LEVELS:
            raise ValidationError(f"Unknown year level: {year_level}")

        created = self._sections.create(course=course, year_level=year_level, section=section)
        logger.info("section added id=%s code=%s", created.id, created.code)
        return created

    def edit_section(self, section_id: int, *, section: str) -> Section:
        # Course and year level are fixed once created; only the label changes.
        updated = self._sections.rename(section_id, section=require_non_empty(section, "Section"))
        if not updated:
            raise NotFoundError("Section not found")
        return updated

    def delete_section(self, section_id: int) -> None:
        if not self._sections.delete_by_id(section_id):
            raise NotFoundError("Section not found")
        logger.info("section deleted id=%s", section_id)

    def list_reasons(self) -> list[Reason]:
        return self._reasons.list_all()

    def add_reason(self, *, reason: str) -> Reason:
        return self._reasons.create(reason=to_proper(require_non_empty(reason, "Reason")))

    def edit_reason(self, reason_id: int, *, reason: str) -> Reason:
        updated = self._reasons.update(reason_id, reason=to_proper(require_non_empty(reason, "Reason")))
        if not updated:
            raise NotFoundError("Reason not found")
        return updated

    def delete_reason(self, reason_id: int) -> None:
        if not self._reasons.delete_by_id(reason_id):
            raise NotFoundError("Reason not found")


class SettingsService:
    """Use cases: slot capacities and disabled dates (admin settings screen)."""

    def __init__(self, times: AppointmentTimeRepository, disabled_dates: DisabledDateRepository):
        self._times = times
        self._disabled_dates = disabled_dates

    def list_times(self) -> list[AppointmentTime]:
        return self._times.list_all()

    def update_time_max(self, time_id: int, *, max_count) -> AppointmentTime:
        try:
            max_count = int(max_count)
        except (TypeError, ValueError):
            raise ValidationError("Max must be a number.")
        if max_count < 0:
            raise ValidationError("Max cannot be negative.")

        updated = self._times.set_max(time_id, max_count=max_count)
        if not updated:
            raise NotFoundError("Appointment time not found")
        logger.info("slot capacity time=%s max=%s", updated.time, updated.max)
        return updated

    def list_disabled_dates(self) -> list[DisabledDate]:
        return self._disabled_dates.list_all()

    def _require_day(self, value) -> date:
        if not value:
            raise ValidationError("This date is required.")
        try:
            return coerce_date(value)
        except ValueError:
            raise ValidationError("This date is invalid.")

    def add_disabled_date(self, *, day, description: Optional[str] = None) -> DisabledDate:
        day = self._require_day(day)
        if any(d.date == day for d in self._disabled_dates.list_all()):
            raise ValidationError("The selected date already exists.")
        created = self._disabled_dates.create(day=to_appointment_date(day), description=(description or "").strip() or None)
        logger.info("disabled date added %s", created.date)
        return created

    def edit_disabled_date(self, date_id: int, *, day, description: Optional[str] = None) -> DisabledDate:
        day = self._require_day(day)
        updated = self._disabled_dates.update(
            date_id, day=to_appointment_date(day), description=(description or "").strip() or None
        )
        if not updated:
            raise NotFoundError("Disabled date not found")
        return updated

    def delete_disabled_date(self, date_id: int) -> None:
        if not self._disabled_dates.delete_by_id(date_id):
            raise NotFoundError("Disabled date not found")
