from __future__ import annotations

from typing import Optional

from ..backend.client import BackendClient
from ..core.constants import T_APPOINTMENT_TIME, T_DISABLED_DATES, T_REASONS, T_SECTIONS
from .model import AppointmentTime, DisabledDate, Reason, Section
from .repository import AppointmentTimeRepository, DisabledDateRepository, ReasonRepository, SectionRepository


class BackendSectionRepository(SectionRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_all(self) -> list[Section]:
        return [Section.from_row(r) for r in self._client.table(T_SECTIONS).select().order("id").execute()]

    def get_by_id(self, section_id: int) -> Optional[Section]:
        rows = self._client.table(T_SECTIONS).select().eq("id", int(section_id)).execute()
        return Section.from_row(rows[0]) if rows else None

    def create(self, *, course: str, year_level: str, section: str) -> Section:
        rows = (
            self._client.table(T_SECTIONS)
            .insert({"course": course, "year_level": year_level, "section": section})
            .execute()
        )
        return Section.from_row(rows[0])

    def rename(self, section_id: int, *, section: str) -> Optional[Section]:
        rows = self._client.table(T_SECTIONS).update({"section": section}).eq("id", int(section_id)).execute()
        return Section.from_row(rows[0]) if rows else None

    def delete_by_id(self, section_id: int) -> bool:
        return bool(self._client.table(T_SECTIONS).delete().eq("id", int(section_id)).execute())


class BackendReasonRepository(ReasonRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_all(self) -> list[Reason]:
        return [Reason.from_row(r) for r in self._client.table(T_REASONS).select().order("id").execute()]

    def create(self, *, reason: str) -> Reason:
        return Reason.from_row(self._client.table(T_REASONS).insert({"reason": reason}).execute()[0])

    def update(self, reason_id: int, *, reason: str) -> Optional[Reason]:
        rows = self._client.table(T_REASONS).update({"reason": reason}).eq("id", int(reason_id)).execute()
        return Reason.from_row(rows[0]) if rows else None

    def delete_by_id(self, reason_id: int) -> bool:
        return bool(self._client.table(T_REASONS).delete().eq("id", int(reason_id)).execute())


class BackendAppointmentTimeRepository(AppointmentTimeRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_all(self) -> list[AppointmentTime]:
        rows = self._client.table(T_APPOINTMENT_TIME).select().order("id").execute()
        return [AppointmentTime.from_row(r) for r in rows]

    def set_max(self, time_id: int, *, max_count: int) -> Optional[AppointmentTime]:
        rows = (
            self._client.table(T_APPOINTMENT_TIME)
            .update({"max": int(max_count)})
            .eq("id", int(time_id))
            .execute()
        )
        return AppointmentTime.from_row(rows[0]) if rows else None


class BackendDisabledDateRepository(DisabledDateRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_all(self) -> list[DisabledDate]:
        rows = self._client.table(T_DISABLED_DATES).select().order("date").execute()
        return [DisabledDate.from_row(r) for r in rows]

    def create(self, *, day: str, description: Optional[str]) -> DisabledDate:
        rows = self._client.table(T_DISABLED_DATES).insert({"date": day, "description": description}).execute()
        return DisabledDate.from_row(rows[0])

    def update(self, date_id: int, *, day: str, description: Optional[str]) -> Optional[DisabledDate]:
        rows = (
            self._client.table(T_DISABLED_DATES)
            .update({"date": day, "description": description})
            .eq("id", int(date_id))
            .execute()
        )
        return DisabledDate.from_row(rows[0]) if rows else None

    def delete_by_id(self, date_id: int) -> bool:
        return bool(self._client.table(T_DISABLED_DATES).delete().eq("id", int(date_id)).execute())
