from __future__ import annotations

from typing import Optional, Protocol

from .model import AppointmentTime, DisabledDate, Reason, Section


class SectionRepository(Protocol):
    def list_all(self) -> list[Section]:
        raise NotImplementedError

    def get_by_id(self, section_id: int) -> Optional[Section]:
        raise NotImplementedError

    def create(self, *, course: str, year_level: str, section: str) -> Section:
        raise NotImplementedError

    def rename(self, section_id: int, *, section: str) -> Optional[Section]:
        raise NotImplementedError

    def delete_by_id(self, section_id: int) -> bool:
        raise NotImplementedError


class ReasonRepository(Protocol):
    def list_all(self) -> list[Reason]:
        raise NotImplementedError

    def create(self, *, reason: str) -> Reason:
        raise NotImplementedError

    def update(self, reason_id: int, *, reason: str) -> Optional[Reason]:
        raise NotImplementedError

    def delete_by_id(self, reason_id: int) -> bool:
        raise NotImplementedError


class AppointmentTimeRepository(Protocol):
    def list_all(self) -> list[AppointmentTime]:
        raise NotImplementedError

    def set_max(self, time_id: int, *, max_count: int) -> Optional[AppointmentTime]:
        raise NotImplementedError


class DisabledDateRepository(Protocol):
    def list_all(self) -> list[DisabledDate]:
        raise NotImplementedError

    def create(self, *, day: str, description: Optional[str]) -> DisabledDate:
        raise NotImplementedError

    def update(self, date_id: int, *, day: str, description: Optional[str]) -> Optional[DisabledDate]:
        raise NotImplementedError

    def delete_by_id(self, date_id: int) -> bool:
        raise NotImplementedError
