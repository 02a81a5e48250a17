from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import coerce_date, to_appointment_date


@dataclass(frozen=True)
class Section:
    id: int
    course: str
    year_level: str
    section: str

    @property
    def compact_code(self) -> str:
        """course + first letter of the year level + section label, e.g. BSIT1A."""
        return f"{self.course}{self.year_level[:1]}{self.section}"

    @property
    def code(self) -> str:
        return f"{self.course} {self.year_level[:1]}{self.section}"

    @classmethod
    def from_row(cls, row: dict) -> "Section":
        return cls(
            id=int(row["id"]),
            course=row.get("course") or "",
            year_level=row.get("year_level") or "",
            section=row.get("section") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "course": self.course,
            "year_level": self.year_level,
            "section": self.section,
            "code": self.code,
        }


@dataclass(frozen=True)
class Reason:
    id: int
    reason: str

    @classmethod
    def from_row(cls, row: dict) -> "Reason":
        return cls(id=int(row["id"]), reason=row.get("reason") or "")

    def to_dict(self) -> dict:
        return {"id": self.id, "reason": self.reason}


@dataclass(frozen=True)
class AppointmentTime:
    """A bookable time-slot label and its per-day capacity."""

    id: int
    time: str
    max: int

    @classmethod
    def from_row(cls, row: dict) -> "AppointmentTime":
        return cls(id=int(row["id"]), time=row.get("time") or "", max=int(row.get("max") or 0))

    def to_dict(self) -> dict:
        return {"id": self.id, "time": self.time, "max": self.max}


@dataclass(frozen=True)
class DisabledDate:
    id: int
    date: date
    description: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "DisabledDate":
        return cls(id=int(row["id"]), date=coerce_date(row["date"]), description=row.get("description"))

    def to_dict(self) -> dict:
        return {"id": self.id, "date": to_appointment_date(self.date), "description": self.description}
