from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import coerce_date, to_appointment_date
from ..common.text import to_proper
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a row of the users table.

    Note: `email` is not stored with the row; it is joined from the auth
    identity list and stays "" when unresolved.
    """

    id: int
    firstname: str
    lastname: str
    role: Role
    status: bool = True
    gender: Optional[str] = None
    address: Optional[str] = None
    birthday: Optional[date] = None
    student_id: Optional[str] = None
    auth_id: Optional[str] = None
    email: str = ""
    created_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

    @property
    def display_name(self) -> str:
        return to_proper(self.full_name)

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @classmethod
    def from_row(cls, row: dict) -> "User":
        return cls(
            id=int(row["id"]),
            firstname=row.get("firstname") or "",
            lastname=row.get("lastname") or "",
            role=Role(row.get("role") or Role.STUDENT.value),
            status=bool(row.get("status", True)),
            gender=row.get("gender"),
            address=row.get("address"),
            birthday=coerce_date(row.get("birthday")),
            student_id=row.get("student_id"),
            auth_id=row.get("auth_id"),
            email=row.get("email") or "",
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "role": self.role.value,
            "status": self.status,
            "gender": self.gender,
            "address": self.address,
            "birthday": to_appointment_date(self.birthday) if self.birthday else None,
            "student_id": self.student_id,
            "auth_id": self.auth_id,
            "email": self.email,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class Account:
    """What we keep in the Flask session after login."""

    user: User
    access_token: str

    @property
    def role(self) -> Role:
        return self.user.role
