from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Iterable

from flask import g, jsonify, session

from .core.enums import Role


@dataclass(frozen=True)
class Capabilities:
    """What a role may see in the navigation and reach through the routes."""

    book: bool = False
    appointments: bool = False
    scan: bool = False
    maintenance: bool = False
    students: bool = False
    users: bool = False
    report: bool = False
    settings: bool = False

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "appointments": self.appointments,
            "scan": self.scan,
            "maintenance": self.maintenance,
            "students": self.students,
            "users": self.users,
            "report": self.report,
            "settings": self.settings,
        }


_STAFF = dict(appointments=True, scan=True)
_SUPERADMIN = dict(_STAFF, maintenance=True, students=True, users=True, report=True, settings=True)


def capabilities(role: Role) -> Capabilities:
    if role == Role.STUDENT:
        return Capabilities(book=True)
    if role == Role.ADMIN:
        return Capabilities(**_STAFF)
    if role == Role.SUPERADMIN:
        return Capabilities(**_SUPERADMIN)
    raise ValueError(f"Unhandled role: {role!r}")


def landing_route(role: Role) -> str:
    if role == Role.STUDENT:
        return "/"
    if role in (Role.ADMIN, Role.SUPERADMIN):
        return "/admin/appointment"
    raise ValueError(f"Unhandled role: {role!r}")


def can_access_admin(role: Role) -> bool:
    return role in (Role.ADMIN, Role.SUPERADMIN)


def _deny(message: str, status: int):
    return jsonify({"success": False, "title": "Forbidden" if status == 403 else "Unauthorized", "message": message}), status


def make_guards(container):
    """Build the `login_required` / `role_required` decorators bound to `container`.

    The resolved Account is stored on `flask.g.account` for the view.
    """

    def _resolve():
        account = container.auth_service.resolve(session.get("access_token"))
        if account is None:
            session.pop("access_token", None)
        return account

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            account = _resolve()
            if account is None:
                return _deny("Please login to continue.", 401)
            g.account = account
            return view(*args, **kwargs)

        return wrapper

    def role_required(roles: Iterable[Role]):
        allowed = frozenset(roles)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                account = _resolve()
                if account is None:
                    return _deny("Please login to continue.", 401)
                if account.role not in allowed:
                    return _deny("You are not allowed to access this page.", 403)
                g.account = account
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return login_required, role_required


STAFF = (Role.ADMIN, Role.SUPERADMIN)
SUPERADMIN_ONLY = (Role.SUPERADMIN,)
STUDENT_ONLY = (Role.STUDENT,)
