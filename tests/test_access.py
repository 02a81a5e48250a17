import pytest

from school_appointments.access import can_access_admin, capabilities, landing_route
from school_appointments.core.enums import Role


def test_student_can_only_book():
    caps = capabilities(Role.STUDENT)

    assert caps.book
    assert not any(v for k, v in caps.to_dict().items() if k != "book")
    assert landing_route(Role.STUDENT) == "/"
    assert not can_access_admin(Role.STUDENT)


def test_admin_handles_appointments_and_scan():
    caps = capabilities(Role.ADMIN)

    assert caps.appointments and caps.scan
    assert not (caps.users or caps.report or caps.settings or caps.book)
    assert landing_route(Role.ADMIN) == "/admin/appointment"


def test_superadmin_sees_every_admin_screen():
    caps = capabilities(Role.SUPERADMIN).to_dict()

    assert caps.pop("book") is False
    assert all(caps.values())
    assert can_access_admin(Role.SUPERADMIN)


def test_unknown_roles_are_not_guessed():
    with pytest.raises(ValueError):
        capabilities("guest")
    with pytest.raises(ValueError):
        landing_route("guest")
