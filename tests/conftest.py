from __future__ import annotations

import itertools
from datetime import date, datetime

import pytest

from school_appointments.config import Settings
from school_appointments.config import testing as testing_settings
from school_appointments.container import build_container
from school_appointments.main import create_app

# A Monday; the next Sunday is 2026-10-25.
NOW = datetime(2026, 10, 19, 9, 30, 0)
TODAY = NOW.date()


def frozen_now() -> datetime:
    return NOW


@pytest.fixture
def settings() -> Settings:
    return Settings.from_module(testing_settings)


@pytest.fixture
def container(settings):
    c = build_container(settings=settings, now=frozen_now)
    yield c
    c.live.unmount()
    c.sweeper.stop()


@pytest.fixture
def app(container):
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_credentials(settings):
    return {"email": settings.admin_email, "password": settings.admin_password}


@pytest.fixture
def section(container):
    return container.maintenance_service.add_section(course="BSIT", year_level="3rd Year", section="A")


@pytest.fixture
def student(container):
    return container.auth_service.register(
        email="juan@school.test",
        password="secret123",
        firstname="Juan",
        lastname="Dela Cruz",
        gender="Male",
        student_id="GC-482913",
    )


@pytest.fixture
def staff_user(container, admin_credentials):
    return container.auth_service.login(admin_credentials["email"], admin_credentials["password"]).user


@pytest.fixture
def book(container):
    """Insert an appointment straight through the repository (no flow)."""
    codes = itertools.count(1)

    def _book(student, section, *, day: date, time: str = "8 AM - 10 AM", status: str = "Pending"):
        return container.appointments_repo.create(
            {
                "student_id": student.id,
                "section_id": section.id,
                "reasons": ["Enrollment"],
                "note": "",
                "appointment_date": day.isoformat(),
                "appointment_time": time,
                "qrcode": f"QR{next(codes):04d}",
                "status": status,
            }
        )

    return _book


@pytest.fixture
def today() -> date:
    return TODAY
