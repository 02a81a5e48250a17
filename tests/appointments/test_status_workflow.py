from datetime import date, datetime

import pytest

from school_appointments.appointments.backend_appointment_repository import BackendAppointmentRepository
from school_appointments.appointments.service import NO_RETURN_SCHEDULE, AppointmentService
from school_appointments.backend.auth import InMemoryIdentityStore, PasswordAuth
from school_appointments.backend.client import BackendClient
from school_appointments.backend.memory import InMemoryGateway
from school_appointments.backend.realtime import ChangeFeed
from school_appointments.booking.service import AvailabilityService
from school_appointments.core.enums import AppointmentStatus, Role
from school_appointments.core.exceptions import NotFoundError, ValidationError
from school_appointments.maintenance.backend_maintenance_repository import (
    BackendAppointmentTimeRepository,
    BackendDisabledDateRepository,
)
from school_appointments.users.model import User

STAFF = User(id=1, firstname="maria", lastname="santos", role=Role.ADMIN)


class CountingGateway(InMemoryGateway):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def select(self, table, **kwargs):
        self.calls.append(("select", table))
        return super().select(table, **kwargs)

    def update(self, table, values, *, filters):
        self.calls.append(("update", table))
        return super().update(table, values, filters=filters)


@pytest.fixture
def gateway():
    return CountingGateway(ChangeFeed(), clock=lambda: datetime(2026, 10, 19, 9, 30))


@pytest.fixture
def service(gateway):
    client = BackendClient(gateway, PasswordAuth(InMemoryIdentityStore()), ChangeFeed())
    appointments = BackendAppointmentRepository(client)
    availability = AvailabilityService(
        appointments,
        BackendAppointmentTimeRepository(client),
        BackendDisabledDateRepository(client),
        today=lambda: date(2026, 10, 19),
    )
    return AppointmentService(appointments, availability, now=lambda: datetime(2026, 10, 19, 9, 30))


def test_return_without_schedule_makes_no_backend_call(gateway, service):
    gateway.insert(
        "appointments",
        [
            {
                "student_id": 1,
                "section_id": 1,
                "qrcode": "ABC123",
                "status": "Pending",
                "appointment_date": "2026-10-19",
                "appointment_time": "8 AM - 10 AM",
            }
        ],
    )
    gateway.calls.clear()

    with pytest.raises(ValidationError) as e:
        service.mark_status(1, status="return", actor=STAFF, return_date="2026-10-20")

    assert e.value.title == NO_RETURN_SCHEDULE
    assert gateway.calls == []


def test_unknown_status_is_rejected(service):
    with pytest.raises(ValidationError, match="Unknown status"):
        service.mark_status(1, status="archived", actor=STAFF)


def test_mark_completed_stamps_the_staff_name(container, student, section, book, today, staff_user):
    appointment = book(student, section, day=today)

    updated = container.appointment_service.mark_status(
        appointment.id, status=AppointmentStatus.COMPLETED, actor=staff_user, message="Released"
    )

    assert updated.status == AppointmentStatus.COMPLETED
    assert updated.staff_name == "System Administrator"
    assert updated.message == "Released"
    assert updated.updated_at == "2026-10-19 09:30:00"


def test_return_moves_the_appointment(container, student, section, book, today, staff_user):
    appointment = book(student, section, day=today)

    updated = container.appointment_service.mark_status(
        appointment.id,
        status="return",
        actor=staff_user,
        return_date="2026-10-20",
        return_time="1 PM - 3 PM",
    )

    assert updated.status == AppointmentStatus.RETURN
    assert updated.appointment_date == date(2026, 10, 20)
    assert updated.appointment_time == "1 PM - 3 PM"


def test_return_to_a_sunday_is_refused(container, student, section, book, today, staff_user):
    appointment = book(student, section, day=today)

    with pytest.raises(ValidationError) as e:
        container.appointment_service.mark_status(
            appointment.id, status="return", actor=staff_user, return_date="2026-10-25", return_time="1 PM - 3 PM"
        )

    assert e.value.title == "Invalid Date"
    assert container.appointments_repo.get_by_id(appointment.id).status == AppointmentStatus.PENDING


def test_return_options_leave_out_the_appointment_itself(container, student, section, book, today):
    appointment = book(student, section, day=today)
    container.settings_service.update_time_max(1, max_count=1)

    options = {o.value: o for o in container.appointment_service.return_options(appointment.id, today)}

    assert options["8 AM - 10 AM"].remaining == 1


def test_mark_status_on_missing_appointment(container, staff_user):
    with pytest.raises(NotFoundError):
        container.appointment_service.mark_status(999, status="completed", actor=staff_user)


def test_available_actions(container, student, section, book, today):
    pending = book(student, section, day=today)
    later = book(student, section, day=date(2026, 10, 21))
    done = book(student, section, day=today, status="completed")

    actions = container.appointment_service.available_actions

    assert actions(pending, today=today) == [
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.RETURN,
    ]
    assert AppointmentStatus.RETURN not in actions(later, today=today)
    assert actions(done, today=today) == []


def test_find_by_qrcode_upper_cases_the_code(container, student, section, book, today):
    appointment = book(student, section, day=today)

    details = container.appointment_service.find_by_qrcode(" qr0001 ")

    assert details.appointment.id == appointment.id
    assert details.student_name == "Juan Dela Cruz"
    assert details.section_code == "BSIT 3A"


def test_find_by_qrcode_reports_unknown_codes(container):
    with pytest.raises(NotFoundError, match="ZZZZZZ was not found"):
        container.appointment_service.find_by_qrcode("zzzzzz")
    with pytest.raises(ValidationError):
        container.appointment_service.find_by_qrcode("  ")


def test_queue_groups_today_by_slot(container, student, section, book, today):
    book(student, section, day=today, time="1 PM - 3 PM")
    book(student, section, day=today, time="8 AM - 10 AM")
    book(student, section, day=date(2026, 10, 20))

    queue = container.appointment_service.queue()

    assert list(queue) == ["8 AM - 10 AM", "10 AM - 12 PM", "1 PM - 3 PM", "3 PM - 5 PM"]
    assert [len(v) for v in queue.values()] == [1, 0, 1, 0]


def test_list_on_date_filters_by_status(container, student, section, book, today):
    book(student, section, day=today)
    book(student, section, day=today, status="cancelled")

    rows = container.appointment_service.list_on_date(today, status="Pending")

    assert [d.appointment.status for d in rows] == [AppointmentStatus.PENDING]
