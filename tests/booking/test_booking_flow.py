from datetime import date

import pytest

from school_appointments.booking.availability import AvailabilityCalendar
from school_appointments.booking.flow import BookingFlow
from school_appointments.core.enums import BookingStep, Role
from school_appointments.core.exceptions import ValidationError
from school_appointments.maintenance.model import AppointmentTime
from school_appointments.users.model import User

TODAY = date(2026, 10, 19)
JUAN = User(id=3, firstname="Juan", lastname="Dela Cruz", role=Role.STUDENT, student_id="GC-482913")


@pytest.fixture
def calendar():
    return AvailabilityCalendar([], [], [AppointmentTime(1, "8 AM - 10 AM", 10)], today=TODAY, student_id=JUAN.id)


def _at_date_step(calendar):
    flow = BookingFlow()
    flow.set_account(JUAN)
    flow.next()
    flow.set_reasons(["Enrollment", " ", "Clearance"])
    flow.set_section(1)
    flow.next()
    return flow


def test_identity_step_needs_an_enabled_account():
    flow = BookingFlow()
    with pytest.raises(ValidationError):
        flow.next()
    assert flow.step == BookingStep.IDENTITY

    flow.set_account(User(id=4, firstname="Ana", lastname="Reyes", role=Role.STUDENT, status=False))
    with pytest.raises(ValidationError) as e:
        flow.next()
    assert e.value.title == "Account is Disabled"
    assert flow.step == BookingStep.IDENTITY


def test_reason_step_needs_reasons_and_section():
    flow = BookingFlow()
    flow.set_account(JUAN)
    flow.next()

    flow.set_reasons(["", "  "])
    flow.set_section(1)
    with pytest.raises(ValidationError):
        flow.next()
    assert flow.step == BookingStep.REASON_AND_SECTION

    flow.set_reasons(["Enrollment"])
    flow.set_section("")
    with pytest.raises(ValidationError):
        flow.next()


def test_full_walk_reaches_confirm(calendar):
    flow = _at_date_step(calendar)
    assert flow.reasons == ["Enrollment", "Clearance"]

    with pytest.raises(ValidationError):
        flow.next()

    flow.select_date(date(2026, 10, 21), calendar)
    flow.select_time("8 AM - 10 AM", calendar)

    assert flow.next() == BookingStep.CONFIRM
    flow.require_confirm()
    with pytest.raises(ValidationError):
        flow.next()


def test_back_is_refused_on_the_first_step():
    flow = BookingFlow()
    with pytest.raises(ValidationError):
        flow.back()
    assert flow.step == BookingStep.IDENTITY


def test_back_keeps_entered_data(calendar):
    flow = _at_date_step(calendar)

    assert flow.back() == BookingStep.REASON_AND_SECTION
    assert flow.reasons == ["Enrollment", "Clearance"]
    assert flow.section_id == 1


def test_changing_the_date_clears_the_time(calendar):
    flow = _at_date_step(calendar)
    flow.select_date(date(2026, 10, 21), calendar)
    flow.select_time("8 AM - 10 AM", calendar)

    flow.select_date(date(2026, 10, 21), calendar)
    assert flow.appointment_time == "8 AM - 10 AM"

    flow.select_date(date(2026, 10, 22), calendar)
    assert flow.appointment_time is None


def test_unavailable_date_and_time_are_refused(calendar):
    flow = _at_date_step(calendar)

    with pytest.raises(ValidationError):
        flow.select_time("8 AM - 10 AM", calendar)
    with pytest.raises(ValidationError):
        flow.select_date(date(2026, 10, 25), calendar)
    with pytest.raises(ValidationError):
        flow.select_date("2026-10-18", calendar)

    flow.select_date("2026-10-21", calendar)
    with pytest.raises(ValidationError):
        flow.select_time("9 PM - 10 PM", calendar)
    assert flow.appointment_time is None


def test_confirm_is_required_before_commit(calendar):
    flow = _at_date_step(calendar)

    with pytest.raises(ValidationError):
        flow.require_confirm()


def test_session_round_trip_keeps_every_field(calendar):
    flow = _at_date_step(calendar)
    flow.set_note("Bring ID")
    flow.select_date(date(2026, 10, 21), calendar)
    flow.select_time("8 AM - 10 AM", calendar)

    restored = BookingFlow.from_dict(flow.to_dict())

    assert restored.step == BookingStep.DATE_AND_TIME
    assert restored.account.student_id == "GC-482913"
    assert restored.reasons == ["Enrollment", "Clearance"]
    assert restored.section_id == 1
    assert restored.note == "Bring ID"
    assert restored.appointment_date == date(2026, 10, 21)
    assert restored.appointment_time == "8 AM - 10 AM"
    assert BookingFlow.from_dict(None).step == BookingStep.IDENTITY


def test_reset_clears_everything(calendar):
    flow = _at_date_step(calendar)
    flow.reset()

    assert flow.step == BookingStep.IDENTITY
    assert flow.account is None
    assert flow.reasons == []
    assert flow.appointment_date is None
