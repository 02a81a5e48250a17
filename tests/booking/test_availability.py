from datetime import date

from school_appointments.appointments.model import Appointment
from school_appointments.booking.availability import NO_DESCRIPTION, OWN_PENDING_HINT, AvailabilityCalendar
from school_appointments.core.enums import AppointmentStatus
from school_appointments.maintenance.model import AppointmentTime, DisabledDate

TODAY = date(2026, 10, 19)  # Monday
SLOT = "8 AM - 10 AM"


def _appointment(i, *, student_id=1, day=date(2026, 10, 21), time=SLOT, status=AppointmentStatus.PENDING):
    return Appointment(
        id=i,
        student_id=student_id,
        section_id=1,
        qrcode=f"CODE{i:02d}",
        status=status,
        appointment_date=day,
        appointment_time=time,
    )


def _calendar(appointments=(), disabled=(), times=None, student_id=None):
    times = times if times is not None else [AppointmentTime(1, SLOT, 5), AppointmentTime(2, "10 AM - 12 PM", 10)]
    return AvailabilityCalendar(disabled, appointments, times, today=TODAY, student_id=student_id)


def test_window_is_today_to_three_months_ahead():
    calendar = _calendar()

    assert calendar.min_date == TODAY
    assert calendar.max_date == date(2027, 1, 19)
    assert not calendar.is_selectable(date(2026, 10, 18))
    assert calendar.is_selectable(TODAY)
    assert not calendar.is_selectable(date(2027, 1, 20))


def test_sundays_are_excluded():
    calendar = _calendar()

    assert calendar.is_excluded(date(2026, 10, 25))
    assert date(2026, 10, 25) not in calendar.selectable_days()
    assert date(2026, 10, 24) in calendar.selectable_days()


def test_disabled_date_is_excluded_with_its_description():
    calendar = _calendar(
        disabled=[DisabledDate(1, date(2026, 10, 20), "Foundation Day"), DisabledDate(2, date(2026, 10, 22), None)]
    )

    assert not calendar.is_selectable(date(2026, 10, 20))
    assert calendar.day_hint(date(2026, 10, 20)) == "Foundation Day"
    assert calendar.day_hint(date(2026, 10, 22)) == NO_DESCRIPTION
    assert calendar.day_hint(date(2026, 10, 23)) is None


def test_own_pending_date_is_excluded_for_that_student_only():
    pending = _appointment(1, student_id=7, day=date(2026, 10, 21))
    done = _appointment(2, student_id=7, day=date(2026, 10, 23), status=AppointmentStatus.COMPLETED)

    mine = _calendar([pending, done], student_id=7)
    theirs = _calendar([pending, done], student_id=8)

    assert not mine.is_selectable(date(2026, 10, 21))
    assert mine.day_hint(date(2026, 10, 21)) == OWN_PENDING_HINT
    assert mine.is_selectable(date(2026, 10, 23))
    assert theirs.is_selectable(date(2026, 10, 21))
    assert mine.for_return().is_selectable(date(2026, 10, 21))


def test_full_slot_is_disabled():
    day = date(2026, 10, 21)
    booked = [_appointment(i, student_id=i, day=day) for i in range(1, 6)]

    options = {o.value: o for o in _calendar(booked).time_options(day)}

    assert options[SLOT].remaining == 0
    assert options[SLOT].disabled is True
    assert options[SLOT].label == f"{SLOT} (0)"
    assert options["10 AM - 12 PM"].label == "10 AM - 12 PM (10)"


def test_slot_with_one_place_left_shows_remaining_count():
    day = date(2026, 10, 21)
    booked = [_appointment(i, student_id=i, day=day) for i in range(1, 5)]

    calendar = _calendar(booked)
    option = next(o for o in calendar.time_options(day) if o.value == SLOT)

    assert option.label == f"{SLOT} (1)"
    assert not option.disabled
    assert calendar.is_time_available(day, SLOT)


def test_counts_depend_on_the_selected_day():
    booked = [_appointment(i, student_id=i, day=date(2026, 10, 21)) for i in range(1, 6)]
    calendar = _calendar(booked)

    assert not calendar.is_time_available(date(2026, 10, 21), SLOT)
    assert calendar.is_time_available(date(2026, 10, 22), SLOT)
    assert not calendar.is_time_available(date(2026, 10, 22), "no such slot")


def test_hints_cover_the_window():
    calendar = _calendar(
        [_appointment(1, student_id=7, day=date(2026, 10, 21))],
        disabled=[DisabledDate(1, date(2026, 10, 20), "Holiday"), DisabledDate(2, date(2027, 3, 1), "Too far")],
        student_id=7,
    )

    assert calendar.hints() == {date(2026, 10, 20): "Holiday", date(2026, 10, 21): OWN_PENDING_HINT}
