from datetime import date

import pytest

from school_appointments.core.exceptions import NotFoundError, ValidationError


def test_add_section_checks_course_and_year_level(container):
    with pytest.raises(ValidationError, match="Unknown course"):
        container.maintenance_service.add_section(course="BSXX", year_level="1st Year", section="A")
    with pytest.raises(ValidationError, match="Unknown year level"):
        container.maintenance_service.add_section(course="BSIT", year_level="5th Year", section="A")


def test_edit_section_only_renames_the_label(container, section):
    renamed = container.maintenance_service.edit_section(section.id, section="B")

    assert renamed.course == "BSIT"
    assert renamed.year_level == "3rd Year"
    assert renamed.code == "BSIT 3B"
    assert renamed.compact_code == "BSIT3B"


def test_delete_section(container, section):
    container.maintenance_service.delete_section(section.id)

    assert container.maintenance_service.list_sections() == []
    with pytest.raises(NotFoundError):
        container.maintenance_service.delete_section(section.id)


def test_reasons_are_proper_cased(container):
    reason = container.maintenance_service.add_reason(reason="request of transcript OF records")

    assert reason.reason == "Request of Transcript of Records"
    edited = container.maintenance_service.edit_reason(reason.id, reason="GOOD MORAL certificate")
    assert edited.reason == "Good Moral Certificate"


def test_blank_reason_is_rejected(container):
    with pytest.raises(ValidationError):
        container.maintenance_service.add_reason(reason="   ")


def test_slot_capacity(container):
    updated = container.settings_service.update_time_max(2, max_count="4")

    assert updated.time == "10 AM - 12 PM"
    assert updated.max == 4
    with pytest.raises(ValidationError):
        container.settings_service.update_time_max(2, max_count="many")
    with pytest.raises(ValidationError):
        container.settings_service.update_time_max(2, max_count=-1)
    with pytest.raises(NotFoundError):
        container.settings_service.update_time_max(99, max_count=1)


def test_disabled_dates_are_unique(container):
    created = container.settings_service.add_disabled_date(day="2026-12-25", description=" Christmas ")

    assert created.date == date(2026, 12, 25)
    assert created.description == "Christmas"
    with pytest.raises(ValidationError, match="already exists"):
        container.settings_service.add_disabled_date(day=date(2026, 12, 25))


def test_disabled_date_without_description(container):
    created = container.settings_service.add_disabled_date(day="2026-11-01", description="")

    assert created.description is None


def test_edit_and_delete_disabled_date(container):
    created = container.settings_service.add_disabled_date(day="2026-12-25")

    edited = container.settings_service.edit_disabled_date(created.id, day="2026-12-24", description="Eve")
    assert edited.date == date(2026, 12, 24)

    container.settings_service.delete_disabled_date(created.id)
    assert container.settings_service.list_disabled_dates() == []


def test_invalid_disabled_date(container):
    with pytest.raises(ValidationError, match="required"):
        container.settings_service.add_disabled_date(day="")
    with pytest.raises(ValidationError, match="invalid"):
        container.settings_service.add_disabled_date(day="31/31/2026")


def test_disabled_date_closes_the_booking_calendar(container):
    container.settings_service.add_disabled_date(day="2026-10-21", description="Foundation Day")

    calendar = container.availability_service.calendar()

    assert not calendar.is_selectable(date(2026, 10, 21))
    assert calendar.day_hint(date(2026, 10, 21)) == "Foundation Day"
