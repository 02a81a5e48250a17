import pytest

from school_appointments.core.constants import DEFAULT_ACCOUNT_PASSWORD
from school_appointments.core.enums import Role
from school_appointments.core.exceptions import AuthenticationError, NotFoundError, ValidationError


def test_add_user_uses_the_default_password(container):
    user = container.user_service.add_user(
        email="staff@school.test", firstname="Maria", lastname="Santos", role=Role.ADMIN
    )

    assert user.role == Role.ADMIN
    assert user.student_id is None
    assert container.auth_service.login("staff@school.test", DEFAULT_ACCOUNT_PASSWORD).user.id == user.id


def test_add_student_gets_a_student_id(container):
    user = container.user_service.add_user(
        email="ana@school.test", firstname="Ana", lastname="Reyes", role=Role.STUDENT, gender="Female"
    )

    assert user.student_id.startswith("GC-")
    assert user.gender == "Female"
    assert [s.id for s in container.user_service.list_students()] == [user.id]


def test_names_must_be_short_letters(container):
    with pytest.raises(ValidationError, match="letters"):
        container.user_service.add_user(email="x@school.test", firstname="Ma1ria", lastname="Santos", role=Role.ADMIN)
    with pytest.raises(ValidationError, match="at most 10"):
        container.user_service.add_user(
            email="x@school.test", firstname="Maximiliano", lastname="Santos", role=Role.ADMIN
        )


def test_duplicate_email_is_a_registration_error(container, student):
    with pytest.raises(AuthenticationError) as e:
        container.user_service.add_user(email="juan@school.test", firstname="Juan", lastname="Cruz", role=Role.ADMIN)

    assert e.value.title == "Registration Error"


def test_staff_list_excludes_students(container, student, staff_user):
    staff = container.user_service.list_staff()

    assert [u.id for u in staff] == [staff_user.id]
    assert staff[0].email == "admin@school.test"


def test_toggle_status(container, student):
    assert container.user_service.toggle_status(student.id).status is False
    assert container.user_service.toggle_status(student.id).status is True


def test_edit_user_keeps_staff_out_of_the_student_role(container, staff_user):
    with pytest.raises(ValidationError):
        container.user_service.edit_user(staff_user.id, firstname="System", lastname="Admin", role=Role.STUDENT)

    updated = container.user_service.edit_user(staff_user.id, firstname="System", lastname="Admin", role=Role.ADMIN)
    assert updated.role == Role.ADMIN
    assert updated.lastname == "Admin"


def test_edit_student_updates_profile(container, student):
    updated = container.user_service.edit_user(
        student.id, firstname="Juan", lastname="Cruz", address="Cebu", student_id="GC-000001"
    )

    assert updated.address == "Cebu"
    assert updated.student_id == "GC-000001"


def test_delete_student_removes_row_and_identity(container, student):
    container.user_service.delete_student(student.id)

    with pytest.raises(NotFoundError):
        container.user_service.get(student.id)
    with pytest.raises(AuthenticationError):
        container.auth_service.login("juan@school.test", "secret123")


def test_only_students_can_be_deleted(container, staff_user):
    with pytest.raises(ValidationError):
        container.user_service.delete_student(staff_user.id)
