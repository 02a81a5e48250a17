import pytest

from school_appointments.backend.auth import InMemoryIdentityStore, PasswordAuth
from school_appointments.core.exceptions import AuthenticationError, NotFoundError


@pytest.fixture
def auth():
    return PasswordAuth(InMemoryIdentityStore())


def test_sign_up_then_sign_in(auth):
    user = auth.sign_up("Juan@School.test ", "secret123")
    session = auth.sign_in_with_password("juan@school.test", "secret123")

    assert user.email == "juan@school.test"
    assert session.user.id == user.id
    assert auth.get_session(session.access_token).user.email == "juan@school.test"


def test_sign_up_rejects_duplicates_bad_email_and_short_password(auth):
    auth.sign_up("juan@school.test", "secret123")

    with pytest.raises(AuthenticationError, match="already registered") as e:
        auth.sign_up("juan@school.test", "secret123")
    assert e.value.title == "Registration Error"

    with pytest.raises(AuthenticationError):
        auth.sign_up("not-an-email", "secret123")

    with pytest.raises(AuthenticationError, match="at least 6 characters") as e:
        auth.sign_up("ana@school.test", "12345")
    assert e.value.title == "Invalid Password"


def test_wrong_password_is_rejected(auth):
    auth.sign_up("juan@school.test", "secret123")

    with pytest.raises(AuthenticationError, match="Invalid login credentials"):
        auth.sign_in_with_password("juan@school.test", "nope")
    with pytest.raises(AuthenticationError):
        auth.sign_in_with_password("nobody@school.test", "secret123")


def test_sign_out_ends_the_session(auth):
    auth.sign_up("juan@school.test", "secret123")
    session = auth.sign_in_with_password("juan@school.test", "secret123")

    auth.sign_out(session.access_token)

    assert auth.get_session(session.access_token) is None
    assert auth.get_session(None) is None


def test_recovery_token_is_single_use(auth):
    auth.sign_up("juan@school.test", "secret123")
    token = auth.reset_password_for_email("juan@school.test", redirect_to="http://localhost/forgot/reset")

    session = auth.exchange_recovery_token(token)
    auth.update_user(session.access_token, password="newsecret")

    assert auth.sign_in_with_password("juan@school.test", "newsecret")
    with pytest.raises(AuthenticationError):
        auth.exchange_recovery_token(token)


def test_recovery_for_unknown_email_returns_nothing(auth):
    assert auth.reset_password_for_email("nobody@school.test", redirect_to="http://x") is None


def test_admin_operations(auth):
    created = auth.admin_create_user("staff@school.test", "12345678")
    assert [u.email for u in auth.admin_list_users()] == ["staff@school.test"]

    auth.admin_update_user_by_id(created.id, password="changed123")
    session = auth.sign_in_with_password("staff@school.test", "changed123")

    auth.admin_delete_user(created.id)
    assert auth.admin_list_users() == []
    assert auth.get_session(session.access_token) is None
    with pytest.raises(NotFoundError):
        auth.admin_delete_user(created.id)
