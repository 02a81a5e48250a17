from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..backend.auth import PasswordAuth
from ..common.datetime_utils import coerce_date, to_appointment_date
from ..common.text import generate_student_id
from ..common.validators import require_letters, require_min_length, require_non_empty
from ..core.constants import DEFAULT_ACCOUNT_PASSWORD, MIN_PASSWORD_LENGTH, NAME_MAX_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, BackendError, NotFoundError, ValidationError
from .model import Account, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

STAFF_ROLES = (Role.ADMIN, Role.SUPERADMIN)


def _birthday(value) -> Optional[str]:
    day = coerce_date(value) if value else None
    return to_appointment_date(day) if day else None


class AuthService:
    """Use cases: login/logout, self-registration, password recovery, own account."""

    def __init__(self, users: UserRepository, auth: PasswordAuth):
        self._users = users
        self._auth = auth

    def login(self, email: str, password: str) -> Account:
        session = self._auth.sign_in_with_password(email, password)

        user = self._users.get_by_auth_id(session.user.id)
        if not user:
            self._auth.sign_out(session.access_token)
            logger.warning("login for %s has no user row", session.user.email)
            raise AuthenticationError("No user profile is linked to this account.")
        if not user.status:
            self._auth.sign_out(session.access_token)
            logger.info("login rejected for disabled account %s", session.user.email)
            raise AuthenticationError(
                "Please contact the administrator to activate your account.",
                title="Account is Disabled",
            )

        logger.info("login ok user_id=%s role=%s", user.id, user.role.value)
        return Account(user=_with_email(user, session.user.email), access_token=session.access_token)

    def logout(self, access_token: Optional[str]) -> None:
        self._auth.sign_out(access_token)

    def resolve(self, access_token: Optional[str]) -> Optional[Account]:
        """Session -> Account, or None when the token is unknown or the account is gone/disabled."""
        session = self._auth.get_session(access_token)
        if not session:
            return None
        user = self._users.get_by_auth_id(session.user.id)
        if not user or not user.status:
            return None
        return Account(user=_with_email(user, session.user.email), access_token=access_token)

    def register(
        self,
        *,
        email: str,
        password: str,
        firstname: str,
        lastname: str,
        gender: Optional[str] = None,
        address: Optional[str] = None,
        birthday=None,
        student_id: Optional[str] = None,
    ) -> User:
        email = require_non_empty(email, "Email")
        require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
        firstname = require_letters(firstname, "Firstname", NAME_MAX_LENGTH)
        lastname = require_letters(lastname, "Lastname", NAME_MAX_LENGTH)
        student_id = (student_id or "").strip() or generate_student_id()

        identity = self._auth.sign_up(email, password)
        user = self._users.create(
            {
                "firstname": firstname,
                "lastname": lastname,
                "gender": gender,
                "address": address,
                "birthday": _birthday(birthday),
                "student_id": student_id,
                "auth_id": identity.id,
                "role": Role.STUDENT.value,
                "status": True,
            }
        )
        logger.info("student registered user_id=%s student_id=%s", user.id, student_id)
        return _with_email(user, identity.email)

    def request_password_reset(self, email: str, *, redirect_to: str) -> Optional[str]:
        email = require_non_empty(email, "Email")
        return self._auth.reset_password_for_email(email, redirect_to=redirect_to)

    def reset_password(self, *, token: str, password: str, confirm_password: str) -> None:
        if password != confirm_password:
            raise ValidationError("Passwords do not match.", title="Error")
        session = self._auth.exchange_recovery_token(token)
        try:
            self._auth.update_user(session.access_token, password=password)
        finally:
            self._auth.sign_out(session.access_token)
        logger.info("password reset for %s", session.user.email)

    def update_account(
        self,
        account: Account,
        *,
        firstname: str,
        lastname: str,
        gender: Optional[str] = None,
        address: Optional[str] = None,
        birthday=None,
        password: Optional[str] = None,
    ) -> Account:
        firstname = require_letters(firstname, "Firstname", NAME_MAX_LENGTH)
        lastname = require_letters(lastname, "Lastname", NAME_MAX_LENGTH)
        if password:
            self._auth.admin_update_user_by_id(account.user.auth_id, password=password)

        updated = self._users.update(
            account.user.id,
            {
                "firstname": firstname,
                "lastname": lastname,
                "gender": gender,
                "address": address,
                "birthday": _birthday(birthday),
            },
        )
        if not updated:
            raise NotFoundError("User not found")
        return Account(user=_with_email(updated, account.user.email), access_token=account.access_token)


class UserService:
    """Use cases: the Users (staff) and Students admin screens."""

    def __init__(self, users: UserRepository, auth: PasswordAuth):
        self._users = users
        self._auth = auth

    def _joined(self, users: list[User]) -> list[User]:
        emails = {u.id: u.email for u in self._auth.admin_list_users()}
        out = []
        for user in users:
            email = emails.get(user.auth_id or "")
            if email:
                out.append(_with_email(user, email))
        return out

    def list_staff(self) -> list[User]:
        return self._joined(self._users.list_by_roles(STAFF_ROLES))

    def list_students(self) -> list[User]:
        return self._joined(self._users.list_by_roles([Role.STUDENT]))

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def add_user(
        self,
        *,
        email: str,
        firstname: str,
        lastname: str,
        role: Role,
        password: Optional[str] = None,
        gender: Optional[str] = None,
        address: Optional[str] = None,
        birthday=None,
        student_id: Optional[str] = None,
    ) -> User:
        email = require_non_empty(email, "Email")
        firstname = require_letters(firstname, "Firstname", NAME_MAX_LENGTH)
        lastname = require_letters(lastname, "Lastname", NAME_MAX_LENGTH)

        values = {"firstname": firstname, "lastname": lastname, "role": role.value, "status": True}
        if role == Role.STUDENT:
            values.update(
                gender=gender,
                address=address,
                birthday=_birthday(birthday),
                student_id=(student_id or "").strip() or generate_student_id(),
            )

        try:
            identity = self._auth.admin_create_user(email, password or DEFAULT_ACCOUNT_PASSWORD)
        except AuthenticationError as e:
            raise AuthenticationError(str(e), title="Registration Error") from e

        values["auth_id"] = identity.id
        try:
            user = self._users.create(values)
        except BackendError as e:
            raise BackendError(str(e), title="Database Error") from e
        logger.info("user added user_id=%s role=%s", user.id, role.value)
        return _with_email(user, identity.email)

    def edit_user(
        self,
        user_id: int,
        *,
        firstname: str,
        lastname: str,
        role: Optional[Role] = None,
        gender: Optional[str] = None,
        address: Optional[str] = None,
        birthday=None,
        student_id: Optional[str] = None,
    ) -> User:
        current = self.get(user_id)
        values = {
            "firstname": require_letters(firstname, "Firstname", NAME_MAX_LENGTH),
            "lastname": require_letters(lastname, "Lastname", NAME_MAX_LENGTH),
        }
        if current.is_student:
            values.update(gender=gender, address=address, birthday=_birthday(birthday))
            if student_id:
                values["student_id"] = student_id.strip()
        elif role is not None:
            if role == Role.STUDENT:
                raise ValidationError("Staff accounts cannot be turned into students.")
            values["role"] = role.value

        updated = self._users.update(user_id, values)
        if not updated:
            raise NotFoundError("User not found")
        return updated

    def set_status(self, user_id: int, *, status: bool) -> User:
        updated = self._users.update(user_id, {"status": bool(status)})
        if not updated:
            raise NotFoundError("User not found")
        logger.info("user status user_id=%s status=%s", user_id, updated.status)
        return updated

    def toggle_status(self, user_id: int) -> User:
        return self.set_status(user_id, status=not self.get(user_id).status)

    def delete_student(self, user_id: int) -> None:
        user = self.get(user_id)
        if not user.is_student:
            raise ValidationError("Only student accounts can be deleted.")
        if user.auth_id:
            try:
                self._auth.admin_delete_user(user.auth_id)
            except NotFoundError:
                logger.warning("auth identity of user_id=%s was already gone", user_id)
        self._users.delete_by_id(user_id)
        logger.info("student deleted user_id=%s", user_id)


def _with_email(user: User, email: str) -> User:
    return replace(user, email=email or "")
