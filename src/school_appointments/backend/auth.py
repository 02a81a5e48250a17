from __future__ import annotations

import logging
import re
import secrets
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: AuthUser


@dataclass(frozen=True)
class IdentityRecord:
    id: str
    email: str
    password_hash: str


class IdentityStore(Protocol):
    def get_by_email(self, email: str) -> Optional[IdentityRecord]:
        raise NotImplementedError

    def get_by_id(self, identity_id: str) -> Optional[IdentityRecord]:
        raise NotImplementedError

    def create(self, record: IdentityRecord) -> None:
        raise NotImplementedError

    def set_password_hash(self, identity_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    def delete(self, identity_id: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> list[IdentityRecord]:
        raise NotImplementedError


class InMemoryIdentityStore(IdentityStore):
    def __init__(self):
        self._by_id: dict[str, IdentityRecord] = {}

    def get_by_email(self, email: str) -> Optional[IdentityRecord]:
        return next((r for r in self._by_id.values() if r.email == email), None)

    def get_by_id(self, identity_id: str) -> Optional[IdentityRecord]:
        return self._by_id.get(identity_id)

    def create(self, record: IdentityRecord) -> None:
        self._by_id[record.id] = record

    def set_password_hash(self, identity_id: str, password_hash: str) -> bool:
        current = self._by_id.get(identity_id)
        if not current:
            return False
        self._by_id[identity_id] = IdentityRecord(current.id, current.email, password_hash)
        return True

    def delete(self, identity_id: str) -> bool:
        return self._by_id.pop(identity_id, None) is not None

    def list_all(self) -> list[IdentityRecord]:
        return list(self._by_id.values())


class MySQLIdentityStore(IdentityStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_record(row: Optional[dict]) -> Optional[IdentityRecord]:
        if not row:
            return None
        return IdentityRecord(id=str(row["id"]), email=row["email"], password_hash=row["password_hash"])

    def get_by_email(self, email: str) -> Optional[IdentityRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, password_hash FROM auth_users WHERE email=%s", (email,))
            return self._to_record(fetchone(cur))

    def get_by_id(self, identity_id: str) -> Optional[IdentityRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, password_hash FROM auth_users WHERE id=%s", (identity_id,))
            return self._to_record(fetchone(cur))

    def create(self, record: IdentityRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO auth_users (id, email, password_hash) VALUES (%s, %s, %s)",
                (record.id, record.email, record.password_hash),
            )

    def set_password_hash(self, identity_id: str, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE auth_users SET password_hash=%s WHERE id=%s", (password_hash, identity_id))
            return cur.rowcount > 0

    def delete(self, identity_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM auth_users WHERE id=%s", (identity_id,))
            return cur.rowcount > 0

    def list_all(self) -> list[IdentityRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, email, password_hash FROM auth_users ORDER BY created_at")
            return [self._to_record(r) for r in fetchall(cur)]


class PasswordAuth:
    """Email/password authentication with opaque session tokens.

    Sessions and recovery tokens live in process memory; identities live in
    the injected IdentityStore.
    """

    def __init__(
        self,
        identities: IdentityStore,
        *,
        min_password_length: int = MIN_PASSWORD_LENGTH,
        token_factory: Callable[[], str] = lambda: secrets.token_urlsafe(32),
    ):
        self._identities = identities
        self._min_password_length = min_password_length
        self._token_factory = token_factory
        self._lock = threading.Lock()
        self._sessions: dict[str, str] = {}
        self._recovery: dict[str, str] = {}

    @staticmethod
    def _normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    def _check_password(self, password: str) -> None:
        if not password or len(password) < self._min_password_length:
            raise AuthenticationError(
                f"Password should be at least {self._min_password_length} characters.",
                title="Invalid Password",
            )

    def _open_session(self, record: IdentityRecord) -> AuthSession:
        token = self._token_factory()
        with self._lock:
            self._sessions[token] = record.id
        return AuthSession(access_token=token, user=AuthUser(record.id, record.email))

    def sign_up(self, email: str, password: str) -> AuthUser:
        email = self._normalize_email(email)
        if not _EMAIL.match(email):
            raise AuthenticationError("Unable to validate email address: invalid format", title="Registration Error")
        self._check_password(password)
        if self._identities.get_by_email(email):
            raise AuthenticationError("User already registered", title="Registration Error")

        record = IdentityRecord(id=str(uuid.uuid4()), email=email, password_hash=generate_password_hash(password))
        self._identities.create(record)
        logger.info("auth identity created for %s", email)
        return AuthUser(record.id, record.email)

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        record = self._identities.get_by_email(self._normalize_email(email))
        try:
            ok = bool(record) and check_password_hash(record.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid login credentials")
        return self._open_session(record)

    def sign_out(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        with self._lock:
            self._sessions.pop(access_token, None)

    def get_session(self, access_token: Optional[str]) -> Optional[AuthSession]:
        if not access_token:
            return None
        with self._lock:
            identity_id = self._sessions.get(access_token)
        if not identity_id:
            return None
        record = self._identities.get_by_id(identity_id)
        if not record:
            self.sign_out(access_token)
            return None
        return AuthSession(access_token=access_token, user=AuthUser(record.id, record.email))

    def update_user(self, access_token: str, *, password: str) -> AuthUser:
        session = self.get_session(access_token)
        if not session:
            raise AuthenticationError("Auth session missing!")
        return self.admin_update_user_by_id(session.user.id, password=password)

    def reset_password_for_email(self, email: str, *, redirect_to: str) -> Optional[str]:
        """Issue a one-time recovery token; unknown emails are accepted silently."""
        record = self._identities.get_by_email(self._normalize_email(email))
        if not record:
            logger.info("password recovery requested for unknown email")
            return None
        token = self._token_factory()
        with self._lock:
            self._recovery[token] = record.id
        logger.info("password recovery link for %s: %s?token=%s", record.email, redirect_to, token)
        return token

    def exchange_recovery_token(self, token: str) -> AuthSession:
        with self._lock:
            identity_id = self._recovery.pop(token, None)
        record = self._identities.get_by_id(identity_id) if identity_id else None
        if not record:
            raise AuthenticationError("Email link is invalid or has expired")
        return self._open_session(record)

    # --- privileged -------------------------------------------------------

    def admin_list_users(self) -> list[AuthUser]:
        return [AuthUser(r.id, r.email) for r in self._identities.list_all()]

    def admin_create_user(self, email: str, password: str) -> AuthUser:
        return self.sign_up(email, password)

    def admin_delete_user(self, identity_id: str) -> None:
        if not self._identities.delete(identity_id):
            raise NotFoundError("User not found")
        with self._lock:
            for token in [t for t, i in self._sessions.items() if i == identity_id]:
                del self._sessions[token]

    def admin_update_user_by_id(self, identity_id: str, *, password: str) -> AuthUser:
        self._check_password(password)
        if not self._identities.set_password_hash(identity_id, generate_password_hash(password)):
            raise NotFoundError("User not found")
        record = self._identities.get_by_id(identity_id)
        return AuthUser(record.id, record.email)
