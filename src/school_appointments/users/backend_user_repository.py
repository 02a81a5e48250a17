from __future__ import annotations

from typing import Optional, Sequence

from ..backend.client import BackendClient
from ..core.constants import T_USERS
from ..core.enums import Role
from .model import User
from .repository import UserRepository


class BackendUserRepository(UserRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, user_id: int) -> Optional[User]:
        rows = self._client.table(T_USERS).select().eq("id", int(user_id)).execute()
        return User.from_row(rows[0]) if rows else None

    def get_by_auth_id(self, auth_id: str) -> Optional[User]:
        rows = self._client.table(T_USERS).select().eq("auth_id", auth_id).execute()
        return User.from_row(rows[0]) if rows else None

    def create(self, values: dict) -> User:
        rows = self._client.table(T_USERS).insert(values).execute()
        return User.from_row(rows[0])

    def update(self, user_id: int, values: dict) -> Optional[User]:
        rows = self._client.table(T_USERS).update(values).eq("id", int(user_id)).execute()
        return User.from_row(rows[0]) if rows else None

    def delete_by_id(self, user_id: int) -> bool:
        return bool(self._client.table(T_USERS).delete().eq("id", int(user_id)).execute())

    def list_by_roles(self, roles: Sequence[Role]) -> list[User]:
        rows = (
            self._client.table(T_USERS)
            .select()
            .in_("role", [r.value for r in roles])
            .order("created_at", ascending=False)
            .execute()
        )
        return [User.from_row(r) for r in rows]
