from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note (DIP): services depend on this interface, not on a concrete backend.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_auth_id(self, auth_id: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, values: dict) -> User:
        raise NotImplementedError

    def update(self, user_id: int, values: dict) -> Optional[User]:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_by_roles(self, roles: Sequence[Role]) -> list[User]:
        raise NotImplementedError
