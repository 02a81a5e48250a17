from __future__ import annotations

from .auth import PasswordAuth
from .gateway import RowGateway
from .query import Query
from .realtime import ChangeFeed


class BackendClient:
    """The backend collaborator: row queries, auth and the change feed.

    Built once by the container and handed to services explicitly.
    """

    def __init__(self, gateway: RowGateway, auth: PasswordAuth, feed: ChangeFeed):
        self._gateway = gateway
        self.auth = auth
        self.feed = feed

    def table(self, name: str) -> Query:
        return Query(self._gateway, name)
