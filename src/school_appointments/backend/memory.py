from __future__ import annotations

import copy
import threading
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import T_APPOINTMENTS
from ..core.enums import ChangeType
from ..core.exceptions import BackendError
from .gateway import Embed, Filter, Order, RowGateway
from .realtime import ChangeFeed

DEFAULT_UNIQUE = {T_APPOINTMENTS: ("qrcode",)}


def _sort_key(column: str):
    def key(row: dict):
        value = row.get(column)
        return (value is not None, value)

    return key


class InMemoryGateway(RowGateway):
    """Process-local tables with auto-increment ids and unique columns.

    Used by the test-suite and the `memory` backend setting.
    """

    def __init__(
        self,
        feed: Optional[ChangeFeed] = None,
        *,
        unique: Optional[dict[str, tuple[str, ...]]] = None,
        clock: Callable = now_local,
    ):
        self._feed = feed
        self._unique = DEFAULT_UNIQUE if unique is None else unique
        self._clock = clock
        self._lock = threading.RLock()
        self._tables: dict[str, list[dict]] = {}
        self._next_id: dict[str, int] = {}

    def _table(self, name: str) -> list[dict]:
        return self._tables.setdefault(name, [])

    def _check_unique(self, table: str, candidate: dict, *, ignore_id=None) -> None:
        for column in self._unique.get(table, ()):
            value = candidate.get(column)
            if value is None:
                continue
            for row in self._table(table):
                if row.get("id") != ignore_id and row.get(column) == value:
                    raise BackendError(
                        f'duplicate key value violates unique constraint "{table}_{column}_key"'
                    )

    def _publish(self, table: str, kind: ChangeType, changes: list[tuple[dict, dict]]) -> None:
        if self._feed is not None:
            self._feed.publish_many(table, kind, changes)

    def select(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        embeds: Sequence[Embed] = (),
        limit: Optional[int] = None,
    ) -> list[dict]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._table(table) if all(f.matches(r) for f in filters)]
            for o in reversed(order):
                rows.sort(key=_sort_key(o.column), reverse=not o.ascending)
            for embed in embeds:
                related = {r.get(embed.remote_key): r for r in self._table(embed.table)}
                for row in rows:
                    row[embed.alias] = copy.deepcopy(embed.project(related.get(row.get(embed.local_key))))
        if limit is not None:
            rows = rows[:limit]
        return rows

    def insert(self, table: str, rows: Sequence[dict]) -> list[dict]:
        stored: list[dict] = []
        with self._lock:
            for values in rows:
                row = copy.deepcopy(dict(values))
                self._check_unique(table, row)
                for other in stored:
                    for column in self._unique.get(table, ()):
                        if row.get(column) is not None and row.get(column) == other.get(column):
                            raise BackendError(f'duplicate key value violates unique constraint "{table}_{column}_key"')
                if row.get("id") is None:
                    next_id = self._next_id.get(table, 0) + 1
                    self._next_id[table] = next_id
                    row["id"] = next_id
                else:
                    self._next_id[table] = max(self._next_id.get(table, 0), int(row["id"]))
                row.setdefault("created_at", self._clock().isoformat())
                stored.append(row)
            self._table(table).extend(stored)
            result = [copy.deepcopy(r) for r in stored]
        self._publish(table, ChangeType.INSERT, [(copy.deepcopy(r), {}) for r in result])
        return result

    def update(self, table: str, values: dict, *, filters: Sequence[Filter]) -> list[dict]:
        changes: list[tuple[dict, dict]] = []
        with self._lock:
            for index, row in enumerate(self._table(table)):
                if not all(f.matches(row) for f in filters):
                    continue
                updated = {**row, **copy.deepcopy(values)}
                self._check_unique(table, updated, ignore_id=row.get("id"))
                self._table(table)[index] = updated
                changes.append((copy.deepcopy(updated), copy.deepcopy(row)))
        self._publish(table, ChangeType.UPDATE, changes)
        return [new for new, _ in changes]

    def delete(self, table: str, *, filters: Sequence[Filter]) -> list[dict]:
        with self._lock:
            kept: list[dict] = []
            removed: list[dict] = []
            for row in self._table(table):
                (removed if all(f.matches(row) for f in filters) else kept).append(row)
            self._tables[table] = kept
        self._publish(table, ChangeType.DELETE, [({}, copy.deepcopy(r)) for r in removed])
        return removed
