from __future__ import annotations

import json
import re
from typing import Any, Optional, Sequence

from ..core.constants import T_APPOINTMENTS
from ..core.enums import ChangeType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_value
from .gateway import Embed, Filter, Order, RowGateway
from .realtime import ChangeFeed

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SQL_OPS = {"eq": "=", "neq": "<>", "lt": "<", "lte": "<=", "gt": ">", "gte": ">="}

DEFAULT_JSON_COLUMNS = {T_APPOINTMENTS: ("reasons",)}


def _ident(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f"`{name}`"


def _where(filters: Sequence[Filter]) -> tuple[str, list[Any]]:
    parts: list[str] = []
    params: list[Any] = []
    for f in filters:
        col = _ident(f.column)
        if f.op == "in":
            values = list(f.value)
            if not values:
                parts.append("1=0")
                continue
            parts.append(f"{col} IN ({', '.join(['%s'] * len(values))})")
            params.extend(values)
        elif f.value is None and f.op in ("eq", "neq"):
            parts.append(f"{col} IS {'NOT ' if f.op == 'neq' else ''}NULL")
        elif f.op == "neq":
            parts.append(f"({col} <> %s OR {col} IS NULL)")
            params.append(f.value)
        else:
            parts.append(f"{col} {_SQL_OPS[f.op]} %s")
            params.append(f.value)
    if not parts:
        return "", params
    return " WHERE " + " AND ".join(parts), params


class MySQLGateway(RowGateway):
    """RowGateway over mysql-connector.

    Change events are published to the in-process feed after commit, so only
    writes issued through this process reach local subscribers.
    """

    def __init__(
        self,
        conn_factory: DatabaseConnection,
        feed: Optional[ChangeFeed] = None,
        *,
        json_columns: Optional[dict[str, tuple[str, ...]]] = None,
    ):
        self._conn_factory = conn_factory
        self._feed = feed
        self._json_columns = DEFAULT_JSON_COLUMNS if json_columns is None else json_columns

    def _encode(self, table: str, values: dict) -> dict:
        out = dict(values)
        for column in self._json_columns.get(table, ()):
            if column in out and not isinstance(out[column], str):
                out[column] = json.dumps(out[column])
        return out

    def _decode(self, table: str, row: dict) -> dict:
        out = {k: normalize_mysql_value(v) for k, v in row.items()}
        for column in self._json_columns.get(table, ()):
            if isinstance(out.get(column), str):
                out[column] = json.loads(out[column])
        if "status" in out and isinstance(out["status"], int) and table != T_APPOINTMENTS:
            out["status"] = bool(out["status"])
        return out

    def _fetch(self, cur, table: str, filters: Sequence[Filter], order: Sequence[Order] = (), limit=None) -> list[dict]:
        where, params = _where(filters)
        sql = f"SELECT * FROM {_ident(table)}{where}"
        if order:
            sql += " ORDER BY " + ", ".join(f"{_ident(o.column)} {'ASC' if o.ascending else 'DESC'}" for o in order)
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        cur.execute(sql, tuple(params))
        return [self._decode(table, r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            rows = self._fetch(cur, table, filters, order, limit)
            for embed in embeds:
                keys = sorted({r.get(embed.local_key) for r in rows if r.get(embed.local_key) is not None})
                related = self._fetch(cur, embed.table, [Filter(embed.remote_key, "in", tuple(keys))])
                by_key = {r.get(embed.remote_key): r for r in related}
                for row in rows:
                    row[embed.alias] = embed.project(by_key.get(row.get(embed.local_key)))
        return rows

    def insert(self, table: str, rows: Sequence[dict]) -> list[dict]:
        ids: list[int] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for values in rows:
                encoded = self._encode(table, values)
                columns = list(encoded)
                cur.execute(
                    f"INSERT INTO {_ident(table)} ({', '.join(_ident(c) for c in columns)}) "
                    f"VALUES ({', '.join(['%s'] * len(columns))})",
                    tuple(encoded[c] for c in columns),
                )
                ids.append(int(encoded.get("id") or cur.lastrowid))
            stored = self._fetch(cur, table, [Filter("id", "in", tuple(ids))])
        self._publish(table, ChangeType.INSERT, [(r, {}) for r in stored])
        return stored

    def update(self, table: str, values: dict, *, filters: Sequence[Filter]) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            before = self._fetch(cur, table, filters)
            if not before:
                return []
            ids = tuple(r["id"] for r in before)
            encoded = self._encode(table, values)
            assignments = ", ".join(f"{_ident(c)}=%s" for c in encoded)
            cur.execute(
                f"UPDATE {_ident(table)} SET {assignments} WHERE `id` IN ({', '.join(['%s'] * len(ids))})",
                tuple(encoded.values()) + ids,
            )
            after = {r["id"]: r for r in self._fetch(cur, table, [Filter("id", "in", ids)])}
        changes = [(after[r["id"]], r) for r in before if r["id"] in after]
        self._publish(table, ChangeType.UPDATE, changes)
        return [new for new, _ in changes]

    def delete(self, table: str, *, filters: Sequence[Filter]) -> list[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            removed = self._fetch(cur, table, filters)
            if removed:
                ids = tuple(r["id"] for r in removed)
                cur.execute(
                    f"DELETE FROM {_ident(table)} WHERE `id` IN ({', '.join(['%s'] * len(ids))})",
                    ids,
                )
        self._publish(table, ChangeType.DELETE, [({}, r) for r in removed])
        return removed
