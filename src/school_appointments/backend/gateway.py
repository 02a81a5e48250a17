from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..common.datetime_utils import coerce_date

OPERATORS = ("eq", "neq", "lt", "lte", "gt", "gte", "in")


def _comparable(left: Any, right: Any) -> tuple[Any, Any]:
    # Date columns are stored as text; compare them as dates when either side is one.
    if isinstance(left, date) or isinstance(right, date):
        try:
            return coerce_date(left), coerce_date(right)
        except ValueError:
            return str(left), str(right)
    return left, right


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op}")

    def matches(self, row: dict) -> bool:
        current = row.get(self.column)
        if self.op == "in":
            return current in tuple(self.value)
        if self.op == "eq":
            left, right = _comparable(current, self.value)
            return left == right
        if self.op == "neq":
            left, right = _comparable(current, self.value)
            return left != right
        if current is None:
            return False
        left, right = _comparable(current, self.value)
        if self.op == "lt":
            return left < right
        if self.op == "lte":
            return left <= right
        if self.op == "gt":
            return left > right
        return left >= right


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class Embed:
    """Join-style embedding: row[alias] = related row where related[remote_key] == row[local_key]."""

    alias: str
    table: str
    local_key: str
    remote_key: str = "id"
    columns: Optional[tuple[str, ...]] = None

    def project(self, related: Optional[dict]) -> Optional[dict]:
        if related is None:
            return None
        if self.columns is None:
            return dict(related)
        return {c: related.get(c) for c in self.columns}


class RowGateway(Protocol):
    """Row-based request/response interface of the backend.

    Every write returns the affected rows (as stored) and publishes the
    matching change events once the write is durable.
    """

    def select(
        self,
        table: str,
        *,
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        embeds: Sequence[Embed] = (),
        limit: Optional[int] = None,
    ) -> list[dict]:
        raise NotImplementedError

    def insert(self, table: str, rows: Sequence[dict]) -> list[dict]:
        raise NotImplementedError

    def update(self, table: str, values: dict, *, filters: Sequence[Filter]) -> list[dict]:
        raise NotImplementedError

    def delete(self, table: str, *, filters: Sequence[Filter]) -> list[dict]:
        raise NotImplementedError
