from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from ..core.exceptions import BackendError, NotFoundError
from .gateway import Embed, Filter, Order, RowGateway


class Query:
    """Fluent request against one table, executed through a RowGateway.

    client.table("appointments").select(Embed("user", "users", "student_id"))
        .eq("qrcode", "AB12CD").single().execute()
    """

    def __init__(self, gateway: RowGateway, table: str):
        self._gateway = gateway
        self._table = table
        self._action = "select"
        self._values: Any = None
        self._filters: list[Filter] = []
        self._order: list[Order] = []
        self._embeds: tuple[Embed, ...] = ()
        self._limit: Optional[int] = None
        self._single = False

    # --- actions -------------------------------------------------------

    def select(self, *embeds: Embed) -> "Query":
        self._action = "select"
        self._embeds = embeds
        return self

    def insert(self, values: Union[dict, list[dict]]) -> "Query":
        self._action = "insert"
        self._values = [values] if isinstance(values, dict) else list(values)
        return self

    def update(self, values: dict) -> "Query":
        self._action = "update"
        self._values = dict(values)
        return self

    def delete(self) -> "Query":
        self._action = "delete"
        return self

    # --- modifiers -----------------------------------------------------

    def _where(self, column: str, op: str, value: Any) -> "Query":
        self._filters.append(Filter(column, op, value))
        return self

    def eq(self, column: str, value: Any) -> "Query":
        return self._where(column, "eq", value)

    def neq(self, column: str, value: Any) -> "Query":
        return self._where(column, "neq", value)

    def lt(self, column: str, value: Any) -> "Query":
        return self._where(column, "lt", value)

    def lte(self, column: str, value: Any) -> "Query":
        return self._where(column, "lte", value)

    def gt(self, column: str, value: Any) -> "Query":
        return self._where(column, "gt", value)

    def gte(self, column: str, value: Any) -> "Query":
        return self._where(column, "gte", value)

    def in_(self, column: str, values: Iterable[Any]) -> "Query":
        return self._where(column, "in", tuple(values))

    def order(self, column: str, *, ascending: bool = True) -> "Query":
        self._order.append(Order(column, ascending))
        return self

    def limit(self, count: int) -> "Query":
        self._limit = int(count)
        return self

    def single(self) -> "Query":
        self._single = True
        return self

    # --- execution -----------------------------------------------------

    def _run(self) -> list[dict]:
        if self._action == "select":
            return self._gateway.select(
                self._table,
                filters=self._filters,
                order=self._order,
                embeds=self._embeds,
                limit=self._limit,
            )
        if self._action == "insert":
            return self._gateway.insert(self._table, self._values)
        if not self._filters:
            raise BackendError(f"{self._action.upper()} requires a filter")
        if self._action == "update":
            return self._gateway.update(self._table, self._values, filters=self._filters)
        return self._gateway.delete(self._table, filters=self._filters)

    def execute(self) -> Union[list[dict], dict]:
        try:
            rows = self._run()
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(str(e)) from e

        if self._single:
            if len(rows) != 1:
                raise NotFoundError(f"Expected a single row from {self._table}, got {len(rows)}")
            return rows[0]
        return rows
