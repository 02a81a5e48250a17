from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from ..common.text import chunk
from ..core.constants import DEFAULT_ROW_SIZE
from ..core.enums import SortDirection, TableState
from .columns import Column

SearchTerm = Union[None, str, Sequence[str]]

ERROR_TEXT = "Something Error, Please try again later."
NO_RECORD_TEXT = "No Record Found"


@dataclass(frozen=True)
class RenderedRow:
    number: int
    row: dict
    cells: list[str]


@dataclass(frozen=True)
class RenderedPage:
    rows: list[RenderedRow]
    page: int
    page_count: int
    state: TableState
    message: str
    show_pagination: bool


def _term_matches(row: dict, term: str, columns: Sequence[Column]) -> bool:
    if term == "all":
        return True
    needle = term.lower()
    for column in columns:
        text = column.search_text(row).lower()
        if column.search_exact:
            if text[: len(needle)] == needle:
                return True
        elif needle in text:
            return True
    return False


def _sort_key(field: str):
    def key(row: dict):
        value = row.get(field)
        return (value is not None, value)

    return key


class TableView:
    """Search, sort and paginate a collection of row dicts.

    Rows are ingested once per source list: a list without ids on its first
    row gets 1-based ids in order, and checkable tables reset every row's
    `checked` flag. Passing the same list object again keeps the ingested
    rows (and their ids) as they are.
    """

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Optional[list[dict]] = None,
        *,
        row_size: int = DEFAULT_ROW_SIZE,
        with_numbering: bool = False,
        checkable: bool = False,
        on_rows_change: Optional[Callable[[list[dict]], Any]] = None,
    ):
        if row_size <= 0:
            raise ValueError("row_size must be positive")
        self.columns = list(columns)
        self.row_size = row_size
        self.with_numbering = with_numbering
        self.checkable = checkable
        self.on_rows_change = on_rows_change

        self.loading = False
        self.error: Optional[str] = None

        self._source: Optional[list[dict]] = None
        self._rows: list[dict] = []
        self._search: SearchTerm = None
        self._sort_field: Optional[str] = None
        self._sort_direction: Optional[SortDirection] = None
        self._page = 1

        if rows is not None:
            self._ingest(rows)

    # --- rows -------------------------------------------------------------

    @property
    def rows(self) -> list[dict]:
        return list(self._rows)

    def _ingest(self, rows: list[dict]) -> None:
        self._source = rows
        ingested = [dict(r) for r in rows]
        if ingested and "id" not in ingested[0]:
            ingested = [{**r, "id": i + 1} for i, r in enumerate(ingested)]
        if self.checkable:
            ingested = [{**r, "checked": False} for r in ingested]
        self._rows = ingested

    def _changed(self) -> None:
        if self.on_rows_change is not None:
            self.on_rows_change(self.rows)

    def set_rows(self, rows: Optional[list[dict]]) -> None:
        if rows is None or rows is self._source:
            return
        self._ingest(rows)
        self._changed()

    # --- search / sort ----------------------------------------------------

    @property
    def search(self) -> SearchTerm:
        return self._search

    @search.setter
    def search(self, term: SearchTerm) -> None:
        self._search = term
        self._page = 1

    @property
    def sort_field(self) -> Optional[str]:
        return self._sort_field

    @property
    def sort_direction(self) -> Optional[SortDirection]:
        return self._sort_direction

    def toggle_sort(self, field: str) -> SortDirection:
        if self._sort_field == field and self._sort_direction == SortDirection.ASC:
            self._sort_direction = SortDirection.DESC
        else:
            self._sort_direction = SortDirection.ASC
        self._sort_field = field
        return self._sort_direction

    @property
    def filtered_rows(self) -> list[dict]:
        term = self._search
        if not term:
            return list(self._rows)
        columns = [c for c in self.columns if c.searchable]
        if isinstance(term, str):
            return [r for r in self._rows if _term_matches(r, term, columns)]
        terms = list(term)
        return [r for r in self._rows if all(_term_matches(r, t, columns) for t in terms)]

    @property
    def sorted_rows(self) -> list[dict]:
        rows = self.filtered_rows
        if not self._sort_field:
            return rows
        return sorted(
            rows,
            key=_sort_key(self._sort_field),
            reverse=self._sort_direction == SortDirection.DESC,
        )

    # --- pagination -------------------------------------------------------

    @property
    def pages(self) -> list[list[dict]]:
        return chunk(self.sorted_rows, self.row_size)

    @property
    def page_count(self) -> int:
        return math.ceil(len(self.filtered_rows) / self.row_size)

    @property
    def page(self) -> int:
        return self._page

    def set_page(self, page: int) -> int:
        self._page = min(max(1, int(page)), max(1, self.page_count))
        return self._page

    @property
    def page_rows(self) -> list[dict]:
        pages = self.pages
        if self._page > len(pages):
            return []
        offset = (self._page - 1) * self.row_size
        out = []
        for i, row in enumerate(pages[self._page - 1]):
            if not row.get("id"):
                row = {**row, "id": i + 1 + offset}
            out.append(row)
        return out

    # --- checkable rows ---------------------------------------------------

    def toggle_checked(self, row_id: Any) -> None:
        self._rows = [{**r, "checked": not r.get("checked")} if r.get("id") == row_id else r for r in self._rows]
        self._changed()

    def set_all_checked(self, flag: bool) -> None:
        self._rows = [{**r, "checked": bool(flag)} for r in self._rows]
        self._changed()

    @property
    def all_checked(self) -> bool:
        return bool(self._rows) and all(r.get("checked") for r in self._rows)

    @property
    def checked_rows(self) -> list[dict]:
        return [r for r in self._rows if r.get("checked")]

    # --- rendering --------------------------------------------------------

    @property
    def state(self) -> TableState:
        if self.error:
            return TableState.ERROR
        if self.loading:
            return TableState.LOADING
        if not self._rows:
            return TableState.NO_DATA
        if self._search and not self.filtered_rows:
            return TableState.NO_MATCH
        return TableState.ROWS

    def render(self) -> RenderedPage:
        visible = [c for c in self.columns if not c.hidden]
        offset = (self._page - 1) * self.row_size
        rendered = [
            RenderedRow(number=i + 1 + offset, row=row, cells=[c.display(row) for c in visible])
            for i, row in enumerate(self.page_rows)
        ]

        state = self.state
        if state == TableState.ERROR:
            message = self.error or ERROR_TEXT
        elif state == TableState.LOADING and not self._rows:
            message = "Loading..."
        elif state in (TableState.NO_DATA, TableState.NO_MATCH):
            message = NO_RECORD_TEXT
        else:
            message = ""

        return RenderedPage(
            rows=rendered,
            page=self._page,
            page_count=self.page_count,
            state=state,
            message=message,
            show_pagination=len(self._rows) > self.row_size and bool(self.filtered_rows),
        )
