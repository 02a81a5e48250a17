from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


@dataclass(frozen=True)
class Column:
    """Column descriptor of a TableView.

    `format` renders the display value from the whole row; it is also the
    text searched when present.
    """

    label: str
    field: str
    sortable: bool = False
    format: Optional[Callable[[dict], Any]] = None
    empty_text: str = "None"
    hidden: bool = False
    searchable: bool = True
    search_exact: bool = False
    nowrap: bool = False
    truncated: bool = False
    width: Optional[Union[int, str]] = None

    def search_text(self, row: dict) -> str:
        if self.format is not None:
            return str(self.format(row))
        return _cell_text(row.get(self.field))

    def display(self, row: dict) -> str:
        if not row.get(self.field):
            return self.empty_text or "None"
        if self.format is not None:
            return str(self.format(row))
        return str(row.get(self.field))


def _cell_text(value: Any) -> str:
    # Missing cells never match a non-empty term.
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
