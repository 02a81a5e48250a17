from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SortDirection
from ..core.exceptions import ValidationError
from .columns import Column
from .engine import TableView


def _name(row: dict) -> str:
    return f"{row.get('firstname') or ''} {row.get('lastname') or ''}".strip()


def _active(row: dict) -> str:
    return "Active" if row.get("status") else "Disabled"


APPOINTMENT_COLUMNS = [
    Column("Code", "qrcode", sortable=True, search_exact=True, nowrap=True),
    Column("SID", "student_number", sortable=True),
    Column("Name", "student_name", sortable=True),
    Column("Section", "section_code", sortable=True),
    Column("Time", "appointment_time", sortable=True, nowrap=True),
    Column("Status", "status_label", sortable=True),
    Column("Staff", "staff_name", empty_text="None", truncated=True),
]

USER_COLUMNS = [
    Column("Name", "firstname", sortable=True, format=_name),
    Column("Email", "email", sortable=True),
    Column("Role", "role", sortable=True),
    Column("Status", "status", format=_active, searchable=False),
]

STUDENT_COLUMNS = [
    Column("SID", "student_id", sortable=True, search_exact=True),
    Column("Name", "firstname", sortable=True, format=_name),
    Column("Email", "email", sortable=True),
    Column("Gender", "gender"),
    Column("Status", "status", format=_active, searchable=False),
]


def table_page(
    columns: Sequence[Column],
    rows: list[dict],
    *,
    search=None,
    sort: Optional[str] = None,
    direction: Optional[str] = None,
    page: int = 1,
    row_size: int,
) -> dict:
    """One page of `rows` as the admin screens list it."""
    view = TableView(columns, rows, row_size=row_size, with_numbering=True)
    if search:
        view.search = search
    if sort:
        if sort not in {c.field for c in columns if c.sortable}:
            raise ValidationError(f"Cannot sort by '{sort}'.", title="Invalid Sort")
        view.toggle_sort(sort)
        if direction == SortDirection.DESC.value:
            view.toggle_sort(sort)
    view.set_page(page)

    rendered = view.render()
    return {
        "rows": [dict(r.row, number=r.number) for r in rendered.rows],
        "page": rendered.page,
        "page_count": rendered.page_count,
        "total": len(view.filtered_rows),
        "state": rendered.state.value,
        "message": rendered.message,
        "show_pagination": rendered.show_pagination,
    }


def search_terms(values: list[str]):
    terms = [v for v in (x.strip() for x in values) if v]
    if not terms:
        return None
    return terms[0] if len(terms) == 1 else terms
