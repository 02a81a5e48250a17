from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from .engine import TableView

logger = logging.getLogger(__name__)

KeyListener = Callable[[str], Any]

ARROW_DOWN = "ArrowDown"
ARROW_UP = "ArrowUp"


class KeyBus:
    """Process-wide key event dispatcher (the document-level keydown hook)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[KeyListener] = []

    def register(self, listener: KeyListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister(self, listener: KeyListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def dispatch(self, key: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(key)


class RowNavigator:
    """Arrow-key row selection over a TableView's filtered rows.

    The index is clamped to the filtered list; pages are never advanced.
    """

    def __init__(self, view: TableView, on_select: Optional[Callable[[dict], Any]], bus: KeyBus):
        self._view = view
        self._on_select = on_select
        self._bus = bus
        self.selected_index: Optional[int] = None
        self.selected_id: Any = None
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        self._bus.register(self.handle_key)
        self._mounted = True

    def unmount(self) -> None:
        self._bus.unregister(self.handle_key)
        self._mounted = False

    def _select(self, rows: list[dict], index: int) -> None:
        self.selected_index = index
        self.selected_id = rows[index].get("id")
        self._on_select(rows[index])

    def handle_key(self, key: str) -> None:
        rows = self._view.filtered_rows
        if not rows or self._on_select is None:
            return

        last = len(rows) - 1
        if key == ARROW_DOWN:
            index = 0 if self.selected_index is None else min(self.selected_index + 1, last)
        elif key == ARROW_UP:
            index = last if self.selected_index is None else max(self.selected_index - 1, 0)
        else:
            return
        self._select(rows, index)

    def select_row(self, row: dict) -> None:
        """Click selection: the index follows the row's position in the filtered list."""
        rows = self._view.filtered_rows
        if self._on_select is None:
            return
        for index, candidate in enumerate(rows):
            if candidate.get("id") == row.get("id"):
                self._select(rows, index)
                return
        logger.debug("row %r is not in the filtered rows", row.get("id"))
