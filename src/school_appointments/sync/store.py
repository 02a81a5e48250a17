from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Optional

from ..core.enums import InsertPosition

StoreListener = Callable[[list[dict]], Any]


class KeyedStore:
    """Ordered local copy of one table, keyed by `key`.

    Listeners receive a snapshot after every change.
    """

    def __init__(self, *, key: str = "id", position: InsertPosition = InsertPosition.APPEND):
        self.key = key
        self.position = position
        self._lock = threading.RLock()
        self._rows: list[dict] = []
        self._listeners: list[StoreListener] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def snapshot(self) -> list[dict]:
        with self._lock:
            return [dict(r) for r in self._rows]

    def get(self, key_value: Any) -> Optional[dict]:
        with self._lock:
            for row in self._rows:
                if row.get(self.key) == key_value:
                    return dict(row)
        return None

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            rows = [dict(r) for r in self._rows]
        for listener in listeners:
            listener(rows)

    def replace_all(self, rows: Iterable[dict]) -> None:
        with self._lock:
            self._rows = [dict(r) for r in rows]
        self._notify()

    def insert(self, row: dict) -> None:
        with self._lock:
            if self.position == InsertPosition.PREPEND:
                self._rows.insert(0, dict(row))
            else:
                self._rows.append(dict(row))
        self._notify()

    def replace(self, row: dict) -> bool:
        """Swap the stored row that has the same key for `row` (no field merge)."""
        key_value = row.get(self.key)
        with self._lock:
            found = False
            for index, current in enumerate(self._rows):
                if current.get(self.key) == key_value:
                    self._rows[index] = dict(row)
                    found = True
        if found:
            self._notify()
        return found

    def upsert(self, row: dict) -> None:
        if not self.replace(row):
            self.insert(row)

    def remove(self, key_value: Any) -> bool:
        with self._lock:
            before = len(self._rows)
            self._rows = [r for r in self._rows if r.get(self.key) != key_value]
            removed = len(self._rows) != before
        if removed:
            self._notify()
        return removed

    def view(
        self,
        predicate: Optional[Callable[[dict], bool]] = None,
        *,
        sort_key: Optional[Callable[[dict], Any]] = None,
        reverse: bool = False,
    ) -> "DerivedView":
        return DerivedView(self, predicate, sort_key=sort_key, reverse=reverse)


class DerivedView:
    """Filtered/sorted projection of a KeyedStore, recomputed on each change."""

    def __init__(
        self,
        store: KeyedStore,
        predicate: Optional[Callable[[dict], bool]] = None,
        *,
        sort_key: Optional[Callable[[dict], Any]] = None,
        reverse: bool = False,
    ):
        self._store = store
        self._predicate = predicate
        self._sort_key = sort_key
        self._reverse = reverse
        self._rows = self._compute(store.snapshot())
        self._listeners: list[StoreListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = store.subscribe(self._on_change)

    def _compute(self, rows: list[dict]) -> list[dict]:
        if self._predicate is not None:
            rows = [r for r in rows if self._predicate(r)]
        if self._sort_key is not None:
            rows = sorted(rows, key=self._sort_key, reverse=self._reverse)
        return rows

    def _on_change(self, rows: list[dict]) -> None:
        self._rows = self._compute(rows)
        for listener in list(self._listeners):
            listener(list(self._rows))

    @property
    def rows(self) -> list[dict]:
        return list(self._rows)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
