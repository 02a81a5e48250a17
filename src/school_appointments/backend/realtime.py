from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from ..core.enums import ChangeType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """One row change on a table: `new` for INSERT/UPDATE, `old` for UPDATE/DELETE."""

    table: str
    type: ChangeType
    new: dict = field(default_factory=dict)
    old: dict = field(default_factory=dict)


ChangeCallback = Callable[[ChangeEvent], Any]


class Subscription:
    def __init__(self, feed: "ChangeFeed", table: str, callback: ChangeCallback, events: frozenset[ChangeType]):
        self._feed = feed
        self.table = table
        self.callback = callback
        self.events = events
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._feed._remove(self)


class ChangeFeed:
    """Per-table change subscriptions.

    Events are delivered synchronously, in publish order, to the
    subscriptions registered when `publish` is called.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        events: Optional[Iterable[ChangeType]] = None,
    ) -> Subscription:
        kinds = frozenset(events) if events else frozenset(ChangeType)
        sub = Subscription(self, table, callback, kinds)
        with self._lock:
            self._subscriptions.setdefault(table, []).append(sub)
        logger.debug("subscribed to %s (%s)", table, ",".join(sorted(k.value for k in kinds)))
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(sub.table, [])
            if sub in subs:
                subs.remove(sub)
        logger.debug("unsubscribed from %s", sub.table)

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(table, []))

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [s for s in self._subscriptions.get(event.table, []) if event.type in s.events]
            for sub in targets:
                if sub.active:
                    sub.callback(event)

    def publish_many(self, table: str, kind: ChangeType, changes: Iterable[tuple[dict, dict]]) -> None:
        for new, old in changes:
            self.publish(ChangeEvent(table=table, type=kind, new=new, old=old))
