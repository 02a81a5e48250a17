from __future__ import annotations

import logging
from typing import Callable, Optional

from ..backend.realtime import ChangeEvent, ChangeFeed, Subscription
from ..core.enums import ChangeType
from .store import KeyedStore

logger = logging.getLogger(__name__)

Enricher = Callable[[dict], Optional[dict]]


def apply_event(store: KeyedStore, event: ChangeEvent, *, enrich: Optional[Enricher] = None) -> None:
    """Apply one change event to a store.

    INSERT lands per the store's position policy, UPDATE replaces the whole
    row by key and DELETE removes by the old row's key. `enrich` runs on
    INSERT and UPDATE rows; returning None drops the row.
    """
    if event.type == ChangeType.INSERT:
        row = enrich(dict(event.new)) if enrich is not None else dict(event.new)
        if row is not None:
            store.insert(row)
    elif event.type == ChangeType.UPDATE:
        row = enrich(dict(event.new)) if enrich is not None else dict(event.new)
        if row is None:
            store.remove(event.new.get(store.key))
        else:
            store.replace(row)
    elif event.type == ChangeType.DELETE:
        store.remove(event.old.get(store.key))


class Binding:
    def __init__(self, table: str, store: KeyedStore, subscription: Subscription):
        self.table = table
        self.store = store
        self._subscription = subscription

    @property
    def active(self) -> bool:
        return self._subscription.active

    def close(self) -> None:
        self._subscription.unsubscribe()


class Reconciler:
    """Routes change-feed events of bound tables into keyed stores."""

    def __init__(self, feed: ChangeFeed):
        self._feed = feed
        self._bindings: list[Binding] = []

    def bind(self, table: str, store: KeyedStore, *, enrich: Optional[Enricher] = None) -> Binding:
        def on_event(event: ChangeEvent) -> None:
            apply_event(store, event, enrich=enrich)

        binding = Binding(table, store, self._feed.subscribe(table, on_event))
        self._bindings.append(binding)
        logger.debug("bound %s to local store", table)
        return binding

    @property
    def bindings(self) -> list[Binding]:
        return [b for b in self._bindings if b.active]

    def close_all(self) -> None:
        for binding in self._bindings:
            binding.close()
        self._bindings.clear()
