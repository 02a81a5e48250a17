from __future__ import annotations

import logging
from typing import Optional

from ..backend.client import BackendClient
from ..core.constants import (
    T_APPOINTMENT_TIME,
    T_APPOINTMENTS,
    T_DISABLED_DATES,
    T_REASONS,
    T_SECTIONS,
    T_USERS,
)
from ..core.enums import InsertPosition
from .reconciler import Binding, Reconciler
from .store import KeyedStore

logger = logging.getLogger(__name__)


class LiveData:
    """Local collections of the shared tables, kept current by the change feed.

    `mount()` seeds every store with a fetch and then subscribes; an event
    arriving between the two can be missed or applied twice.
    """

    def __init__(self, client: BackendClient, reconciler: Reconciler):
        self._client = client
        self._reconciler = reconciler
        self._bindings: list[Binding] = []

        self.appointments = KeyedStore(position=InsertPosition.PREPEND)
        self.sections = KeyedStore()
        self.reasons = KeyedStore()
        self.users = KeyedStore()
        self.disabled_dates = KeyedStore()
        self.appointment_times = KeyedStore()

    @property
    def mounted(self) -> bool:
        return bool(self._bindings)

    def _email_index(self) -> dict[str, str]:
        return {u.id: u.email for u in self._client.auth.admin_list_users()}

    def with_email(self, row: dict, emails: Optional[dict[str, str]] = None) -> Optional[dict]:
        emails = self._email_index() if emails is None else emails
        email = emails.get(row.get("auth_id"))
        if not email:
            return None
        return {**row, "email": email}

    def _stores(self) -> list[tuple[str, KeyedStore]]:
        return [
            (T_APPOINTMENTS, self.appointments),
            (T_SECTIONS, self.sections),
            (T_REASONS, self.reasons),
            (T_USERS, self.users),
            (T_DISABLED_DATES, self.disabled_dates),
            (T_APPOINTMENT_TIME, self.appointment_times),
        ]

    def refresh(self) -> None:
        self.appointments.replace_all(
            self._client.table(T_APPOINTMENTS).select().order("created_at", ascending=False).execute()
        )
        emails = self._email_index()
        users = (self.with_email(r, emails) for r in self._client.table(T_USERS).select().order("id").execute())
        self.users.replace_all(u for u in users if u is not None)
        for table, store in self._stores():
            if store in (self.appointments, self.users):
                continue
            store.replace_all(self._client.table(table).select().order("id").execute())

    def mount(self) -> None:
        if self.mounted:
            return
        self.refresh()
        for table, store in self._stores():
            enrich = self.with_email if store is self.users else None
            self._bindings.append(self._reconciler.bind(table, store, enrich=enrich))
        logger.info("live data mounted (%d tables)", len(self._bindings))

    def unmount(self) -> None:
        for binding in self._bindings:
            binding.close()
        self._bindings.clear()
        logger.info("live data unmounted")

    def appointment_details(self) -> list[dict]:
        """Appointments (newest first) with their `user` and `section` rows joined in."""
        users = {u["id"]: u for u in self.users.snapshot()}
        sections = {s["id"]: s for s in self.sections.snapshot()}
        return [
            {**a, "user": users.get(a.get("student_id")), "section": sections.get(a.get("section_id"))}
            for a in self.appointments.snapshot()
        ]
