from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .appointments.backend_appointment_repository import BackendAppointmentRepository
from .appointments.report import ReportService
from .appointments.service import AppointmentService
from .appointments.sweeper import AutoCancelSweeper
from .backend.auth import IdentityStore, InMemoryIdentityStore, MySQLIdentityStore, PasswordAuth
from .backend.client import BackendClient
from .backend.gateway import RowGateway
from .backend.memory import InMemoryGateway
from .backend.mysql import MySQLGateway
from .backend.realtime import ChangeFeed
from .booking.qr import render_labeled_qr
from .booking.service import AvailabilityService, BookingService
from .common.datetime_utils import now_local
from .config import Settings
from .core.constants import DEFAULT_SLOT_MAX, T_APPOINTMENT_TIME, T_USERS, TIME_SLOT_LABELS
from .core.enums import Role
from .database.connection import DatabaseConnection
from .maintenance.backend_maintenance_repository import (
    BackendAppointmentTimeRepository,
    BackendDisabledDateRepository,
    BackendReasonRepository,
    BackendSectionRepository,
)
from .maintenance.service import MaintenanceService, SettingsService
from .sync.live import LiveData
from .sync.reconciler import Reconciler
from .users.backend_user_repository import BackendUserRepository
from .users.service import AuthService, UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    settings: Settings

    feed: ChangeFeed
    client: BackendClient

    users_repo: BackendUserRepository
    sections_repo: BackendSectionRepository
    reasons_repo: BackendReasonRepository
    times_repo: BackendAppointmentTimeRepository
    disabled_dates_repo: BackendDisabledDateRepository
    appointments_repo: BackendAppointmentRepository

    auth_service: AuthService
    user_service: UserService
    maintenance_service: MaintenanceService
    settings_service: SettingsService
    availability_service: AvailabilityService
    booking_service: BookingService
    appointment_service: AppointmentService
    report_service: ReportService

    reconciler: Reconciler
    live: LiveData
    sweeper: AutoCancelSweeper


def _backend(settings: Settings, feed: ChangeFeed, now: Callable[[], datetime]) -> tuple[RowGateway, IdentityStore]:
    if settings.backend == "mysql":
        conn = DatabaseConnection.from_dict(settings.db_config)
        return MySQLGateway(conn, feed), MySQLIdentityStore(conn)
    return InMemoryGateway(feed, clock=now), InMemoryIdentityStore()


def seed_memory_backend(client: BackendClient, *, admin_email: str, admin_password: str) -> None:
    """Time slots and one superadmin, as the MySQL seed does."""
    for label in TIME_SLOT_LABELS:
        if not client.table(T_APPOINTMENT_TIME).select().eq("time", label).execute():
            client.table(T_APPOINTMENT_TIME).insert({"time": label, "max": DEFAULT_SLOT_MAX}).execute()

    if not admin_email:
        return
    identity = client.auth.admin_create_user(admin_email, admin_password)
    client.table(T_USERS).insert(
        {
            "firstname": "System",
            "lastname": "Administrator",
            "role": Role.SUPERADMIN.value,
            "status": True,
            "auth_id": identity.id,
        }
    ).execute()
    logger.info("seeded superadmin %s", admin_email)


def build_container(
    *,
    settings: Settings,
    now: Callable[[], datetime] = now_local,
    renderer: Callable[[str], bytes] = render_labeled_qr,
    qrcode_factory: Optional[Callable[[], str]] = None,
) -> Container:
    feed = ChangeFeed()
    gateway, identities = _backend(settings, feed, now)
    auth = PasswordAuth(identities)
    client = BackendClient(gateway, auth, feed)

    if settings.backend == "memory" and settings.auto_seed_db:
        seed_memory_backend(client, admin_email=settings.admin_email, admin_password=settings.admin_password)

    users_repo = BackendUserRepository(client)
    sections_repo = BackendSectionRepository(client)
    reasons_repo = BackendReasonRepository(client)
    times_repo = BackendAppointmentTimeRepository(client)
    disabled_dates_repo = BackendDisabledDateRepository(client)
    appointments_repo = BackendAppointmentRepository(client)

    def today():
        return now().date()

    availability_service = AvailabilityService(appointments_repo, times_repo, disabled_dates_repo, today=today)
    booking_kwargs = {"renderer": renderer, "now": now}
    if qrcode_factory is not None:
        booking_kwargs["qrcode_factory"] = qrcode_factory
    booking_service = BookingService(appointments_repo, sections_repo, availability_service, **booking_kwargs)
    appointment_service = AppointmentService(appointments_repo, availability_service, now=now)

    reconciler = Reconciler(feed)

    return Container(
        settings=settings,
        feed=feed,
        client=client,
        users_repo=users_repo,
        sections_repo=sections_repo,
        reasons_repo=reasons_repo,
        times_repo=times_repo,
        disabled_dates_repo=disabled_dates_repo,
        appointments_repo=appointments_repo,
        auth_service=AuthService(users_repo, auth),
        user_service=UserService(users_repo, auth),
        maintenance_service=MaintenanceService(sections_repo, reasons_repo),
        settings_service=SettingsService(times_repo, disabled_dates_repo),
        availability_service=availability_service,
        booking_service=booking_service,
        appointment_service=appointment_service,
        report_service=ReportService(appointments_repo),
        reconciler=reconciler,
        live=LiveData(client, reconciler),
        sweeper=AutoCancelSweeper(appointment_service, interval=settings.auto_cancel_interval_seconds),
    )
