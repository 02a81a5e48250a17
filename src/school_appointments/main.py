from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from .config import Settings, get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_seed_data, list_tables
from . import errors
from .appointments.controller import register as register_appointments
from .booking.controller import register as register_booking
from .maintenance.controller import register as register_maintenance
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"


def load_settings(settings_module: Optional[str] = None, overrides: Optional[dict[str, Any]] = None) -> Settings:
    module = importlib.import_module(settings_module or get_settings_module())
    return Settings.from_module(module, overrides)


def create_app(
    settings_module: Optional[str] = None,
    *,
    overrides: Optional[dict[str, Any]] = None,
    container: Optional[Container] = None,
) -> Flask:
    load_dotenv(override=False)

    settings = container.settings if container is not None else load_settings(settings_module, overrides)
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["DEBUG"] = settings.debug
    app.config["TESTING"] = settings.testing

    if settings.backend == "mysql":
        db = settings.db_config
        logger.info("backend=mysql db=%s@%s:%s/%s", db.get("user"), db.get("host"), db.get("port", 3306), db.get("database"))
        if settings.auto_init_db:
            apply_schema(db, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db)))
        if settings.auto_seed_db:
            ensure_seed_data(db, admin_email=settings.admin_email, admin_password=settings.admin_password)
            logger.info("seed ready")
    else:
        logger.info("backend=memory")

    if container is None:
        container = build_container(settings=settings)
    app.extensions["school_appointments"] = container

    errors.register(app)
    register_users(app, container)
    register_booking(app, container)
    register_appointments(app, container)
    register_maintenance(app, container)

    if settings.live_data_enabled:
        container.live.mount()
    if settings.auto_cancel_enabled:
        container.sweeper.start()

    return app
