from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Optional

from ..core.constants import AUTO_CANCEL_INTERVAL_SECONDS, DEFAULT_ROW_SIZE


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "school_appointments.config.production"

    if env in {"test", "testing"}:
        return "school_appointments.config.testing"

    return "school_appointments.config.development"


@dataclass(frozen=True)
class Settings:
    """Typed view over a settings module (plus optional overrides)."""

    secret_key: str
    debug: bool = False
    testing: bool = False
    backend: str = "memory"
    db_config: dict = field(default_factory=dict)
    auto_init_db: bool = False
    auto_seed_db: bool = False
    row_size: int = DEFAULT_ROW_SIZE
    auto_cancel_enabled: bool = True
    auto_cancel_interval_seconds: float = AUTO_CANCEL_INTERVAL_SECONDS
    live_data_enabled: bool = True
    password_reset_redirect: str = "http://localhost:5000/forgot/reset"
    admin_email: str = "admin@school.local"
    admin_password: str = "admin123"

    @classmethod
    def from_module(cls, module: ModuleType, overrides: Optional[dict[str, Any]] = None) -> "Settings":
        values = {name: getattr(module, name) for name in dir(module) if name.isupper()}
        values.update(overrides or {})

        backend = str(values.get("BACKEND", "memory")).lower()
        if backend not in {"memory", "mysql"}:
            raise ValueError(f"Unknown BACKEND setting: {backend!r}")

        return cls(
            secret_key=str(values["SECRET_KEY"]),
            debug=bool(values.get("DEBUG", False)),
            testing=bool(values.get("TESTING", False)),
            backend=backend,
            db_config=dict(values.get("DB_CONFIG") or {}),
            auto_init_db=bool(values.get("AUTO_INIT_DB", False)),
            auto_seed_db=bool(values.get("AUTO_SEED_DB", False)),
            row_size=int(values.get("ROW_SIZE", DEFAULT_ROW_SIZE)),
            auto_cancel_enabled=bool(values.get("AUTO_CANCEL_ENABLED", True)),
            auto_cancel_interval_seconds=float(
                values.get("AUTO_CANCEL_INTERVAL_SECONDS", AUTO_CANCEL_INTERVAL_SECONDS)
            ),
            live_data_enabled=bool(values.get("LIVE_DATA_ENABLED", True)),
            password_reset_redirect=str(values.get("PASSWORD_RESET_REDIRECT", cls.password_reset_redirect)),
            admin_email=str(values.get("ADMIN_EMAIL", cls.admin_email)),
            admin_password=str(values.get("ADMIN_PASSWORD", cls.admin_password)),
        )
