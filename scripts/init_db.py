from __future__ import annotations

import logging

from dotenv import load_dotenv

from school_appointments.database.bootstrap import apply_schema, ensure_seed_data, list_tables
from school_appointments.main import SCHEMA_PATH, load_settings

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    db_config = dict(settings.db_config)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    ensure_seed_data(db_config, admin_email=settings.admin_email, admin_password=settings.admin_password)
    logger.info(
        "schema and seed applied to %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(list_tables(db_config)),
    )


if __name__ == "__main__":
    main()
