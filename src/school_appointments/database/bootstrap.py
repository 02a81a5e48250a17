from __future__ import annotations

import re
import uuid
from pathlib import Path
from typing import Union

from werkzeug.security import generate_password_hash

from ..core.constants import DEFAULT_SLOT_MAX, TIME_SLOT_LABELS
from ..core.enums import Role
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone

# Quoted strings and line comments are kept whole so a ';' inside them
# does not end a statement.
_SQL_TOKEN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|--[^\n]*|;|[^'";-]+|-""", re.S)

# schema.sql names its own database; the configured one wins.
_SKIPPED = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.I)


def split_statements(sql: str) -> list[str]:
    statements: list[str] = []
    current: list[str] = []
    for match in _SQL_TOKEN.finditer(sql):
        token = match.group(0)
        if token == ";":
            statements.append("".join(current).strip())
            current = []
        elif not token.startswith("--"):
            current.append(token)
    statements.append("".join(current).strip())
    return [s for s in statements if s and not _SKIPPED.match(s)]


def ensure_database_exists(db_config: dict) -> None:
    conn = DatabaseConnection.from_dict(db_config)
    with db_cursor(conn, dictionary=False, with_database=False) as (_, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    ensure_database_exists(db_config)
    statements = split_statements(Path(schema_path).read_text(encoding="utf-8"))
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        for statement in statements:
            cur.execute(statement)


def ensure_seed_data(db_config: dict, *, admin_email: str, admin_password: str) -> None:
    """Fixed time slots plus one superadmin account. Safe to run on every start."""
    with db_cursor(DatabaseConnection.from_dict(db_config)) as (_, cur):
        for label in TIME_SLOT_LABELS:
            cur.execute("SELECT id FROM appointment_time WHERE time=%s", (label,))
            if fetchone(cur) is None:
                cur.execute("INSERT INTO appointment_time (time, max) VALUES (%s, %s)", (label, DEFAULT_SLOT_MAX))

        if not admin_email:
            return

        cur.execute("SELECT id FROM auth_users WHERE email=%s", (admin_email,))
        identity = fetchone(cur)
        auth_id = identity["id"] if identity else str(uuid.uuid4())
        if identity is None:
            cur.execute(
                "INSERT INTO auth_users (id, email, password_hash) VALUES (%s, %s, %s)",
                (auth_id, admin_email, generate_password_hash(admin_password)),
            )

        cur.execute("SELECT id FROM users WHERE auth_id=%s", (auth_id,))
        if fetchone(cur) is None:
            cur.execute(
                "INSERT INTO users (firstname, lastname, role, status, auth_id) VALUES (%s, %s, %s, 1, %s)",
                ("System", "Administrator", Role.SUPERADMIN.value, auth_id),
            )


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(DatabaseConnection.from_dict(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
