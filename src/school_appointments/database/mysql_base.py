from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Optional

import mysql.connector

from ..core.exceptions import BackendError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, with_database: bool = True):
    """Yield (connection, cursor) for one unit of work and commit when it ends.

    Driver errors roll back and surface as BackendError with the server's
    message.
    """
    try:
        conn = conn_factory.connect(with_database=with_database)
    except mysql.connector.Error as e:
        raise BackendError(str(e), title="Database Error") from e

    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        raise BackendError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[dict]:
    row = cur.fetchone()
    return dict(row) if row else None


def fetchall(cur) -> list[dict]:
    return [dict(r) for r in cur.fetchall() or []]


def normalize_mysql_value(value: Any) -> Any:
    """Driver value -> the shape rows carry through the app.

    DATE comes back as YYYY-MM-DD text, DATETIME as an ISO string.
    """
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return value
