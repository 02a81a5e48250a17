from pathlib import Path

from school_appointments.database import bootstrap
from school_appointments.database.bootstrap import split_statements
from school_appointments.main import SCHEMA_PATH


def test_semicolons_inside_quotes_and_comments_do_not_split():
    sql = """
    -- seed; not a statement
    INSERT INTO reasons (reason) VALUES ('a;b');
    INSERT INTO reasons (reason) VALUES ("it's; fine");
    SELECT 1 - 1
    """

    assert split_statements(sql) == [
        "INSERT INTO reasons (reason) VALUES ('a;b')",
        "INSERT INTO reasons (reason) VALUES (\"it's; fine\")",
        "SELECT 1 - 1",
    ]


def test_schema_file_creates_every_table_without_choosing_a_database():
    statements = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

    assert not any(s.upper().startswith(("USE", "CREATE DATABASE")) for s in statements)
    created = [s.split()[5] for s in statements if s.upper().startswith("CREATE TABLE IF NOT EXISTS")]
    assert created == [
        "auth_users",
        "users",
        "sections",
        "reasons",
        "appointment_time",
        "disabled_dates",
        "appointments",
    ]


def test_schema_ships_inside_the_package():
    assert SCHEMA_PATH.parent == Path(bootstrap.__file__).resolve().parent
    assert SCHEMA_PATH.is_file()
