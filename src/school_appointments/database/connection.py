from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "appointment_db"

    @classmethod
    def from_dict(cls, values: dict) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(values.get("host") or defaults.host),
            port=int(values.get("port") or defaults.port),
            user=str(values.get("user") or defaults.user),
            password=str(values.get("password") or ""),
            database=str(values.get("database") or defaults.database),
        )

    def connect_args(self, *, with_database: bool = True) -> dict:
        args = {"host": self.host, "port": self.port, "user": self.user, "password": self.password}
        if with_database:
            args["database"] = self.database
        return args


class DatabaseConnection:
    """Opens one short-lived mysql-connector connection per unit of work.

    The container builds a single instance and hands it to the MySQL
    gateway and identity store.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def from_dict(cls, db_config: dict) -> "DatabaseConnection":
        return cls(DBConfig.from_dict(db_config))

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self, *, with_database: bool = True):
        return mysql.connector.connect(**self._config.connect_args(with_database=with_database))
