from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "edumark"

    @classmethod
    def from_dict(cls, values: dict) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys keep the defaults."""

        known = {k: values[k] for k in ("host", "port", "user", "password", "database") if k in values}
        if "port" in known:
            known["port"] = int(known["port"])
        return cls(**known)


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call opens and closes its own connection; nothing is pooled.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        cfg = self.config
        params = {"host": cfg.host, "port": cfg.port, "user": cfg.user, "password": cfg.password}
        if with_database:
            params["database"] = cfg.database
        return mysql.connector.connect(use_pure=True, **params)
