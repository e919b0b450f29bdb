"""Create the configured database and apply ``database/schema.sql`` to it."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

_DB_DIRECTIVE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")


@contextmanager
def _raw_connection(db_config: dict, *, with_database: bool = True):
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect(with_database=with_database)
    try:
        yield conn
    finally:
        conn.close()


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Yield statements split on ';' outside quoted literals.

    Whole-line ``--`` comments and any CREATE DATABASE / USE lines are dropped,
    since the configured database is always the target.
    """

    sql = _DB_DIRECTIVE.sub("", sql)
    body = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))

    start = 0
    quote = None
    i = 0
    while i < len(body):
        ch = body[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == ";":
            stmt = body[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = body[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with _raw_connection(db_config, with_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Run every statement of the schema file; returns how many were executed."""

    ensure_database_exists(db_config)
    statements = list(iter_sql_statements(Path(schema_path).read_text(encoding="utf-8")))
    with _raw_connection(db_config) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("Applied %d schema statements from %s", len(statements), schema_path)
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with _raw_connection(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
