from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .connection import DatabaseConnection, DBConfig

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_schema_statements(sql: str) -> Iterable[str]:
    """Split schema.sql into statements; it holds no string literal containing ';'."""
    for part in _strip_comments(sql).split(";"):
        stmt = part.strip()
        if stmt:
            yield stmt


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(config)

    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_schema_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def list_tables(config: DBConfig) -> list[str]:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
