from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[int]) -> tuple[str, tuple[int, ...]]:
    """Build ``%s,%s,...`` placeholders and params for ``IN (...)`` filters.

    Callers must not pass an empty sequence (``IN ()`` is invalid SQL).
    """

    params = tuple(int(v) for v in values)
    return ",".join(["%s"] * len(params)), params


def as_bool(value: Any) -> bool:
    # TINYINT(1) comes back as int
    return bool(int(value)) if value is not None else False
