from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "id, email, password_hash, name, role, created_at, last_login"


def _to_user(row: Dict[str, Any]) -> User:
    return User(
        id=int(row["id"]),
        email=row["email"],
        name=row["name"],
        role=Role(row["role"]),
        password_hash=row["password_hash"],
        created_at=row.get("created_at"),
        last_login=row.get("last_login"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        student_profile: bool = False,
    ) -> int:
        # Both rows commit together.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, password_hash, name, role)
                VALUES(%s,%s,%s,%s)
                """,
                (email, password_hash, name, role.value),
            )
            user_id = int(cur.lastrowid)

            if student_profile:
                cur.execute(
                    "INSERT INTO students(user_id, name, email) VALUES(%s,%s,%s)",
                    (user_id, name, email),
                )
            return user_id

    def update_last_login(self, user_id: int, *, when: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE id=%s", (when, int(user_id)))
            return cur.rowcount > 0
