from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, user_id, name, email, phone, group_id, created_at"


def _to_student(row: Dict[str, Any]) -> Student:
    return Student(
        id=int(row["id"]),
        name=row["name"],
        user_id=int(row["user_id"]) if row.get("user_id") is not None else None,
        email=row.get("email"),
        phone=row.get("phone"),
        group_id=int(row["group_id"]) if row.get("group_id") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(student_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name ASC, id ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def list_for_group(self, group_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE group_id=%s ORDER BY name ASC, id ASC",
                (int(group_id),),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        if not student_ids:
            return []
        placeholders, params = in_clause(student_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id IN ({placeholders}) ORDER BY name ASC",
                params,
            )
            return [_to_student(r) for r in fetchall(cur)]

    def count_for_group(self, group_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM students WHERE group_id=%s", (int(group_id),))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(
        self,
        *,
        name: str,
        user_id: Optional[int] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        group_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(user_id, name, email, phone, group_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user_id, name, email, phone, group_id),
            )
            return int(cur.lastrowid)

    def update(self, student: Student) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET name=%s, email=%s, phone=%s, group_id=%s
                WHERE id=%s
                """,
                (student.name, student.email, student.phone, student.group_id, int(student.id)),
            )
            return True

    def set_group(self, student_id: int, group_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE students SET group_id=%s WHERE id=%s", (group_id, int(student_id)))
            return True

    def delete(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(student_id),))
            return cur.rowcount > 0
