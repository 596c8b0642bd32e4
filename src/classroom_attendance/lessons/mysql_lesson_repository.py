from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause
from .model import Lesson
from .repository import LessonRepository

_COLUMNS = "id, group_id, teacher_id, title, description, date, duration, qr_code, is_active, created_at"


def _to_lesson(row: Dict[str, Any]) -> Lesson:
    return Lesson(
        id=int(row["id"]),
        group_id=int(row["group_id"]),
        teacher_id=int(row["teacher_id"]),
        title=row["title"],
        date=row["date"],
        duration=int(row["duration"]),
        qr_code=row.get("qr_code"),
        description=row.get("description"),
        is_active=as_bool(row.get("is_active")),
        created_at=row.get("created_at"),
    )


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lessons WHERE id=%s", (int(lesson_id),))
            row = fetchone(cur)
            return _to_lesson(row) if row else None

    def get_active_by_qr_code(self, qr_code: str) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lessons
                WHERE qr_code=%s AND is_active=1
                ORDER BY date DESC, id DESC
                LIMIT 1
                """,
                (qr_code,),
            )
            row = fetchone(cur)
            return _to_lesson(row) if row else None

    def list_for_group(self, group_id: int, *, limit: Optional[int] = None) -> Sequence[Lesson]:
        sql = f"SELECT {_COLUMNS} FROM lessons WHERE group_id=%s ORDER BY date DESC, id DESC"
        params: list[object] = [int(group_id)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_lesson(r) for r in fetchall(cur)]

    def list_by_ids(self, lesson_ids: Sequence[int]) -> Sequence[Lesson]:
        if not lesson_ids:
            return []
        placeholders, params = in_clause(lesson_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lessons WHERE id IN ({placeholders})", params)
            return [_to_lesson(r) for r in fetchall(cur)]

    def list_active_for_teacher(self, teacher_id: int) -> Sequence[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM lessons WHERE teacher_id=%s AND is_active=1 ORDER BY date ASC, id ASC",
                (int(teacher_id),),
            )
            return [_to_lesson(r) for r in fetchall(cur)]

    def count_for_groups(self, group_ids: Sequence[int]) -> int:
        if not group_ids:
            return 0
        placeholders, params = in_clause(group_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM lessons WHERE group_id IN ({placeholders})", params)
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(
        self,
        *,
        group_id: int,
        teacher_id: int,
        title: str,
        date: datetime,
        duration: int,
        qr_code: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lessons(group_id, teacher_id, title, description, date, duration, qr_code, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (int(group_id), int(teacher_id), title, description, date, int(duration), qr_code),
            )
            return int(cur.lastrowid)

    def update(self, lesson: Lesson) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET title=%s, description=%s, date=%s, duration=%s, qr_code=%s, is_active=%s
                WHERE id=%s
                """,
                (
                    lesson.title,
                    lesson.description,
                    lesson.date,
                    int(lesson.duration),
                    lesson.qr_code,
                    1 if lesson.is_active else 0,
                    int(lesson.id),
                ),
            )
            return True

    def delete(self, lesson_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM lessons WHERE id=%s", (int(lesson_id),))
            return cur.rowcount > 0
