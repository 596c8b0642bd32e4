from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, StatusCount
from .repository import AttendanceRepository

_COLUMNS = "id, lesson_id, student_id, status, scanned_at, created_at"


def _to_record(row: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(row["id"]),
        lesson_id=int(row["lesson_id"]),
        student_id=int(row["student_id"]),
        status=AttendanceStatus(row["status"]),
        scanned_at=row["scanned_at"],
        created_at=row.get("created_at"),
    )


def _fetch_pair(cur, lesson_id: int, student_id: int) -> AttendanceRecord:
    cur.execute(
        f"SELECT {_COLUMNS} FROM attendance WHERE lesson_id=%s AND student_id=%s",
        (int(lesson_id), int(student_id)),
    )
    row = fetchone(cur)
    if row is None:
        # INSERT IGNORE also swallows FK violations: lesson or student vanished meanwhile.
        raise NotFoundError("Lesson or student not found")
    return _to_record(row)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(attendance_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create_if_absent(
        self,
        *,
        lesson_id: int,
        student_id: int,
        status: AttendanceStatus,
        scanned_at: datetime,
    ) -> tuple[AttendanceRecord, bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            # The unique (lesson_id, student_id) key turns a second insert into a no-op.
            cur.execute(
                """
                INSERT IGNORE INTO attendance(lesson_id, student_id, status, scanned_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(lesson_id), int(student_id), status.value, scanned_at),
            )
            created = cur.rowcount == 1
            return _fetch_pair(cur, lesson_id, student_id), created

    def upsert(
        self,
        *,
        lesson_id: int,
        student_id: int,
        status: AttendanceStatus,
        scanned_at: datetime,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(lesson_id, student_id, status, scanned_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), scanned_at=VALUES(scanned_at)
                """,
                (int(lesson_id), int(student_id), status.value, scanned_at),
            )
            return _fetch_pair(cur, lesson_id, student_id)

    def update_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance SET status=%s WHERE id=%s", (status.value, int(attendance_id)))
            return True

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE lesson_id=%s ORDER BY created_at DESC, id DESC",
                (int(lesson_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_lessons(self, lesson_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        if not lesson_ids:
            return []
        placeholders, params = in_clause(lesson_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE lesson_id IN ({placeholders}) ORDER BY created_at DESC, id DESC",
                params,
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id=%s ORDER BY created_at DESC, id DESC",
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_students(self, student_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        if not student_ids:
            return []
        placeholders, params = in_clause(student_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id IN ({placeholders}) ORDER BY created_at DESC, id DESC",
                params,
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_status_for_group(self, group_id: int) -> Sequence[StatusCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.student_id, a.status, COUNT(a.id) AS n
                FROM attendance a
                JOIN lessons l ON l.id = a.lesson_id
                WHERE l.group_id=%s
                GROUP BY a.student_id, a.status
                ORDER BY a.student_id ASC, a.status ASC
                """,
                (int(group_id),),
            )
            return [
                StatusCount(
                    student_id=int(r["student_id"]),
                    status=AttendanceStatus(r["status"]),
                    count=int(r["n"]),
                )
                for r in fetchall(cur)
            ]
