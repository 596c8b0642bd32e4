from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause
from .model import Group
from .repository import GroupRepository

_COLUMNS = "id, name, description, course_code, semester, is_active, teacher_id, created_at"


def _to_group(row: Dict[str, Any]) -> Group:
    return Group(
        id=int(row["id"]),
        name=row["name"],
        teacher_id=int(row["teacher_id"]),
        description=row.get("description"),
        course_code=row.get("course_code"),
        semester=row.get("semester"),
        is_active=as_bool(row.get("is_active")),
        created_at=row.get("created_at"),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` WHERE id=%s", (int(group_id),))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def list_for_teacher(self, teacher_id: int, *, active_only: bool = True) -> Sequence[Group]:
        clauses = ["teacher_id=%s"]
        if active_only:
            clauses.append("is_active=1")
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM `groups` WHERE {where} ORDER BY created_at DESC, id DESC",
                (int(teacher_id),),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def list_by_ids(self, group_ids: Sequence[int], *, active_only: bool = True) -> Sequence[Group]:
        if not group_ids:
            return []
        placeholders, params = in_clause(group_ids)
        where = f"id IN ({placeholders})"
        if active_only:
            where += " AND is_active=1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM `groups` WHERE {where} ORDER BY name ASC", params)
            return [_to_group(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        teacher_id: int,
        description: Optional[str] = None,
        course_code: Optional[str] = None,
        semester: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO `groups`(name, description, course_code, semester, teacher_id, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, description, course_code, semester, int(teacher_id)),
            )
            return int(cur.lastrowid)

    def update(self, group: Group) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE `groups`
                SET name=%s, description=%s, course_code=%s, semester=%s, is_active=%s
                WHERE id=%s
                """,
                (
                    group.name,
                    group.description,
                    group.course_code,
                    group.semester,
                    1 if group.is_active else 0,
                    int(group.id),
                ),
            )
            # MySQL reports 0 affected rows when nothing changed; the row still exists.
            return True

    def delete(self, group_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM `groups` WHERE id=%s", (int(group_id),))
            return cur.rowcount > 0
