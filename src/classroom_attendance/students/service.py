from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..auth.tokens import Identity
from ..common.ownership import OwnershipPolicy
from ..common.serialization import fields_of
from ..common.validators import optional_id, optional_str, require_non_empty
from ..core.exceptions import NotFoundError
from ..groups.repository import GroupRepository
from ..lessons.repository import LessonRepository
from ..lessons.views import lesson_view
from ..users.model import TeacherSummary
from ..users.repository import UserRepository
from .model import Student
from .repository import StudentRepository


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        groups: GroupRepository,
        lessons: LessonRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        policy: OwnershipPolicy,
    ):
        self._students = students
        self._groups = groups
        self._lessons = lessons
        self._attendance = attendance
        self._users = users
        self._policy = policy

    def _get(self, student_id: int) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def _group_with_teacher(self, group_id: Optional[int]) -> Optional[dict]:
        if group_id is None:
            return None
        group = self._groups.get_by_id(group_id)
        if not group:
            return None
        teacher = self._users.get_by_id(group.teacher_id)
        return {
            **fields_of(group),
            "teacher": TeacherSummary(id=teacher.id, name=teacher.name, email=teacher.email) if teacher else None,
        }

    def _attendance_with_lessons(self, rows: Sequence[AttendanceRecord], identity: Identity) -> list[dict]:
        lessons = {l.id: l for l in self._lessons.list_by_ids(sorted({r.lesson_id for r in rows}))}
        out: list[dict] = []
        for r in rows:
            lesson = lessons.get(r.lesson_id)
            out.append({**fields_of(r), "lesson": lesson_view(lesson, identity) if lesson else None})
        return out

    def list_all(self) -> Sequence[Student]:
        return self._students.list_all()

    def me(self, identity: Identity) -> dict:
        student = self._students.get_by_user_id(identity.user_id)
        if not student:
            raise NotFoundError("Student profile not found")
        return {**fields_of(student), "group": self._group_with_teacher(student.group_id)}

    def my_groups(self, identity: Identity) -> list[dict]:
        """Active groups of the caller with every lesson and the caller's own attendance."""
        student = self._students.get_by_user_id(identity.user_id)
        if not student or student.group_id is None:
            return []

        groups = self._groups.list_by_ids([student.group_id], active_only=True)
        own_rows = {r.lesson_id: r for r in self._attendance.list_for_student(student.id)}

        out: list[dict] = []
        for group in groups:
            teacher = self._users.get_by_id(group.teacher_id)
            lessons = [
                {
                    **lesson_view(lesson, identity),
                    "attendance": [own_rows[lesson.id]] if lesson.id in own_rows else [],
                }
                for lesson in self._lessons.list_for_group(group.id)
            ]
            out.append(
                {
                    **fields_of(group),
                    "teacher": TeacherSummary(id=teacher.id, name=teacher.name, email=teacher.email) if teacher else None,
                    "lessons": lessons,
                    "student_count": self._students.count_for_group(group.id),
                }
            )
        return out

    def create(self, identity: Identity, data: Mapping[str, Any]) -> Student:
        name = require_non_empty(data.get("name"), "Student name is required")
        group_id = optional_id(data.get("groupId"), "Invalid group ID")

        if group_id is not None:
            self._policy.owned_group(group_id, identity, "Access denied to this group")

        student_id = self._students.create(
            name=name,
            email=optional_str(data.get("email")),
            phone=optional_str(data.get("phone")),
            group_id=group_id,
        )
        return self._students.get_by_id(student_id)

    def list_for_group(self, identity: Identity, group_id: int) -> list[dict]:
        self._policy.visible_group(group_id, identity)

        students = self._students.list_for_group(group_id)
        rows = self._attendance.list_for_students([s.id for s in students])
        with_lessons = self._attendance_with_lessons(rows, identity)

        by_student: dict[int, list[dict]] = {}
        for row in with_lessons:
            by_student.setdefault(row["student_id"], []).append(row)

        return [{**fields_of(s), "attendance": by_student.get(s.id, [])} for s in students]

    def detail(self, identity: Identity, student_id: int) -> dict:
        student = self._get(student_id)
        group = self._group_with_teacher(student.group_id)
        if group is not None:
            self._policy.check_view(group["teacher_id"], identity)

        rows = self._attendance.list_for_student(student.id)
        return {
            **fields_of(student),
            "group": group,
            "attendance": self._attendance_with_lessons(rows, identity),
        }

    def update(self, identity: Identity, student_id: int, data: Mapping[str, Any]) -> Student:
        student = self._get(student_id)
        self._policy.check_student_group(student.group_id, identity)

        changes: dict[str, Any] = {}
        if "name" in data:
            changes["name"] = require_non_empty(data.get("name"), "Student name is required")
        if "email" in data:
            changes["email"] = optional_str(data.get("email"))
        if "phone" in data:
            changes["phone"] = optional_str(data.get("phone"))
        if "groupId" in data:
            group_id = optional_id(data.get("groupId"), "Invalid group ID")
            if group_id is not None and group_id != student.group_id:
                self._policy.owned_group(group_id, identity, "Access denied to new group")
            changes["group_id"] = group_id

        updated = replace(student, **changes)
        self._students.update(updated)
        return updated

    def delete(self, identity: Identity, student_id: int) -> None:
        student = self._get(student_id)
        self._policy.check_student_group(student.group_id, identity)
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")
