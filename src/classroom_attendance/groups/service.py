from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from ..auth.tokens import Identity
from ..common.ownership import OwnershipPolicy
from ..common.serialization import fields_of
from ..common.validators import optional_str, parse_bool, parse_id, require_non_empty
from ..core.constants import RECENT_LESSONS_PER_GROUP
from ..core.exceptions import NotFoundError, ValidationError
from ..lessons.repository import LessonRepository
from ..lessons.views import lesson_view
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import TeacherSummary
from ..users.repository import UserRepository
from .model import Group
from .repository import GroupRepository


class GroupService:
    def __init__(
        self,
        groups: GroupRepository,
        students: StudentRepository,
        lessons: LessonRepository,
        users: UserRepository,
        policy: OwnershipPolicy,
    ):
        self._groups = groups
        self._students = students
        self._lessons = lessons
        self._users = users
        self._policy = policy

    def teacher_summary(self, teacher_id: int):
        user = self._users.get_by_id(teacher_id)
        if not user:
            return None
        return TeacherSummary(id=user.id, name=user.name, email=user.email)

    def _with_roster(self, group: Group, identity: Identity) -> dict:
        recent = self._lessons.list_for_group(group.id, limit=RECENT_LESSONS_PER_GROUP)
        return {
            **fields_of(group),
            "students": list(self._students.list_for_group(group.id)),
            "lessons": [lesson_view(l, identity) for l in recent],
        }

    def create(self, identity: Identity, data: Mapping[str, Any]) -> Group:
        name = require_non_empty(data.get("name"), "Group name is required")
        group_id = self._groups.create(
            name=name,
            teacher_id=identity.user_id,
            description=optional_str(data.get("description")),
            course_code=optional_str(data.get("courseCode")),
            semester=optional_str(data.get("semester")),
        )
        return self._groups.get_by_id(group_id)

    def my_groups(self, identity: Identity) -> list[dict]:
        return [self._with_roster(g, identity) for g in self._groups.list_for_teacher(identity.user_id)]

    def teacher_groups(self, identity: Identity, teacher_id: int) -> list[dict]:
        self._policy.check_view(teacher_id, identity)
        return [self._with_roster(g, identity) for g in self._groups.list_for_teacher(teacher_id)]

    def detail(self, identity: Identity, group_id: int) -> dict:
        group = self._policy.visible_group(group_id, identity)
        return {
            **fields_of(group),
            "teacher": self.teacher_summary(group.teacher_id),
            "students": list(self._students.list_for_group(group.id)),
            "lessons": [lesson_view(l, identity) for l in self._lessons.list_for_group(group.id)],
        }

    def update(self, identity: Identity, group_id: int, data: Mapping[str, Any]) -> Group:
        group = self._policy.owned_group(group_id, identity)

        changes: dict[str, Any] = {}
        if "name" in data:
            changes["name"] = require_non_empty(data.get("name"), "Group name is required")
        if "description" in data:
            changes["description"] = optional_str(data.get("description"))
        if "courseCode" in data:
            changes["course_code"] = optional_str(data.get("courseCode"))
        if "semester" in data:
            changes["semester"] = optional_str(data.get("semester"))
        if "isActive" in data:
            changes["is_active"] = parse_bool(data.get("isActive"), "isActive must be true or false")

        updated = replace(group, **changes)
        self._groups.update(updated)
        return updated

    def delete(self, identity: Identity, group_id: int) -> None:
        self._policy.owned_group(group_id, identity)
        if not self._groups.delete(group_id):
            raise NotFoundError("Group not found")

    def add_student(self, identity: Identity, group_id: int, student_id: Any) -> Student:
        self._policy.owned_group(group_id, identity)
        if student_id is None or student_id == "":
            raise ValidationError("Student ID is required")
        sid = parse_id(student_id, "Invalid student ID")

        student = self._students.get_by_id(sid)
        if not student:
            raise NotFoundError("Student not found")
        self._policy.check_student_group(student.group_id, identity, "Student belongs to another teacher's group")

        self._students.set_group(sid, group_id)
        return replace(student, group_id=group_id)

    def remove_student(self, identity: Identity, group_id: int, student_id: int) -> Student:
        self._policy.owned_group(group_id, identity)

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        if student.group_id != group_id:
            raise NotFoundError("Student is not in this group")

        self._students.set_group(student_id, None)
        return replace(student, group_id=None)
