from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..auth.tokens import Identity
from ..common.datetime_utils import parse_iso_datetime
from ..common.ownership import OwnershipPolicy
from ..common.serialization import fields_of
from ..common.validators import optional_str, parse_bool, parse_duration, parse_id, require_fields, require_non_empty
from ..core.constants import DEFAULT_LESSON_DURATION
from ..core.exceptions import NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..students.repository import StudentRepository
from ..users.model import TeacherSummary
from ..users.repository import UserRepository
from .model import Lesson
from .qr import new_qr_code
from .repository import LessonRepository
from .views import lesson_view


class LessonService:
    def __init__(
        self,
        lessons: LessonRepository,
        groups: GroupRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        policy: OwnershipPolicy,
        *,
        default_duration: int = DEFAULT_LESSON_DURATION,
    ):
        self._lessons = lessons
        self._groups = groups
        self._students = students
        self._attendance = attendance
        self._users = users
        self._policy = policy
        self._default_duration = int(default_duration)

    def _attendance_with_students(self, lessons: Sequence[Lesson]) -> dict[int, list[dict]]:
        rows = self._attendance.list_for_lessons([l.id for l in lessons])
        students = {s.id: s for s in self._students.list_by_ids(sorted({r.student_id for r in rows}))}

        by_lesson: dict[int, list[dict]] = {}
        for r in rows:
            by_lesson.setdefault(r.lesson_id, []).append({**fields_of(r), "student": students.get(r.student_id)})
        return by_lesson

    def create(self, identity: Identity, data: Mapping[str, Any]) -> Lesson:
        require_fields(data, ("groupId", "title", "date"), "Group ID, title, and date are required")
        group_id = parse_id(data.get("groupId"), "Invalid group ID")
        self._policy.owned_group(group_id, identity, "Access denied to this group")

        duration = data.get("duration")
        lesson_id = self._lessons.create(
            group_id=group_id,
            teacher_id=identity.user_id,
            title=require_non_empty(data.get("title"), "Group ID, title, and date are required"),
            description=optional_str(data.get("description")),
            date=parse_iso_datetime(data.get("date"), "date"),
            duration=parse_duration(duration) if duration else self._default_duration,
            qr_code=optional_str(data.get("qrCode")) or new_qr_code(),
        )
        return self._lessons.get_by_id(lesson_id)

    def active(self, identity: Identity) -> list[dict]:
        lessons = self._lessons.list_active_for_teacher(identity.user_id)
        groups = {g.id: g for g in self._groups.list_by_ids(sorted({l.group_id for l in lessons}), active_only=False)}
        rows = self._attendance.list_for_lessons([l.id for l in lessons])

        by_lesson: dict[int, list] = {}
        for r in rows:
            by_lesson.setdefault(r.lesson_id, []).append(r)

        return [
            {**fields_of(l), "group": groups.get(l.group_id), "attendance": by_lesson.get(l.id, [])}
            for l in lessons
        ]

    def list_for_group(self, identity: Identity, group_id: int) -> list[dict]:
        self._policy.visible_group(group_id, identity)

        lessons = self._lessons.list_for_group(group_id)
        attendance = self._attendance_with_students(lessons)
        return [{**lesson_view(l, identity), "attendance": attendance.get(l.id, [])} for l in lessons]

    def detail(self, identity: Identity, lesson_id: int) -> dict:
        lesson = self._policy.visible_lesson(lesson_id, identity)

        group = self._groups.get_by_id(lesson.group_id)
        teacher = self._users.get_by_id(group.teacher_id) if group else None
        group_view: Optional[dict] = None
        if group:
            group_view = {
                **fields_of(group),
                "teacher": TeacherSummary(id=teacher.id, name=teacher.name, email=teacher.email) if teacher else None,
            }

        return {
            **lesson_view(lesson, identity),
            "group": group_view,
            "attendance": self._attendance_with_students([lesson]).get(lesson.id, []),
        }

    def qr_code_for(self, identity: Identity, lesson_id: int) -> str:
        lesson = self._policy.owned_lesson(lesson_id, identity)
        if not lesson.qr_code:
            raise NotFoundError("Lesson has no QR code")
        return lesson.qr_code

    def update(self, identity: Identity, lesson_id: int, data: Mapping[str, Any]) -> Lesson:
        lesson = self._policy.owned_lesson(lesson_id, identity)

        changes: dict[str, Any] = {}
        if "title" in data:
            changes["title"] = require_non_empty(data.get("title"), "Title is required")
        if "description" in data:
            changes["description"] = optional_str(data.get("description"))
        if data.get("date"):
            changes["date"] = parse_iso_datetime(data.get("date"), "date")
        if data.get("duration") is not None:
            changes["duration"] = parse_duration(data.get("duration"))
        if "qrCode" in data:
            changes["qr_code"] = optional_str(data.get("qrCode"))
        if "isActive" in data:
            changes["is_active"] = parse_bool(data.get("isActive"), "isActive must be true or false")

        updated = replace(lesson, **changes)
        self._lessons.update(updated)
        return updated

    def delete(self, identity: Identity, lesson_id: int) -> None:
        self._policy.owned_lesson(lesson_id, identity)
        if not self._lessons.delete(lesson_id):
            raise NotFoundError("Lesson not found")

    def refresh_qr(self, identity: Identity, lesson_id: int, qr_code: Optional[str] = None) -> Lesson:
        lesson = self._policy.owned_lesson(lesson_id, identity)
        if qr_code is not None and not isinstance(qr_code, str):
            raise ValidationError("qrCode must be a string")

        updated = replace(lesson, qr_code=optional_str(qr_code) or new_qr_code())
        self._lessons.update(updated)
        return updated

    def end(self, identity: Identity, lesson_id: int) -> Lesson:
        lesson = self._policy.owned_lesson(lesson_id, identity)
        updated = replace(lesson, is_active=False)
        self._lessons.update(updated)
        return updated
