from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from ..auth.tokens import Identity
from ..common.datetime_utils import now_utc, optional_iso_datetime
from ..common.ownership import OwnershipPolicy
from ..common.serialization import fields_of
from ..common.validators import parse_id, parse_status, require_fields, require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..lessons.repository import LessonRepository
from ..lessons.views import lesson_view
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .stats import AttendanceStats, compute_stats


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        lessons: LessonRepository,
        students: StudentRepository,
        groups: GroupRepository,
        policy: OwnershipPolicy,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._lessons = lessons
        self._students = students
        self._groups = groups
        self._policy = policy
        self._clock = clock

    def _own_profile(self, identity: Identity) -> Student:
        student = self._students.get_by_user_id(identity.user_id)
        if not student:
            raise NotFoundError("Student profile not found")
        return student

    def _record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def _with_lessons_and_groups(self, rows: Sequence[AttendanceRecord], identity: Identity) -> list[dict]:
        lessons = {l.id: l for l in self._lessons.list_by_ids(sorted({r.lesson_id for r in rows}))}
        groups = {
            g.id: g
            for g in self._groups.list_by_ids(sorted({l.group_id for l in lessons.values()}), active_only=False)
        }

        out: list[dict] = []
        for r in rows:
            lesson = lessons.get(r.lesson_id)
            view = {**lesson_view(lesson, identity), "group": groups.get(lesson.group_id)} if lesson else None
            out.append({**fields_of(r), "lesson": view})
        return out

    def mark(self, identity: Identity, data: Mapping[str, Any]) -> AttendanceRecord:
        """Create or overwrite the row for a (lesson, student) pair.

        Teachers may mark students of their own lessons; students only themselves.
        """

        require_fields(data, ("lessonId", "studentId"), "Lesson ID and student ID are required")
        lesson_id = parse_id(data.get("lessonId"), "Invalid lesson ID")
        student_id = parse_id(data.get("studentId"), "Invalid student ID")
        status = parse_status(data.get("status") or AttendanceStatus.PRESENT.value)
        scanned_at = optional_iso_datetime(data.get("scannedAt"), "scannedAt") or self._clock()

        lesson = self._policy.lesson(lesson_id)
        if identity.is_teacher:
            self._policy.check_owner(lesson.teacher_id, identity)
        else:
            own = self._students.get_by_user_id(identity.user_id)
            if not own or own.id != student_id:
                raise AuthorizationError("Access denied")

        if not self._students.get_by_id(student_id):
            raise NotFoundError("Student not found")

        return self._attendance.upsert(
            lesson_id=lesson.id,
            student_id=student_id,
            status=status,
            scanned_at=scanned_at,
        )

    def check_in(self, identity: Identity, qr_code: Any) -> tuple[AttendanceRecord, bool]:
        """Mark the caller present for the active lesson behind ``qr_code``.

        Returns the row and whether it already existed before this call.
        """

        code = require_non_empty(qr_code, "QR code is required")

        lesson = self._lessons.get_active_by_qr_code(code)
        if not lesson:
            raise NotFoundError("Invalid or inactive QR code")

        student = self._own_profile(identity)
        if student.group_id != lesson.group_id:
            raise AuthorizationError("You are not enrolled in this group")

        record, created = self._attendance.create_if_absent(
            lesson_id=lesson.id,
            student_id=student.id,
            status=AttendanceStatus.PRESENT,
            scanned_at=self._clock(),
        )
        return record, not created

    def stats_for_student(self, student: Student, rows: Sequence[AttendanceRecord]) -> AttendanceStats:
        group_ids = {student.group_id} if student.group_id is not None else set()
        if rows:
            lessons = self._lessons.list_by_ids(sorted({r.lesson_id for r in rows}))
            group_ids.update(l.group_id for l in lessons)

        total = self._lessons.count_for_groups(sorted(group_ids)) if group_ids else 0
        return compute_stats(total, (r.status for r in rows))

    def my_attendance(self, identity: Identity) -> dict:
        student = self._own_profile(identity)
        rows = self._attendance.list_for_student(student.id)
        return {
            "attendance": self._with_lessons_and_groups(rows, identity),
            "stats": self.stats_for_student(student, rows),
        }

    def for_lesson(self, identity: Identity, lesson_id: int) -> list[dict]:
        self._policy.visible_lesson(lesson_id, identity)

        rows = self._attendance.list_for_lesson(lesson_id)
        students = {s.id: s for s in self._students.list_by_ids(sorted({r.student_id for r in rows}))}
        return [{**fields_of(r), "student": students.get(r.student_id)} for r in rows]

    def for_student(self, identity: Identity, student_id: int) -> list[dict]:
        return self._with_lessons_and_groups(self._attendance.list_for_student(student_id), identity)

    def group_stats(self, identity: Identity, group_id: int) -> dict:
        group = self._policy.visible_group(group_id, identity)

        total = self._lessons.count_for_groups([group.id])
        counts = self._attendance.count_by_status_for_group(group.id)

        per_student: dict[int, list[AttendanceStatus]] = {}
        for c in counts:
            per_student.setdefault(c.student_id, []).extend([c.status] * c.count)

        students = []
        for student in self._students.list_for_group(group.id):
            stats = compute_stats(total, per_student.get(student.id, []))
            students.append({"student_id": student.id, "name": student.name, **fields_of(stats)})

        return {
            "group_id": group.id,
            "total_lessons": total,
            "counts": list(counts),
            "students": students,
        }

    def update_status(self, identity: Identity, attendance_id: int, status: Any) -> AttendanceRecord:
        record = self._record(attendance_id)
        lesson = self._policy.lesson(record.lesson_id)
        self._policy.check_owner(lesson.teacher_id, identity)

        if status is None:
            raise ValidationError("Status is required")
        new_status = parse_status(status)

        self._attendance.update_status(record.id, new_status)
        return self._attendance.get_by_id(record.id) or record

    def delete(self, identity: Identity, attendance_id: int) -> None:
        record = self._record(attendance_id)
        lesson = self._policy.lesson(record.lesson_id)
        self._policy.check_owner(lesson.teacher_id, identity)
        self._attendance.delete(record.id)
