from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from classroom_attendance.attendance.model import AttendanceRecord, StatusCount
from classroom_attendance.auth.tokens import Identity, TokenService
from classroom_attendance.container import Container, assemble
from classroom_attendance.core.enums import AttendanceStatus, Role
from classroom_attendance.groups.model import Group
from classroom_attendance.lessons.model import Lesson
from classroom_attendance.main import create_app
from classroom_attendance.students.model import Student
from classroom_attendance.users.model import User

FIXED_NOW = datetime(2025, 3, 10, 9, 0, 0)


class InMemoryUsers:
    def __init__(self, students: InMemoryStudents):
        self.rows: dict[int, User] = {}
        self._id = 0
        self._students = students

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, *, email, password_hash, name, role, student_profile=False) -> int:
        user_id = self._id + 1
        # Profile first: if it fails, no user row is kept (one transaction in MySQL).
        if student_profile:
            self._students.create(name=name, user_id=user_id, email=email)
        self._id = user_id
        self.rows[user_id] = User(
            id=user_id, email=email, name=name, role=role, password_hash=password_hash, created_at=FIXED_NOW
        )
        return user_id

    def update_last_login(self, user_id: int, *, when: datetime) -> bool:
        self.rows[user_id] = replace(self.rows[user_id], last_login=when)
        return True


class InMemoryGroups:
    def __init__(self, students: "InMemoryStudents", lessons: "InMemoryLessons"):
        self.rows: dict[int, Group] = {}
        self._id = 0
        self._students = students
        self._lessons = lessons

    def get_by_id(self, group_id: int) -> Optional[Group]:
        return self.rows.get(group_id)

    def list_for_teacher(self, teacher_id: int, *, active_only: bool = True) -> Sequence[Group]:
        items = [g for g in self.rows.values() if g.teacher_id == teacher_id and (g.is_active or not active_only)]
        return sorted(items, key=lambda g: g.id, reverse=True)

    def list_by_ids(self, group_ids: Sequence[int], *, active_only: bool = True) -> Sequence[Group]:
        return [g for i, g in self.rows.items() if i in set(group_ids) and (g.is_active or not active_only)]

    def create(self, *, name, teacher_id, description=None, course_code=None, semester=None) -> int:
        self._id += 1
        self.rows[self._id] = Group(
            id=self._id,
            name=name,
            teacher_id=teacher_id,
            description=description,
            course_code=course_code,
            semester=semester,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, group: Group) -> bool:
        self.rows[group.id] = group
        return True

    def delete(self, group_id: int) -> bool:
        if self.rows.pop(group_id, None) is None:
            return False
        # ON DELETE SET NULL / CASCADE
        for s in list(self._students.rows.values()):
            if s.group_id == group_id:
                self._students.rows[s.id] = replace(s, group_id=None)
        for l in list(self._lessons.rows.values()):
            if l.group_id == group_id:
                self._lessons.delete(l.id)
        return True


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[int, Student] = {}
        self._id = 0

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.rows.get(student_id)

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        return next((s for s in self.rows.values() if s.user_id == user_id), None)

    def list_all(self) -> Sequence[Student]:
        return sorted(self.rows.values(), key=lambda s: (s.name, s.id))

    def list_for_group(self, group_id: int) -> Sequence[Student]:
        return [s for s in self.list_all() if s.group_id == group_id]

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        return [s for s in self.list_all() if s.id in set(student_ids)]

    def count_for_group(self, group_id: int) -> int:
        return len(self.list_for_group(group_id))

    def create(self, *, name, user_id=None, email=None, phone=None, group_id=None) -> int:
        self._id += 1
        self.rows[self._id] = Student(
            id=self._id, name=name, user_id=user_id, email=email, phone=phone, group_id=group_id, created_at=FIXED_NOW
        )
        return self._id

    def update(self, student: Student) -> bool:
        self.rows[student.id] = student
        return True

    def set_group(self, student_id: int, group_id: Optional[int]) -> bool:
        self.rows[student_id] = replace(self.rows[student_id], group_id=group_id)
        return True

    def delete(self, student_id: int) -> bool:
        return self.rows.pop(student_id, None) is not None


class InMemoryLessons:
    def __init__(self):
        self.rows: dict[int, Lesson] = {}
        self._id = 0

    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        return self.rows.get(lesson_id)

    def get_active_by_qr_code(self, qr_code: str) -> Optional[Lesson]:
        return next((l for l in self.rows.values() if l.is_active and l.qr_code == qr_code), None)

    def list_for_group(self, group_id: int, *, limit: Optional[int] = None) -> Sequence[Lesson]:
        items = sorted((l for l in self.rows.values() if l.group_id == group_id), key=lambda l: l.date, reverse=True)
        return items[:limit] if limit else items

    def list_by_ids(self, lesson_ids: Sequence[int]) -> Sequence[Lesson]:
        return [l for l in self.rows.values() if l.id in set(lesson_ids)]

    def list_active_for_teacher(self, teacher_id: int) -> Sequence[Lesson]:
        items = [l for l in self.rows.values() if l.teacher_id == teacher_id and l.is_active]
        return sorted(items, key=lambda l: l.date)

    def count_for_groups(self, group_ids: Sequence[int]) -> int:
        return len([l for l in self.rows.values() if l.group_id in set(group_ids)])

    def create(self, *, group_id, teacher_id, title, date, duration, qr_code=None, description=None) -> int:
        self._id += 1
        self.rows[self._id] = Lesson(
            id=self._id,
            group_id=group_id,
            teacher_id=teacher_id,
            title=title,
            date=date,
            duration=duration,
            qr_code=qr_code,
            description=description,
            created_at=FIXED_NOW,
        )
        return self._id

    def update(self, lesson: Lesson) -> bool:
        self.rows[lesson.id] = lesson
        return True

    def delete(self, lesson_id: int) -> bool:
        return self.rows.pop(lesson_id, None) is not None


class InMemoryAttendance:
    def __init__(self, lessons: InMemoryLessons):
        self.lessons = lessons
        self.rows: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get(attendance_id)

    def _find(self, lesson_id: int, student_id: int) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.rows.values() if r.lesson_id == lesson_id and r.student_id == student_id), None
        )

    def create_if_absent(self, *, lesson_id, student_id, status, scanned_at):
        existing = self._find(lesson_id, student_id)
        if existing:
            return existing, False
        self._id += 1
        rec = AttendanceRecord(
            id=self._id,
            lesson_id=lesson_id,
            student_id=student_id,
            status=status,
            scanned_at=scanned_at,
            created_at=scanned_at,
        )
        self.rows[rec.id] = rec
        return rec, True

    def upsert(self, *, lesson_id, student_id, status, scanned_at) -> AttendanceRecord:
        rec, created = self.create_if_absent(
            lesson_id=lesson_id, student_id=student_id, status=status, scanned_at=scanned_at
        )
        if not created:
            rec = replace(rec, status=status, scanned_at=scanned_at)
            self.rows[rec.id] = rec
        return rec

    def update_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        self.rows[attendance_id] = replace(self.rows[attendance_id], status=status)
        return True

    def delete(self, attendance_id: int) -> bool:
        return self.rows.pop(attendance_id, None) is not None

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        return self.list_for_lessons([lesson_id])

    def list_for_lessons(self, lesson_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        return sorted((r for r in self.rows.values() if r.lesson_id in set(lesson_ids)), key=lambda r: -r.id)

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        return self.list_for_students([student_id])

    def list_for_students(self, student_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        return sorted((r for r in self.rows.values() if r.student_id in set(student_ids)), key=lambda r: -r.id)

    def count_by_status_for_group(self, group_id: int) -> Sequence[StatusCount]:
        counts: dict[tuple[int, AttendanceStatus], int] = {}
        for r in self.rows.values():
            lesson = self.lessons.get_by_id(r.lesson_id)
            if lesson and lesson.group_id == group_id:
                counts[(r.student_id, r.status)] = counts.get((r.student_id, r.status), 0) + 1
        ordered = sorted(counts.items(), key=lambda kv: (kv[0][0], kv[0][1].value))
        return [StatusCount(student_id=s, status=st, count=c) for (s, st), c in ordered]


class Fakes:
    """All repositories plus helpers to seed rows and mint tokens."""

    def __init__(self):
        self.students = InMemoryStudents()
        self.users = InMemoryUsers(self.students)
        self.lessons = InMemoryLessons()
        self.groups = InMemoryGroups(self.students, self.lessons)
        self.attendance = InMemoryAttendance(self.lessons)
        self.tokens = TokenService("test-jwt-secret")

    def container(self) -> Container:
        return assemble(
            users_repo=self.users,
            groups_repo=self.groups,
            students_repo=self.students,
            lessons_repo=self.lessons,
            attendance_repo=self.attendance,
            tokens=self.tokens,
        )

    def teacher(self, name: str = "Ms. Tran", email: Optional[str] = None) -> Identity:
        user_id = self.users.create_user(
            email=email or f"{name.lower().replace(' ', '.')}@school.test",
            password_hash=generate_password_hash("secret"),
            name=name,
            role=Role.TEACHER,
        )
        return Identity(user_id=user_id, role=Role.TEACHER)

    def student(self, name: str = "An", group_id: Optional[int] = None) -> tuple[Identity, Student]:
        user_id = self.users.create_user(
            email=f"{name.lower()}@school.test",
            password_hash=generate_password_hash("secret"),
            name=name,
            role=Role.STUDENT,
        )
        student_id = self.students.create(name=name, user_id=user_id, group_id=group_id)
        return Identity(user_id=user_id, role=Role.STUDENT), self.students.get_by_id(student_id)

    def group(self, teacher: Identity, name: str = "CS101") -> Group:
        return self.groups.get_by_id(self.groups.create(name=name, teacher_id=teacher.user_id))

    def lesson(self, group: Group, title: str = "Intro", qr_code: str = "QR-1", day: int = 1) -> Lesson:
        lesson_id = self.lessons.create(
            group_id=group.id,
            teacher_id=group.teacher_id,
            title=title,
            date=datetime(2025, 3, day, 8, 0, 0),
            duration=90,
            qr_code=qr_code,
        )
        return self.lessons.get_by_id(lesson_id)

    def bearer(self, identity: Identity) -> dict:
        return {"Authorization": f"Bearer {self.tokens.issue(identity.user_id, identity.role)}"}


@pytest.fixture()
def fakes() -> Fakes:
    return Fakes()


@pytest.fixture()
def container(fakes: Fakes) -> Container:
    return fakes.container()


@pytest.fixture()
def client(monkeypatch, fakes: Fakes):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=fakes.container())
    return app.test_client()


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW
