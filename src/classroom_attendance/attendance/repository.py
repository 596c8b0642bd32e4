from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, StatusCount


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(
        self,
        *,
        lesson_id: int,
        student_id: int,
        status: AttendanceStatus,
        scanned_at: datetime,
    ) -> tuple[AttendanceRecord, bool]:
        """Insert a row unless the (lesson, student) pair already has one.

        Returns the stored row and whether this call created it. Must be a
        single atomic statement at the store so concurrent callers cannot both
        create a row.
        """

        raise NotImplementedError

    def upsert(
        self,
        *,
        lesson_id: int,
        student_id: int,
        status: AttendanceStatus,
        scanned_at: datetime,
    ) -> AttendanceRecord:
        """Create the (lesson, student) row or overwrite its status/scanned_at in place."""

        raise NotImplementedError

    def update_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def list_for_lesson(self, lesson_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_lessons(self, lesson_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        """Rows of a student, newest first."""

        raise NotImplementedError

    def list_for_students(self, student_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status_for_group(self, group_id: int) -> Sequence[StatusCount]:
        raise NotImplementedError
