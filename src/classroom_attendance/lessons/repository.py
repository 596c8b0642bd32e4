from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Lesson


class LessonRepository(Protocol):
    def get_by_id(self, lesson_id: int) -> Optional[Lesson]:
        raise NotImplementedError

    def get_active_by_qr_code(self, qr_code: str) -> Optional[Lesson]:
        raise NotImplementedError

    def list_for_group(self, group_id: int, *, limit: Optional[int] = None) -> Sequence[Lesson]:
        """Lessons of a group, newest date first."""

        raise NotImplementedError

    def list_by_ids(self, lesson_ids: Sequence[int]) -> Sequence[Lesson]:
        raise NotImplementedError

    def list_active_for_teacher(self, teacher_id: int) -> Sequence[Lesson]:
        """Active lessons of a teacher, soonest date first."""

        raise NotImplementedError

    def count_for_groups(self, group_ids: Sequence[int]) -> int:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, lesson: Lesson) -> bool:
        raise NotImplementedError

    def delete(self, lesson_id: int) -> bool:
        raise NotImplementedError
