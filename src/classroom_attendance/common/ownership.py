from __future__ import annotations

from typing import Optional

from ..auth.tokens import Identity
from ..core.exceptions import AuthorizationError, NotFoundError
from ..groups.model import Group
from ..groups.repository import GroupRepository
from ..lessons.model import Lesson
from ..lessons.repository import LessonRepository


class OwnershipPolicy:
    """One place for "may this caller see / change this row" decisions.

    Rules:
    - Groups and lessons belong to the teacher whose id they carry.
    - Reads: a teacher sees only their own rows; students are not filtered here.
    - Writes: the caller must be the owning teacher.
    """

    def __init__(self, groups: GroupRepository, lessons: LessonRepository):
        self._groups = groups
        self._lessons = lessons

    @staticmethod
    def check_view(teacher_id: int, identity: Identity, message: str = "Access denied") -> None:
        if identity.is_teacher and identity.user_id != teacher_id:
            raise AuthorizationError(message)

    @staticmethod
    def check_owner(teacher_id: int, identity: Identity, message: str = "Access denied") -> None:
        if identity.user_id != teacher_id:
            raise AuthorizationError(message)

    def group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(group_id)
        if not group:
            raise NotFoundError("Group not found")
        return group

    def lesson(self, lesson_id: int) -> Lesson:
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise NotFoundError("Lesson not found")
        return lesson

    def visible_group(self, group_id: int, identity: Identity) -> Group:
        group = self.group(group_id)
        self.check_view(group.teacher_id, identity)
        return group

    def owned_group(self, group_id: int, identity: Identity, message: str = "Access denied") -> Group:
        group = self.group(group_id)
        self.check_owner(group.teacher_id, identity, message)
        return group

    def visible_lesson(self, lesson_id: int, identity: Identity) -> Lesson:
        lesson = self.lesson(lesson_id)
        self.check_view(lesson.teacher_id, identity)
        return lesson

    def owned_lesson(self, lesson_id: int, identity: Identity) -> Lesson:
        lesson = self.lesson(lesson_id)
        self.check_owner(lesson.teacher_id, identity)
        return lesson

    def check_student_group(self, group_id: Optional[int], identity: Identity, message: str = "Access denied") -> None:
        """A student row is owned through its group; ungrouped rows are open to any teacher."""
        if group_id is None:
            return
        group = self._groups.get_by_id(group_id)
        if group is not None:
            self.check_owner(group.teacher_id, identity, message)
