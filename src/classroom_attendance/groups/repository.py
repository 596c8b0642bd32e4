from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int, *, active_only: bool = True) -> Sequence[Group]:
        """Groups owned by a teacher, newest first."""

        raise NotImplementedError

    def list_by_ids(self, group_ids: Sequence[int], *, active_only: bool = True) -> Sequence[Group]:
        """Groups with the given ids, ordered by name."""

        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        teacher_id: int,
        description: Optional[str] = None,
        course_code: Optional[str] = None,
        semester: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, group: Group) -> bool:
        """Persist every mutable column of ``group``."""

        raise NotImplementedError

    def delete(self, group_id: int) -> bool:
        raise NotImplementedError
