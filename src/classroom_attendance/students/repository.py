from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_for_group(self, group_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        raise NotImplementedError

    def count_for_group(self, group_id: int) -> int:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        user_id: Optional[int] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        group_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, student: Student) -> bool:
        raise NotImplementedError

    def set_group(self, student_id: int, group_id: Optional[int]) -> bool:
        raise NotImplementedError

    def delete(self, student_id: int) -> bool:
        raise NotImplementedError
