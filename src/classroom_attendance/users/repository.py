from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        student_profile: bool = False,
    ) -> int:
        """Insert a user; with ``student_profile`` its students row goes in the same transaction."""

        raise NotImplementedError

    def update_last_login(self, user_id: int, *, when: datetime) -> bool:
        raise NotImplementedError
