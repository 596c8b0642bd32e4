from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student profile.

    ``user_id`` is empty for students a teacher created by hand; those rows
    cannot check in until linked to an account.
    """

    id: int
    name: str
    user_id: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    group_id: Optional[int] = None
    created_at: Optional[datetime] = None
