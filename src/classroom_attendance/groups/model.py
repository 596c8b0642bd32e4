from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Group:
    """Domain entity: a teacher-owned cohort of students."""

    id: int
    name: str
    teacher_id: int
    description: Optional[str] = None
    course_code: Optional[str] = None
    semester: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
