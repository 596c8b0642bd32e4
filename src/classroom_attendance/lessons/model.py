from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Lesson:
    """Domain entity: one class session of a group."""

    id: int
    group_id: int
    teacher_id: int
    title: str
    date: datetime
    duration: int
    qr_code: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
