from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one lesson."""

    id: int
    lesson_id: int
    student_id: int
    status: AttendanceStatus
    scanned_at: datetime
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StatusCount:
    """Read-model row: how many rows a student has with one status."""

    student_id: int
    status: AttendanceStatus
    count: int
