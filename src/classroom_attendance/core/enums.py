from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for route authorization."""

    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Attendance status values stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
