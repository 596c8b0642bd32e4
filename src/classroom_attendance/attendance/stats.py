from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceStats:
    total_lessons: int
    present: int
    late: int
    absent: int
    percentage: int


def attendance_percentage(attended: int, total: int) -> int:
    """Rounded share of attended lessons; half-up, 0 when there were no lessons."""
    if total <= 0:
        return 0
    ratio = Decimal(100 * attended) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stats(total_lessons: int, statuses: Iterable[AttendanceStatus]) -> AttendanceStats:
    """Point-in-time summary of one student's rows against the lessons they could attend.

    Rows with status ``absent`` are not counted separately: absence is whatever
    is left after present and late.
    """

    present = 0
    late = 0
    for status in statuses:
        if status == AttendanceStatus.PRESENT:
            present += 1
        elif status == AttendanceStatus.LATE:
            late += 1

    total = max(0, int(total_lessons))
    return AttendanceStats(
        total_lessons=total,
        present=present,
        late=late,
        absent=max(0, total - present - late),
        percentage=attendance_percentage(present + late, total),
    )
