from __future__ import annotations

import pytest

from classroom_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_create_defaults_duration_and_generates_qr(fakes, container):
    teacher = fakes.teacher()
    group = fakes.group(teacher)

    lesson = container.lesson_service.create(
        teacher, {"groupId": group.id, "title": "Week 1", "date": "2025-03-01T08:00:00Z"}
    )

    assert lesson.duration == 90
    assert lesson.qr_code
    assert lesson.teacher_id == teacher.user_id
    assert lesson.is_active


def test_create_requires_fields(fakes, container):
    with pytest.raises(ValidationError, match="Group ID, title, and date are required"):
        container.lesson_service.create(fakes.teacher(), {"groupId": 1, "title": "x"})


def test_create_in_foreign_group_is_forbidden(fakes, container):
    group = fakes.group(fakes.teacher("Owner"))

    with pytest.raises(AuthorizationError):
        container.lesson_service.create(
            fakes.teacher("Other"), {"groupId": group.id, "title": "x", "date": "2025-03-01"}
        )


def test_create_in_missing_group(fakes, container):
    with pytest.raises(NotFoundError):
        container.lesson_service.create(fakes.teacher(), {"groupId": 77, "title": "x", "date": "2025-03-01"})


def test_refresh_qr_and_end(fakes, container):
    teacher = fakes.teacher()
    lesson = fakes.lesson(fakes.group(teacher), qr_code="OLD")

    refreshed = container.lesson_service.refresh_qr(teacher, lesson.id)
    assert refreshed.qr_code not in (None, "OLD")

    chosen = container.lesson_service.refresh_qr(teacher, lesson.id, "MANUAL")
    assert chosen.qr_code == "MANUAL"

    ended = container.lesson_service.end(teacher, lesson.id)
    assert ended.is_active is False
    assert container.lesson_service.active(teacher) == []


def test_active_lessons_soonest_first(fakes, container):
    teacher = fakes.teacher()
    group = fakes.group(teacher)
    later = fakes.lesson(group, title="Later", qr_code="A", day=9)
    sooner = fakes.lesson(group, title="Sooner", qr_code="B", day=2)

    active = container.lesson_service.active(teacher)

    assert [l["id"] for l in active] == [sooner.id, later.id]
    assert active[0]["group"].id == group.id


def test_update_and_delete_need_ownership(fakes, container):
    teacher = fakes.teacher("Owner")
    lesson = fakes.lesson(fakes.group(teacher))
    other = fakes.teacher("Other")

    with pytest.raises(AuthorizationError):
        container.lesson_service.update(other, lesson.id, {"title": "Hacked"})
    with pytest.raises(AuthorizationError):
        container.lesson_service.delete(other, lesson.id)

    updated = container.lesson_service.update(teacher, lesson.id, {"title": "Week 2", "duration": 60})
    assert (updated.title, updated.duration) == ("Week 2", 60)

    container.lesson_service.delete(teacher, lesson.id)
    assert fakes.lessons.get_by_id(lesson.id) is None


def test_detail_for_missing_lesson(fakes, container):
    with pytest.raises(NotFoundError, match="Lesson not found"):
        container.lesson_service.detail(fakes.teacher(), 1)


def test_group_lessons_hide_qr_code_from_students(fakes, container):
    teacher = fakes.teacher()
    group = fakes.group(teacher)
    lesson = fakes.lesson(group, qr_code="SECRET-QR")
    student, _ = fakes.student("An", group_id=group.id)

    assert "qr_code" not in container.lesson_service.list_for_group(student, group.id)[0]
    assert "qr_code" not in container.lesson_service.detail(student, lesson.id)
    assert container.lesson_service.list_for_group(teacher, group.id)[0]["qr_code"] == "SECRET-QR"
