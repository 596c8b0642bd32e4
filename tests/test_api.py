from __future__ import annotations

from classroom_attendance.core.enums import AttendanceStatus


def test_health(client):
    resp = client.get("/")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "running"
    assert body["timestamp"].endswith("Z")


def test_register_login_me_flow(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "an@school.test", "password": "pw", "name": "An", "role": "student"},
    )
    assert resp.status_code == 201
    assert "passwordHash" not in resp.get_json()["user"]

    resp = client.post("/api/auth/login", json={"email": "an@school.test", "password": "pw"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "student"
    assert resp.get_json()["lastLogin"] is not None


def test_register_errors(client):
    resp = client.post("/api/auth/register", json={"email": "x@x", "password": "pw", "name": "X", "role": "root"})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid role"}

    resp = client.post("/api/auth/login", json={"email": "x@x", "password": "pw"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}


def test_missing_and_bad_tokens(client):
    resp = client.get("/api/groups/my-groups")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Access token required"}

    resp = client.get("/api/groups/my-groups", headers={"Authorization": "Bearer junk"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Invalid or expired token"}


def test_student_token_on_teacher_endpoint(client, fakes):
    student, _ = fakes.student("An")

    resp = client.post("/api/groups", json={"name": "Hack"}, headers=fakes.bearer(student))

    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Insufficient permissions"}


def test_group_crud_over_http(client, fakes):
    teacher = fakes.teacher()
    headers = fakes.bearer(teacher)

    resp = client.post("/api/groups", json={"name": "CS101", "courseCode": "CS-101"}, headers=headers)
    assert resp.status_code == 201
    group = resp.get_json()
    assert group["courseCode"] == "CS-101"
    assert group["teacherId"] == teacher.user_id

    resp = client.get(f"/api/groups/{group['id']}", headers=headers)
    assert resp.get_json()["teacher"]["id"] == teacher.user_id

    resp = client.delete(f"/api/groups/{group['id']}", headers=fakes.bearer(fakes.teacher("Other")))
    assert resp.status_code == 403

    resp = client.delete(f"/api/groups/{group['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Group deleted successfully"}

    resp = client.get(f"/api/groups/{group['id']}", headers=headers)
    assert resp.status_code == 404


def test_qr_check_in_over_http(client, fakes):
    teacher = fakes.teacher()
    group = fakes.group(teacher)
    lesson = fakes.lesson(group, qr_code="QR-XYZ")
    student, profile = fakes.student("An", group_id=group.id)
    headers = fakes.bearer(student)

    resp = client.post("/api/attendance/qr", json={"qrCode": "QR-XYZ"}, headers=headers)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["alreadyMarked"] is False
    assert body["lessonId"] == lesson.id
    assert body["studentId"] == profile.id
    assert body["status"] == "present"

    resp = client.post("/api/attendance/qr", json={"qrCode": "QR-XYZ"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["alreadyMarked"] is True

    resp = client.post("/api/attendance/qr", json={}, headers=headers)
    assert resp.status_code == 400

    resp = client.post("/api/attendance/qr", json={"qrCode": "QR-XYZ"}, headers=fakes.bearer(teacher))
    assert resp.status_code == 403


def test_my_attendance_over_http(client, fakes):
    group = fakes.group(fakes.teacher())
    lesson = fakes.lesson(group)
    student, profile = fakes.student("An", group_id=group.id)
    fakes.attendance.upsert(
        lesson_id=lesson.id, student_id=profile.id, status=AttendanceStatus.LATE, scanned_at=lesson.date
    )

    resp = client.get("/api/attendance/me", headers=fakes.bearer(student))

    assert resp.status_code == 200
    assert resp.get_json()["stats"] == {
        "totalLessons": 1,
        "present": 0,
        "late": 1,
        "absent": 0,
        "percentage": 100,
    }


def test_lesson_qr_png(client, fakes):
    teacher = fakes.teacher()
    lesson = fakes.lesson(fakes.group(teacher))

    resp = client.get(f"/api/lessons/{lesson.id}/qr.png", headers=fakes.bearer(teacher))

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data.startswith(b"\x89PNG")


def test_unexpected_failure_becomes_generic_500(client, fakes, monkeypatch):
    teacher = fakes.teacher()

    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(fakes.groups, "list_for_teacher", boom)

    resp = client.get("/api/groups/my-groups", headers=fakes.bearer(teacher))

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to get groups"}


def test_unknown_route_is_json(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_student_groups_over_http_have_no_qr_code(client, fakes):
    group = fakes.group(fakes.teacher())
    fakes.lesson(group, qr_code="SECRET-QR")
    student, _ = fakes.student("An", group_id=group.id)

    resp = client.get("/api/students/me/groups", headers=fakes.bearer(student))

    assert resp.status_code == 200
    assert "qrCode" not in resp.get_json()[0]["lessons"][0]


def test_register_with_numeric_password_is_400(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "n@school.test", "password": 123, "name": "N", "role": "teacher"},
    )
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "All fields are required"}


def test_foreign_student_roster_routes_are_rejected(client, fakes):
    owner = fakes.teacher("Owner")
    intruder = fakes.teacher("Intruder")
    their_group = fakes.group(owner, name="A")
    my_group = fakes.group(intruder, name="B")
    _, student = fakes.student("An", group_id=their_group.id)
    headers = fakes.bearer(intruder)

    resp = client.delete(f"/api/groups/{my_group.id}/students/{student.id}", headers=headers)
    assert resp.status_code == 404

    resp = client.post(f"/api/groups/{my_group.id}/students", json={"studentId": student.id}, headers=headers)
    assert resp.status_code == 403
    assert fakes.students.get_by_id(student.id).group_id == their_group.id
