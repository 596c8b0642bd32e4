from __future__ import annotations

from flask import Flask

from ..auth.guards import current_identity
from ..common.http import api_errors, json_body, json_response
from ..common.serialization import fields_of
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.attendance_service

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @guards.login_required
    @api_errors("Failed to mark attendance", "Mark attendance")
    def mark_attendance():
        return json_response(service.mark(current_identity(), json_body()), 201)

    @app.route("/api/attendance/qr", methods=["POST"], endpoint="qr_check_in")
    @guards.login_required
    @guards.student_required
    @api_errors("Failed to mark attendance", "QR check-in")
    def qr_check_in():
        record, already_marked = service.check_in(current_identity(), json_body().get("qrCode"))
        payload = {**fields_of(record), "already_marked": already_marked}
        return json_response(payload, 200 if already_marked else 201)

    @app.route("/api/attendance/me", methods=["GET"], endpoint="my_attendance")
    @guards.login_required
    @guards.student_required
    @api_errors("Failed to get attendance", "Get my attendance")
    def my_attendance():
        return json_response(service.my_attendance(current_identity()))

    @app.route("/api/attendance/lesson/<int:lesson_id>", methods=["GET"], endpoint="lesson_attendance")
    @guards.login_required
    @api_errors("Failed to get attendance", "Get attendance")
    def lesson_attendance(lesson_id: int):
        return json_response(service.for_lesson(current_identity(), lesson_id))

    @app.route("/api/attendance/student/<int:student_id>", methods=["GET"], endpoint="student_attendance")
    @guards.login_required
    @api_errors("Failed to get student attendance", "Get student attendance")
    def student_attendance(student_id: int):
        return json_response(service.for_student(current_identity(), student_id))

    @app.route("/api/attendance/stats/group/<int:group_id>", methods=["GET"], endpoint="group_attendance_stats")
    @guards.login_required
    @api_errors("Failed to get statistics", "Get stats")
    def group_attendance_stats(group_id: int):
        return json_response(service.group_stats(current_identity(), group_id))

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to update attendance", "Update attendance")
    def update_attendance(attendance_id: int):
        return json_response(service.update_status(current_identity(), attendance_id, json_body().get("status")))

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to delete attendance", "Delete attendance")
    def delete_attendance(attendance_id: int):
        service.delete(current_identity(), attendance_id)
        return json_response({"message": "Attendance deleted successfully"})
