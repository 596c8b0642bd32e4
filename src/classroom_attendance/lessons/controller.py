from __future__ import annotations

from flask import Flask, send_file

from ..auth.guards import current_identity
from ..common.http import api_errors, json_body, json_response
from ..container import Container
from .qr import render_qr_png


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.lesson_service

    @app.route("/api/lessons", methods=["POST"], endpoint="create_lesson")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to create lesson", "Create lesson")
    def create_lesson():
        return json_response(service.create(current_identity(), json_body()), 201)

    @app.route("/api/lessons/active", methods=["GET"], endpoint="active_lessons")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to get active lessons", "Get active lessons")
    def active_lessons():
        return json_response(service.active(current_identity()))

    @app.route("/api/lessons/group/<int:group_id>", methods=["GET"], endpoint="group_lessons")
    @guards.login_required
    @api_errors("Failed to get lessons", "Get lessons")
    def group_lessons(group_id: int):
        return json_response(service.list_for_group(current_identity(), group_id))

    @app.route("/api/lessons/<int:lesson_id>", methods=["GET"], endpoint="get_lesson")
    @guards.login_required
    @api_errors("Failed to get lesson", "Get lesson")
    def get_lesson(lesson_id: int):
        return json_response(service.detail(current_identity(), lesson_id))

    @app.route("/api/lessons/<int:lesson_id>/qr.png", methods=["GET"], endpoint="lesson_qr_png")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to render QR code", "Render QR code")
    def lesson_qr_png(lesson_id: int):
        code = service.qr_code_for(current_identity(), lesson_id)
        return send_file(render_qr_png(code), mimetype="image/png")

    @app.route("/api/lessons/<int:lesson_id>", methods=["PUT"], endpoint="update_lesson")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to update lesson", "Update lesson")
    def update_lesson(lesson_id: int):
        return json_response(service.update(current_identity(), lesson_id, json_body()))

    @app.route("/api/lessons/<int:lesson_id>", methods=["DELETE"], endpoint="delete_lesson")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to delete lesson", "Delete lesson")
    def delete_lesson(lesson_id: int):
        service.delete(current_identity(), lesson_id)
        return json_response({"message": "Lesson deleted successfully"})

    @app.route("/api/lessons/<int:lesson_id>/refresh-qr", methods=["POST"], endpoint="refresh_lesson_qr")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to refresh QR code", "Refresh QR")
    def refresh_lesson_qr(lesson_id: int):
        return json_response(service.refresh_qr(current_identity(), lesson_id, json_body().get("qrCode")))

    @app.route("/api/lessons/<int:lesson_id>/end", methods=["POST"], endpoint="end_lesson")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to end lesson", "End lesson")
    def end_lesson(lesson_id: int):
        return json_response(service.end(current_identity(), lesson_id))
