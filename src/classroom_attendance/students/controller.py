from __future__ import annotations

from flask import Flask

from ..auth.guards import current_identity
from ..common.http import api_errors, json_body, json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.student_service

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to get students", "Get students")
    def list_students():
        return json_response(service.list_all())

    @app.route("/api/students/me", methods=["GET"], endpoint="my_student_profile")
    @guards.login_required
    @api_errors("Failed to get student profile", "Get student profile")
    def my_student_profile():
        return json_response(service.me(current_identity()))

    @app.route("/api/students/me/groups", methods=["GET"], endpoint="my_student_groups")
    @guards.login_required
    @api_errors("Failed to get groups", "Get student groups")
    def my_student_groups():
        return json_response(service.my_groups(current_identity()))

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to create student", "Create student")
    def create_student():
        return json_response(service.create(current_identity(), json_body()), 201)

    @app.route("/api/students/group/<int:group_id>", methods=["GET"], endpoint="group_students")
    @guards.login_required
    @api_errors("Failed to get students", "Get students")
    def group_students(group_id: int):
        return json_response(service.list_for_group(current_identity(), group_id))

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="get_student")
    @guards.login_required
    @api_errors("Failed to get student", "Get student")
    def get_student(student_id: int):
        return json_response(service.detail(current_identity(), student_id))

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to update student", "Update student")
    def update_student(student_id: int):
        return json_response(service.update(current_identity(), student_id, json_body()))

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to delete student", "Delete student")
    def delete_student(student_id: int):
        service.delete(current_identity(), student_id)
        return json_response({"message": "Student deleted successfully"})
