from __future__ import annotations

from flask import Flask

from ..auth.guards import current_identity
from ..common.http import api_errors, json_body, json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    service = container.group_service

    @app.route("/api/groups", methods=["POST"], endpoint="create_group")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to create group", "Create group")
    def create_group():
        return json_response(service.create(current_identity(), json_body()), 201)

    @app.route("/api/groups/my-groups", methods=["GET"], endpoint="my_groups")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to get groups", "Get groups")
    def my_groups():
        return json_response(service.my_groups(current_identity()))

    @app.route("/api/groups/teacher/<int:teacher_id>", methods=["GET"], endpoint="teacher_groups")
    @guards.login_required
    @api_errors("Failed to get groups", "Get teacher groups")
    def teacher_groups(teacher_id: int):
        return json_response({"groups": service.teacher_groups(current_identity(), teacher_id)})

    @app.route("/api/groups/<int:group_id>", methods=["GET"], endpoint="get_group")
    @guards.login_required
    @api_errors("Failed to get group", "Get group")
    def get_group(group_id: int):
        return json_response(service.detail(current_identity(), group_id))

    @app.route("/api/groups/<int:group_id>", methods=["PUT"], endpoint="update_group")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to update group", "Update group")
    def update_group(group_id: int):
        return json_response(service.update(current_identity(), group_id, json_body()))

    @app.route("/api/groups/<int:group_id>", methods=["DELETE"], endpoint="delete_group")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to delete group", "Delete group")
    def delete_group(group_id: int):
        service.delete(current_identity(), group_id)
        return json_response({"message": "Group deleted successfully"})

    @app.route("/api/groups/<int:group_id>/students", methods=["POST"], endpoint="add_group_student")
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to add student to group", "Add student to group")
    def add_group_student(group_id: int):
        student = service.add_student(current_identity(), group_id, json_body().get("studentId"))
        return json_response(student)

    @app.route(
        "/api/groups/<int:group_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="remove_group_student",
    )
    @guards.login_required
    @guards.teacher_required
    @api_errors("Failed to remove student from group", "Remove student from group")
    def remove_group_student(group_id: int, student_id: int):
        return json_response(service.remove_student(current_identity(), group_id, student_id))
