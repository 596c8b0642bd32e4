from __future__ import annotations

from flask import Flask

from ..auth.guards import current_identity
from ..common.http import api_errors, json_body, json_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = container.guards

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    @api_errors("Registration failed", "Register")
    def auth_register():
        data = json_body()
        result = container.auth_service.register(
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role"),
        )
        return json_response(result, 201)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    @api_errors("Login failed", "Login")
    def auth_login():
        data = json_body()
        result = container.auth_service.login(email=data.get("email"), password=data.get("password"))
        return json_response(result)

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.login_required
    @api_errors("Failed to get user", "Get user")
    def auth_me():
        return json_response(container.auth_service.me(current_identity().user_id))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @guards.login_required
    def auth_logout():
        # Tokens are stateless; the client discards its copy.
        return json_response({"message": "Logged out successfully"})
