from __future__ import annotations

from functools import wraps

from flask import g, request

from ..common.http import error_response
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError
from .tokens import Identity, TokenService


def current_identity() -> Identity:
    return g.current_user


class AuthGuards:
    """Route decorators that authenticate bearer tokens and gate roles."""

    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def authenticate(self) -> Identity:
        header = request.headers.get("Authorization", "")
        parts = header.split(" ")
        token = parts[1].strip() if len(parts) > 1 and parts[0] == "Bearer" else ""
        if not token:
            raise AuthenticationError("Access token required")
        return self._tokens.verify(token)

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = self.authenticate()
            except DomainError as e:
                return error_response(str(e), e.status_code)
            return view(*args, **kwargs)

        return wrapper

    def role_required(self, *roles: Role):
        """Allow only the given roles. Stack below ``login_required``."""

        allowed = frozenset(roles)

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                identity = g.get("current_user")
                if identity is None or identity.role not in allowed:
                    e = AuthorizationError("Insufficient permissions")
                    return error_response(str(e), e.status_code)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def teacher_required(self, view):
        return self.role_required(Role.TEACHER)(view)

    def student_required(self, view):
        return self.role_required(Role.STUDENT)(view)
